"""Controller / Orchestrator: validates chat messages and routes them to agents.

Routing:
  1. keyword topic (headache, fever, ...) -> static agent, no external calls
  2. otherwise -> RAG agent when a vector store is configured
  3. otherwise -> conversation agent when an LLM is configured
  4. otherwise -> static agent (generic answer)
"""
from typing import Any, Dict, Optional

from .config import Config
from .preprocess import Preprocessor
from .session import ConversationHistory
from ..agents.base_agent import BaseAgent
from ..agents.static_agent import StaticAgent
from ..nlu.rules import has_static_topic
from ..schemas.io_models import ChatAnswer
from ..utils.logger import get_logger
from ..utils.security import mask_pii

logger = get_logger()

class Controller:
    def __init__(self, static_agent: Optional[StaticAgent] = None,
                 rag_agent: Optional[BaseAgent] = None,
                 conversation_agent: Optional[BaseAgent] = None,
                 preprocessor: Optional[Preprocessor] = None,
                 max_history: int = Config.MAX_HISTORY_MESSAGES):
        self.static_agent = static_agent or StaticAgent()
        self.rag_agent = rag_agent
        self.conversation_agent = conversation_agent
        self.preprocessor = preprocessor or Preprocessor()
        self.max_history = max_history

    @property
    def ai_available(self) -> bool:
        return self.rag_agent is not None or self.conversation_agent is not None

    @property
    def provider(self) -> str:
        return "openai" if self.ai_available else "fallback"

    def route(self, query: str) -> BaseAgent:
        """Pick the agent for an already validated message."""
        if has_static_topic(self.preprocessor.normalize_text(query)):
            return self.static_agent
        if self.rag_agent is not None:
            return self.rag_agent
        if self.conversation_agent is not None:
            return self.conversation_agent
        return self.static_agent

    def handle_query(self, query: Any, conversation_history: Any = None) -> ChatAnswer:
        logger.info("[WORKFLOW] 1. Controller received chat message")
        message = self.preprocessor.validate_message(query)
        logger.debug(f"[WORKFLOW] Message: {mask_pii(message[:80])}")

        history = ConversationHistory.from_payload(conversation_history, max_messages=self.max_history)

        agent = self.route(message)
        logger.info(f"[WORKFLOW] 2. Routed to agent '{agent.name}'")

        answer = agent.handle(message, history=history.as_list())
        logger.info(f"[WORKFLOW] 3. Agent '{agent.name}' answered ({len(answer.message)} chars)")
        return answer

    def status(self) -> Dict[str, Any]:
        return {
            "aiAvailable": self.ai_available,
            "provider": self.provider,
            "status": "operational",
        }
