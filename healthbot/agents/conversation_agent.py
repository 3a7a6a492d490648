"""Conversation Agent: free-form health chat with the LLM and recent history."""
from typing import Dict, List, Optional
from .base_agent import BaseAgent
from ..app.config import Config
from ..app.generate import GenerationClient
from ..app.postprocess import Postprocessor
from ..app.prompt_builder import PromptBuilder
from ..schemas.io_models import ChatAnswer
from ..utils.logger import get_logger

logger = get_logger()

EMPTY_REPLY = "I apologize, but I couldn't generate a response. Please try again."

class ConversationAgent(BaseAgent):
    name = "conversation"
    provider = "openai"

    def __init__(self, gen_client: GenerationClient, prompt_builder: Optional[PromptBuilder] = None,
                 postprocessor: Optional[Postprocessor] = None,
                 context_messages: int = Config.MAX_CONTEXT_MESSAGES,
                 temperature: float = Config.CHAT_TEMPERATURE,
                 max_tokens: int = Config.CHAT_MAX_TOKENS):
        self.gen_client = gen_client
        self.prompt_builder = prompt_builder or PromptBuilder()
        self.postprocessor = postprocessor or Postprocessor()
        self.context_messages = context_messages
        self.temperature = temperature
        self.max_tokens = max_tokens

    def handle(self, query: str, history: Optional[List[Dict[str, str]]] = None) -> ChatAnswer:
        recent = (history or [])[-self.context_messages:] if self.context_messages > 0 else []
        messages = self.prompt_builder.build_conversation_messages(query, recent)
        logger.info(f"[WORKFLOW] Conversation agent calling LLM with {len(recent)} history messages")

        reply = self.gen_client.generate(
            messages,
            temperature=self.temperature,
            max_tokens=self.max_tokens,
            presence_penalty=0.1,
            frequency_penalty=0.1,
        )
        message, image_term = self.postprocessor.extract_image_suggestion(reply or EMPTY_REPLY)
        return self._ok(message or EMPTY_REPLY, image_search_term=image_term)
