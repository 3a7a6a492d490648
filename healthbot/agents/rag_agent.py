"""RAG Agent: answers grounded in the document store."""
from typing import Dict, List, Optional
from .base_agent import BaseAgent
from ..app.rag import RAGPipeline
from ..schemas.io_models import ChatAnswer

class RAGAgent(BaseAgent):
    name = "rag"
    provider = "openai"

    def __init__(self, pipeline: RAGPipeline):
        self.pipeline = pipeline

    def handle(self, query: str, history: Optional[List[Dict[str, str]]] = None) -> ChatAnswer:
        # Grounded answers ignore history and carry no image tag
        result = self.pipeline.answer(query)
        return self._ok(result.answer, matches=result.matches)
