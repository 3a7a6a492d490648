"""BaseAgent interface for all agents."""
from abc import ABC, abstractmethod
from typing import Dict, List, Optional
from ..schemas.io_models import ChatAnswer, RetrievedMatch

class BaseAgent(ABC):
    name: str = "base"
    provider: str = "fallback"

    @abstractmethod
    def handle(self, query: str, history: Optional[List[Dict[str, str]]] = None) -> ChatAnswer:
        """Answer one validated chat message."""
        ...

    def _ok(self, message: str, image_search_term: Optional[str] = None,
            matches: Optional[List[RetrievedMatch]] = None) -> ChatAnswer:
        return ChatAnswer(
            agent=self.name,
            message=message,
            image_search_term=image_search_term,
            provider=self.provider,
            matches=matches or [],
        )
