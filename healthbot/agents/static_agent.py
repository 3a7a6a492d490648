"""Static Agent: canned answers for common health topics.

Deterministic and offline: used for keyword topics and whenever no LLM is configured.
"""
from typing import Dict, List, Optional
from .base_agent import BaseAgent
from ..nlu.rules import GENERIC_TOPIC, match_static_topic
from ..schemas.io_models import ChatAnswer

class StaticAgent(BaseAgent):
    name = "static"
    provider = "fallback"

    def handle(self, query: str, history: Optional[List[Dict[str, str]]] = None) -> ChatAnswer:
        topic = match_static_topic(query) or GENERIC_TOPIC
        return self._ok(topic.message, image_search_term=topic.image_search_term)
