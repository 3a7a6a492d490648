#!/usr/bin/env python3
"""
Conversation history for the health chatbot.

History lives with the client: the browser (or ``HealthChatClient``) keeps a
rolling window and sends it with every chat request. The server only
normalizes what it receives. Nothing is stored server-side.
"""

from typing import Any, Dict, List, Optional

from .config import Config
from ..utils.logger import get_logger

logger = get_logger()

VALID_ROLES = ("user", "assistant", "system")

class ConversationHistory:
    """Rolling window of chat messages, trimmed from the oldest end."""

    def __init__(self, max_messages: int = Config.MAX_HISTORY_MESSAGES,
                 messages: Optional[List[Dict[str, str]]] = None):
        self.max_messages = max_messages
        self.messages: List[Dict[str, str]] = []
        for message in messages or []:
            self.add_message(message["role"], message["content"])

    @classmethod
    def from_payload(cls, payload: Any, max_messages: int = Config.MAX_HISTORY_MESSAGES) -> "ConversationHistory":
        """
        Build a history from client-supplied JSON.

        Entries that are not ``{role, content}`` objects with a known role
        and string content are dropped.
        """
        history = cls(max_messages=max_messages)
        if not isinstance(payload, list):
            return history

        dropped = 0
        for item in payload:
            if (isinstance(item, dict)
                    and item.get("role") in VALID_ROLES
                    and isinstance(item.get("content"), str)):
                history.add_message(item["role"], item["content"])
            else:
                dropped += 1
        if dropped:
            logger.debug(f"[SESSION] Dropped {dropped} malformed history entries")
        return history

    def add_message(self, role: str, content: str) -> None:
        if role not in VALID_ROLES:
            raise ValueError(f"Unknown role: {role}")
        self.messages.append({"role": role, "content": content})
        self._trim()

    def add_exchange(self, user_message: str, assistant_message: str) -> None:
        self.add_message("user", user_message)
        self.add_message("assistant", assistant_message)

    def _trim(self) -> None:
        if len(self.messages) > self.max_messages:
            self.messages = self.messages[-self.max_messages:]

    def recent(self, max_messages: int = Config.MAX_CONTEXT_MESSAGES) -> List[Dict[str, str]]:
        """Return copies of the last ``max_messages`` messages."""
        if max_messages <= 0:
            return []
        return [dict(m) for m in self.messages[-max_messages:]]

    def as_list(self) -> List[Dict[str, str]]:
        return [dict(m) for m in self.messages]

    def clear(self) -> None:
        self.messages = []

    def __len__(self) -> int:
        return len(self.messages)
