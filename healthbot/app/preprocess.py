#!/usr/bin/env python3
"""
Preprocessing module for the health chatbot.

This module validates incoming chat messages before any routing happens.
"""

import re
from typing import Any

from .config import Config
from .errors import EmptyMessage, MessageTooLong

class Preprocessor:
    """Preprocessor for health chatbot queries."""

    def __init__(self, max_length: int = Config.MAX_MESSAGE_LENGTH):
        """Initialize the preprocessor."""
        self.max_length = max_length

    def validate_message(self, message: Any) -> str:
        """
        Check a raw chat message.

        Args:
            message: Message as received from the client

        Returns:
            The message, unchanged

        Raises:
            EmptyMessage: not a string, empty, or whitespace only
            MessageTooLong: longer than ``max_length`` characters
        """
        if not isinstance(message, str) or not message.strip():
            raise EmptyMessage()
        if len(message) > self.max_length:
            raise MessageTooLong(
                f"Message is too long. Please keep your message under {self.max_length} characters."
            )
        return message

    def normalize_text(self, text: str) -> str:
        """
        Normalize text for keyword matching.

        Args:
            text: Input text to normalize

        Returns:
            Lowercased text with collapsed whitespace
        """
        if not text:
            return ""
        return re.sub(r'\s+', ' ', text.lower()).strip()
