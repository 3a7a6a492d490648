#!/usr/bin/env python3
"""
Postprocessing module for the health chatbot.

This module pulls ``[IMAGE_SUGGESTION: term]`` tags out of LLM replies so the
client gets clean text plus an optional image search term.
"""

import re
from typing import Optional, Tuple

IMAGE_TAG_RE = re.compile(r"\[IMAGE_SUGGESTION:\s*([^\]]+)\]")
ANY_IMAGE_TAG_RE = re.compile(r"\[IMAGE_SUGGESTION:[^\]]+\]")

class Postprocessor:
    """Postprocesses LLM responses for the health chatbot."""

    def extract_image_suggestion(self, response: str) -> Tuple[str, Optional[str]]:
        """
        Split a raw reply into visible text and an image search term.

        Args:
            response: Raw LLM reply

        Returns:
            ``(clean_text, term)``; term is the first tag's text or None.
            Every tag is removed from the text.
        """
        match = IMAGE_TAG_RE.search(response)
        term = match.group(1).strip() if match else None
        clean = ANY_IMAGE_TAG_RE.sub("", response).strip()
        return clean, term or None
