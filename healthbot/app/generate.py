#!/usr/bin/env python3
"""
Generation module for the health chatbot.

This module handles answer generation through an OpenAI-compatible
chat completions API.
"""

import requests
from typing import Any, Dict, List, Optional
from .config import Config
from .errors import GenerationError
from ..utils.logger import get_logger

logger = get_logger()

class GenerationClient:
    """Client for generating answers with a chat completions LLM API."""

    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None,
                 base_url: Optional[str] = None, timeout: Optional[float] = None,
                 http: Optional[requests.Session] = None):
        """Initialize the generation client."""
        self.api_key = api_key or Config.OPENAI_API_KEY
        self.llm_model = model or Config.CHAT_MODEL
        self.api_url = f"{(base_url or Config.OPENAI_BASE_URL).rstrip('/')}/chat/completions"
        self.timeout = timeout or Config.HTTP_TIMEOUT
        self.http = http or requests.Session()

        if not self.api_key:
            raise ValueError("LLM API key is required")

    def generate(self, messages: List[Dict[str, str]], temperature: float = 0.0,
                 max_tokens: int = 512, **options: Any) -> str:
        """
        Generate a reply for a list of chat messages.

        Args:
            messages: ``[{role, content}, ...]`` with the system message first
            temperature: Sampling temperature (0 for deterministic answers)
            max_tokens: Upper bound on the reply length
            **options: Extra completion parameters (presence_penalty, ...)

        Returns:
            Reply text, possibly empty

        Raises:
            GenerationError: the LLM API failed or answered unexpectedly
        """
        payload = {
            "model": self.llm_model,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
            **options,
        }
        logger.debug(f"[GENERATE] {self.llm_model}: {len(messages)} messages, max_tokens={max_tokens}")

        try:
            response = self.http.post(
                self.api_url,
                headers={"Authorization": f"Bearer {self.api_key}"},
                json=payload,
                timeout=self.timeout,
            )
            response.raise_for_status()
            data = response.json()
            answer = data["choices"][0]["message"].get("content") or ""
            if not isinstance(answer, str):
                raise TypeError(f"completion content is {type(answer).__name__}, not text")
        except requests.exceptions.RequestException as e:
            body = e.response.text if getattr(e, "response", None) is not None else ""
            logger.error(f"[GENERATE] Error generating answer: {e} {body}")
            raise GenerationError(detail=str(e)) from e
        except (KeyError, IndexError, TypeError, AttributeError, ValueError) as e:
            logger.error(f"[GENERATE] Error parsing generation response: {e}")
            raise GenerationError(detail=f"bad completion response: {e}") from e

        answer = answer.strip()
        logger.debug(f"[GENERATE] Extracted answer, length: {len(answer)}")
        return answer

def main():
    """Main function for testing the generation client."""
    try:
        gen_client = GenerationClient()
        print("Generation client initialized successfully")

        answer = gen_client.generate([
            {"role": "system", "content": "You are a concise health assistant."},
            {"role": "user", "content": "Why is sleep important?"},
        ])
        print("\nGenerated answer:")
        print("-" * 40)
        print(answer)
        print("-" * 40)

    except Exception as e:
        print(f"Error: {e}")

if __name__ == "__main__":
    main()
