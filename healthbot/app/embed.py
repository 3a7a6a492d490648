#!/usr/bin/env python3
"""
Embedding module for the health chatbot.

This module turns text into vectors through an OpenAI-compatible embeddings API.
"""

import requests
from typing import List, Optional
from .config import Config
from .errors import EmbeddingServiceError
from ..utils.logger import get_logger

logger = get_logger()

class EmbeddingClient:
    """Client for generating text embeddings via the embeddings endpoint."""

    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None,
                 base_url: Optional[str] = None, timeout: Optional[float] = None,
                 http: Optional[requests.Session] = None):
        """Initialize the embedding client."""
        self.api_key = api_key or Config.OPENAI_API_KEY
        self.model = model or Config.EMBEDDING_MODEL
        self.api_url = f"{(base_url or Config.OPENAI_BASE_URL).rstrip('/')}/embeddings"
        self.timeout = timeout or Config.HTTP_TIMEOUT
        self.http = http or requests.Session()

        if not self.api_key:
            raise ValueError("Embedding API key is required")

    def generate_embedding(self, text: str) -> List[float]:
        """
        Generate embedding for a text string.

        Args:
            text: Text to embed

        Returns:
            Embedding vector as a list of floats

        Raises:
            EmbeddingServiceError: the embeddings API failed or answered unexpectedly
        """
        logger.debug(f"[EMBED] Embedding text of length {len(text)} with {self.model}")
        try:
            response = self.http.post(
                self.api_url,
                headers={"Authorization": f"Bearer {self.api_key}"},
                json={"model": self.model, "input": text},
                timeout=self.timeout,
            )
            response.raise_for_status()
            data = response.json()
            embedding = [float(x) for x in data["data"][0]["embedding"]]
        except requests.exceptions.RequestException as e:
            body = e.response.text if getattr(e, "response", None) is not None else ""
            logger.error(f"[EMBED] Embedding request failed: {e} {body}")
            raise EmbeddingServiceError(detail=str(e)) from e
        except (KeyError, IndexError, TypeError, ValueError) as e:
            logger.error(f"[EMBED] Unexpected embedding response: {e}")
            raise EmbeddingServiceError(detail=f"bad embedding response: {e}") from e

        logger.debug(f"[EMBED] Got embedding with {len(embedding)} dimensions")
        return embedding

def main():
    """Main function for testing the embedding client."""
    try:
        embed_client = EmbeddingClient()
        print("Embedding client initialized successfully")

        embedding = embed_client.generate_embedding("How much water should I drink every day?")
        print(f"Embedding dimension: {len(embedding)}")
        print(f"First 5 values: {embedding[:5]}")

    except Exception as e:
        print(f"Error: {e}")

if __name__ == "__main__":
    main()
