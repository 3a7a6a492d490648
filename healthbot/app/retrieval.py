#!/usr/bin/env python3
"""
Retrieval module for the health chatbot.

This module runs vector similarity search against the Supabase document store.
The store exposes a Postgres function (``match_documents`` by default) over
pgvector, called through the PostgREST RPC endpoint:

    match_documents(query_embedding vector, match_threshold float, match_count int)
      returns table (id, content, metadata, similarity)

Rows come back ordered by similarity, highest first. Ingestion and indexing
happen elsewhere; this module only reads.
"""

import requests
from typing import Any, Dict, List, Optional
from .config import Config
from .errors import RetrievalError
from ..schemas.io_models import RetrievedMatch
from ..utils.logger import get_logger

logger = get_logger()

class VectorRetriever:
    """Similarity search over pre-embedded document chunks."""

    def __init__(self, supabase_url: Optional[str] = None, service_key: Optional[str] = None,
                 function_name: Optional[str] = None, threshold: Optional[float] = None,
                 top_k: Optional[int] = None, timeout: Optional[float] = None,
                 http: Optional[requests.Session] = None):
        """Initialize the retriever."""
        self.supabase_url = (supabase_url or Config.SUPABASE_URL).rstrip("/")
        self.service_key = service_key or Config.SUPABASE_SERVICE_ROLE_KEY
        self.function_name = function_name or Config.MATCH_FUNCTION
        self.threshold = Config.MATCH_THRESHOLD if threshold is None else threshold
        self.top_k = Config.MATCH_COUNT if top_k is None else top_k
        self.timeout = timeout or Config.HTTP_TIMEOUT
        self.http = http or requests.Session()

        if not self.supabase_url or not self.service_key:
            raise ValueError("Supabase URL and service role key are required")

        self.rpc_url = f"{self.supabase_url}/rest/v1/rpc/{self.function_name}"

    def _headers(self) -> Dict[str, str]:
        return {
            "apikey": self.service_key,
            "Authorization": f"Bearer {self.service_key}",
            "Content-Type": "application/json",
        }

    @staticmethod
    def _to_match(row: Dict[str, Any]) -> RetrievedMatch:
        return RetrievedMatch(
            id=row.get("id"),
            content=row.get("content") or "",
            metadata=row.get("metadata") or {},
            similarity=float(row.get("similarity") or 0.0),
        )

    def search(self, query_embedding: List[float], threshold: Optional[float] = None,
               top_k: Optional[int] = None) -> List[RetrievedMatch]:
        """
        Find stored chunks similar to a query embedding.

        Args:
            query_embedding: Query vector
            threshold: Minimum similarity (defaults to the configured 0.68)
            top_k: Maximum number of matches (defaults to the configured 5)

        Returns:
            Matches ordered by similarity; an empty list when nothing clears the threshold

        Raises:
            RetrievalError: the vector store failed or answered unexpectedly
        """
        threshold = self.threshold if threshold is None else threshold
        top_k = self.top_k if top_k is None else top_k
        payload = {
            "query_embedding": query_embedding,
            "match_threshold": threshold,
            "match_count": top_k,
        }

        try:
            response = self.http.post(self.rpc_url, headers=self._headers(), json=payload,
                                      timeout=self.timeout)
            response.raise_for_status()
            rows = response.json()
            if not isinstance(rows, list):
                raise TypeError(f"expected a list of rows, got {type(rows).__name__}")
            matches = [self._to_match(row) for row in rows]
        except requests.exceptions.RequestException as e:
            body = e.response.text if getattr(e, "response", None) is not None else ""
            logger.error(f"[RETRIEVAL] Vector search failed: {e} {body}")
            raise RetrievalError(detail=str(e)) from e
        except (AttributeError, TypeError, ValueError) as e:
            logger.error(f"[RETRIEVAL] Unexpected vector search response: {e}")
            raise RetrievalError(detail=f"bad search response: {e}") from e

        logger.info(f"[RETRIEVAL] {len(matches)} matches above {threshold} (top_k={top_k})")
        return matches[:top_k]
