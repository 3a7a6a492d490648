#!/usr/bin/env python3
"""
Configuration management for the health chat backend.
"""

import os
from dotenv import load_dotenv

from ..utils.logger import get_logger

# Load environment variables from .env file
load_dotenv()

logger = get_logger()

DEV_TOKEN_SECRET = "change-me-in-production"


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


class Config:
    """Configuration class for the application."""

    # OpenAI-compatible API (chat completions + embeddings)
    OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
    OPENAI_BASE_URL = os.getenv("OPENAI_BASE_URL", "https://api.openai.com/v1").rstrip("/")
    CHAT_MODEL = os.getenv("CHAT_MODEL", "gpt-3.5-turbo")
    EMBEDDING_MODEL = os.getenv("EMBEDDING_MODEL", "text-embedding-ada-002")

    # Supabase vector store (PostgREST RPC over pgvector)
    SUPABASE_URL = os.getenv("SUPABASE_URL", "").rstrip("/")
    SUPABASE_SERVICE_ROLE_KEY = os.getenv("SUPABASE_SERVICE_ROLE_KEY", "")
    MATCH_FUNCTION = os.getenv("MATCH_FUNCTION", "match_documents")
    MATCH_THRESHOLD = float(os.getenv("MATCH_THRESHOLD", 0.68))
    MATCH_COUNT = int(os.getenv("MATCH_COUNT", 5))

    # Generation settings
    RAG_MAX_TOKENS = int(os.getenv("RAG_MAX_TOKENS", 512))
    CHAT_MAX_TOKENS = int(os.getenv("CHAT_MAX_TOKENS", 500))
    CHAT_TEMPERATURE = float(os.getenv("CHAT_TEMPERATURE", 0.7))

    # Chat limits
    MAX_MESSAGE_LENGTH = 1000
    MAX_HISTORY_MESSAGES = int(os.getenv("MAX_HISTORY_MESSAGES", 20))
    MAX_CONTEXT_MESSAGES = int(os.getenv("MAX_CONTEXT_MESSAGES", 10))

    # Credential store: relational backend when set, in-memory otherwise
    DATABASE_URL = os.getenv("DATABASE_URL", "")

    # Auth tokens
    AUTH_TOKEN_SECRET = os.getenv("AUTH_TOKEN_SECRET", DEV_TOKEN_SECRET)
    TOKEN_TTL_HOURS = int(os.getenv("TOKEN_TTL_HOURS", 24))
    ALLOW_UNSIGNED_TOKENS = _env_bool("ALLOW_UNSIGNED_TOKENS")

    # Misc
    HTTP_TIMEOUT = float(os.getenv("HTTP_TIMEOUT", 60))
    PING_MESSAGE = os.getenv("PING_MESSAGE", "ping")

    @classmethod
    def llm_configured(cls) -> bool:
        return bool(cls.OPENAI_API_KEY)

    @classmethod
    def vector_store_configured(cls) -> bool:
        return bool(cls.SUPABASE_URL and cls.SUPABASE_SERVICE_ROLE_KEY and cls.OPENAI_API_KEY)

    @classmethod
    def debug_print(cls):
        logger.info(f"[CONFIG] CHAT_MODEL={cls.CHAT_MODEL} set={cls.llm_configured()}")
        logger.info(f"[CONFIG] EMBEDDING_MODEL={cls.EMBEDDING_MODEL} vector_store={cls.vector_store_configured()}")
        logger.info(f"[CONFIG] MATCH_THRESHOLD={cls.MATCH_THRESHOLD} MATCH_COUNT={cls.MATCH_COUNT}")
        logger.info(f"[CONFIG] USER_STORE={'sql' if cls.DATABASE_URL else 'memory'}")

    @classmethod
    def validate(cls):
        """Report missing optional backends. Every backend has a fallback, so nothing is fatal."""
        warnings = []

        if not cls.OPENAI_API_KEY:
            warnings.append("OPENAI_API_KEY not set; chat uses static fallback responses")
        elif not cls.vector_store_configured():
            warnings.append("SUPABASE_URL/SUPABASE_SERVICE_ROLE_KEY not set; retrieval disabled")
        if not cls.DATABASE_URL:
            warnings.append("DATABASE_URL not set; users are kept in memory and lost on restart")
        if cls.AUTH_TOKEN_SECRET == DEV_TOKEN_SECRET:
            warnings.append("AUTH_TOKEN_SECRET uses the development default")

        for warning in warnings:
            logger.warning(f"[CONFIG] {warning}")

        return not warnings

# Validate configuration on import
Config.validate()
