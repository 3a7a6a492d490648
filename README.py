"""
HealthCare+ Chat: System Documentation
======================================

This module-style README documents the architecture, components, data flows,
and operational practices of the HealthCare+ chat backend. It can be imported
to surface sections programmatically or printed for human consumption.

How to use this file
--------------------
- View in an editor for structured reading.
- Run `python README.py` to print the outline.
- Import `README` in tools or scripts to surface sections.

Table of Contents
-----------------
1. System Overview
2. Architecture
3. Backend Components
4. Accounts & Tokens
5. Answer Routing
6. RAG Pipeline
7. Conversation History
8. HTTP API
9. Configuration & Environment
10. Testing Strategy
11. Security & PII Handling
12. Running Locally
13. Troubleshooting

"""

from __future__ import annotations

import textwrap


def section(title: str, body: str) -> str:
    return f"\n{title}\n{'-' * len(title)}\n{body.strip()}\n"


SYSTEM_OVERVIEW = section(
    "1. System Overview",
    """
    HealthCare+ is a health-information chat service. Users create an account,
    log in, and ask health questions. Answers come from canned topic replies,
    a retrieval-augmented generation (RAG) pipeline over a document store, or
    a conversational LLM path when no document store is configured.
    """,
)


ARCHITECTURE = section(
    "2. Architecture",
    """
    - Backend: FastAPI app (`healthbot/app/main.py`) exposing auth, user and chat routes.
    - Controller: validates messages and routes them to an agent.
    - Agents: `static`, `rag`, `conversation`.
    - Data: users in a SQL database via SQLAlchemy, or in memory when no DATABASE_URL is set.
    - RAG: OpenAI-compatible embeddings + Supabase `match_documents` RPC + chat completions.
    - Client: `healthbot/client.py` keeps the conversation window on the caller's side.
    """,
)


BACKEND_COMPONENTS = section(
    "3. Backend Components",
    """
    app/
      - main.py: FastAPI app factory, routes, CORS, error handlers.
      - controller.py: message validation and agent routing.
      - config.py: env-driven configuration (keys, URLs, models, limits).
      - errors.py: error taxonomy with HTTP status and client message.
      - preprocess.py/postprocess.py: message checks and image tag extraction.
      - embed.py/retrieval.py/generate.py/prompt_builder.py/rag.py: RAG stack.
      - session.py: rolling conversation window.

    auth/
      - passwords.py: salted SHA-256 hashes stored as `hash:salt`.
      - tokens.py: signed, expiring bearer tokens.
      - service.py: signup, login, profile and password flows.

    agents/
      - base_agent.py: interface/contract for agents.
      - static_agent.py, rag_agent.py, conversation_agent.py.

    data/
      - database.py/models.py: SQLAlchemy engine, session factory, `users` table.
      - user_store.py: credential store interface with SQL and in-memory backends.
    """,
)


ACCOUNTS = section(
    "4. Accounts & Tokens",
    """
    - Signup needs full name, email and a password of at least 6 characters.
    - Emails are unique. The SQL backend enforces it with a unique index as well.
    - Login failures return the same 401 for unknown email and wrong password.
    - Tokens are base64 JSON `{userId, timestamp, exp, v, sig}` valid for 24 hours.
      `sig` is an HMAC-SHA256 over userId, timestamp and exp.
    - Old unsigned tokens are only accepted with ALLOW_UNSIGNED_TOKENS=true.
    - Logging out is client-side; tokens are not revoked.
    """,
)


ROUTING = section(
    "5. Answer Routing",
    """
    1. Messages mentioning headache, fever, exercise or diet get a canned answer.
    2. Otherwise the RAG agent answers when the vector store is configured.
    3. Otherwise the conversation agent answers when an LLM key is configured.
    4. Otherwise a generic canned answer is returned.
    Canned answers never call an external service.
    """,
)


RAG_PIPELINE = section(
    "6. RAG Pipeline",
    """
    - Embed the question (`embed.py`).
    - Search `match_documents` with threshold 0.68 and up to 5 matches (`retrieval.py`).
    - Join match contents with `---` into one context block (`prompt_builder.py`).
    - Generate with temperature 0 and a prompt that answers only from context,
      replying "I don't know." otherwise (`generate.py`).
    - Any stage failure ends the request with a 500 "technical difficulties" reply.
    """,
)


HISTORY = section(
    "7. Conversation History",
    """
    - The server keeps no chat state; clients send `conversationHistory` each time.
    - Clients keep the last 20 messages and append only after a successful reply.
    - The conversation agent uses the last 10 of them as prompt context.
    """,
)


HTTP_API = section(
    "8. HTTP API",
    """
    - POST /api/auth/signup, POST /api/auth/login, GET /api/auth/profile
    - PUT  /api/user/profile, PUT /api/user/password (Bearer token)
    - POST /api/chat, GET /api/chat/status
    - GET  /api/ping, GET /health
    Errors are `{"success": false, "message": ...}` with 400/401/404/500.
    """,
)


CONFIG_ENV = section(
    "9. Configuration & Environment",
    """
    - `.env` is loaded by `app/config.py`.
    - OPENAI_API_KEY, OPENAI_BASE_URL, CHAT_MODEL, EMBEDDING_MODEL
    - SUPABASE_URL, SUPABASE_SERVICE_ROLE_KEY, MATCH_FUNCTION, MATCH_THRESHOLD, MATCH_COUNT
    - DATABASE_URL (empty: in-memory users), AUTH_TOKEN_SECRET, TOKEN_TTL_HOURS
    - ALLOW_UNSIGNED_TOKENS, HTTP_TIMEOUT, LOG_LEVEL
    Missing backends only produce warnings; every path has a fallback.
    """,
)


TESTING = section(
    "10. Testing Strategy",
    """
    - Unit tests in `tests/` (unittest style, run with pytest).
    - HTTP clients are tested against mocked `requests` sessions.
    - API tests use FastAPI's TestClient with an in-memory user store.
    - `python tests/run_tests.py --auth|--chat|--api|--all [--coverage]`.
    """,
)


SECURITY = section(
    "11. Security & PII Handling",
    """
    - `utils/security.py`: email masking in logs; passwords and tokens are never logged.
    - Passwords are salted and hashed; comparisons are constant-time.
    - Set AUTH_TOKEN_SECRET in production; the default only suits development.
    - Keys are loaded from env; do not commit secrets.
    """,
)


RUNNING = section(
    "12. Running Locally",
    """
    - `pip install -e '.[test]'`
    - `python -m healthbot.data.database` creates the users table for DATABASE_URL.
    - `uvicorn healthbot.app.main:app --reload`
    """,
)


TROUBLESHOOTING = section(
    "13. Troubleshooting",
    """
    - Every chat reply is canned: OPENAI_API_KEY is not set.
    - Replies never use documents: SUPABASE_URL or SUPABASE_SERVICE_ROLE_KEY is missing.
    - Users vanish after restart: DATABASE_URL is not set.
    - All tokens rejected after deploy: AUTH_TOKEN_SECRET changed between instances.
    """,
)


def as_text() -> str:
    return "\n".join(
        [
            SYSTEM_OVERVIEW,
            ARCHITECTURE,
            BACKEND_COMPONENTS,
            ACCOUNTS,
            ROUTING,
            RAG_PIPELINE,
            HISTORY,
            HTTP_API,
            CONFIG_ENV,
            TESTING,
            SECURITY,
            RUNNING,
            TROUBLESHOOTING,
        ]
    )


def main() -> None:
    print(textwrap.dedent(as_text()))


if __name__ == "__main__":
    main()
