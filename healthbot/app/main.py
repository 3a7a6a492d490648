#!/usr/bin/env python3
"""
Main FastAPI application for the health chatbot.

Routes:
  POST /api/auth/signup, POST /api/auth/login, GET /api/auth/profile
  PUT  /api/user/profile, PUT /api/user/password
  POST /api/chat, GET /api/chat/status
  GET  /api/ping, GET /health
"""

from typing import Optional

from fastapi import FastAPI, Header, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import Config
from .controller import Controller
from .embed import EmbeddingClient
from .errors import ChatPipelineError, HealthBotError, TokenInvalid, UserNotFound, ValidationError
from .generate import GenerationClient
from .rag import RAGPipeline
from .retrieval import VectorRetriever
from ..agents.conversation_agent import ConversationAgent
from ..agents.rag_agent import RAGAgent
from ..auth.service import AuthService
from ..auth.tokens import TokenService
from ..data.user_store import build_user_store
from ..schemas.io_models import (
    AuthResponse,
    ChatRequest,
    ChatResponse,
    ChatStatusResponse,
    LoginRequest,
    SignupRequest,
    UpdatePasswordRequest,
    UpdateProfileRequest,
)
from ..utils.logger import get_logger

logger = get_logger()

AI_UNAVAILABLE = "AI service temporarily unavailable"


def build_auth_service() -> AuthService:
    """Credential store and token service, chosen once from the environment."""
    store = build_user_store(Config.DATABASE_URL)
    tokens = TokenService(
        Config.AUTH_TOKEN_SECRET,
        ttl_hours=Config.TOKEN_TTL_HOURS,
        allow_unsigned=Config.ALLOW_UNSIGNED_TOKENS,
    )
    return AuthService(store, tokens)


def build_controller() -> Controller:
    """Wire the agents that the configured backends allow."""
    rag_agent = None
    conversation_agent = None
    if Config.llm_configured():
        gen_client = GenerationClient()
        conversation_agent = ConversationAgent(gen_client)
        if Config.vector_store_configured():
            pipeline = RAGPipeline(EmbeddingClient(), VectorRetriever(), gen_client)
            rag_agent = RAGAgent(pipeline)
    return Controller(rag_agent=rag_agent, conversation_agent=conversation_agent)


def _error(status_code: int, message: str, **extra) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "message": message, **extra})


def create_app(auth_service: Optional[AuthService] = None,
               controller: Optional[Controller] = None) -> FastAPI:
    app = FastAPI(
        title="HealthCare+ Chat API",
        description="Health information chatbot with accounts and retrieval-augmented answers",
        version="1.0.0",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # In production, specify your frontend domain
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.auth_service = auth_service or build_auth_service()
    app.state.controller = controller or build_controller()

    @app.exception_handler(HealthBotError)
    async def healthbot_error_handler(request: Request, exc: HealthBotError):
        if exc.status_code >= 500:
            logger.error(f"[API] {request.method} {request.url.path} failed: {exc.message} ({exc.detail})")
        return _error(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return _error(400, "Invalid request body")

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception(f"[API] {request.method} {request.url.path} crashed: {exc}")
        return _error(500, "Internal server error")

    # Auth

    @app.post("/api/auth/signup", response_model=AuthResponse, response_model_exclude_none=True)
    def signup(body: SignupRequest, request: Request):
        result = request.app.state.auth_service.signup(body.full_name, body.email, body.password)
        return AuthResponse(success=True, **result)

    @app.post("/api/auth/login", response_model=AuthResponse, response_model_exclude_none=True)
    def login(body: LoginRequest, request: Request):
        result = request.app.state.auth_service.login(body.email, body.password)
        return AuthResponse(success=True, **result)

    @app.get("/api/auth/profile", response_model=AuthResponse, response_model_exclude_none=True)
    def get_profile(request: Request, authorization: Optional[str] = Header(None)):
        try:
            result = request.app.state.auth_service.get_profile(authorization)
        except UserNotFound:
            # Profile lookup must not reveal whether an account still exists
            raise TokenInvalid()
        return AuthResponse(success=True, **result)

    # User

    @app.put("/api/user/profile", response_model=AuthResponse, response_model_exclude_none=True)
    def update_profile(body: UpdateProfileRequest, request: Request,
                       authorization: Optional[str] = Header(None)):
        result = request.app.state.auth_service.update_profile(authorization, body.full_name, body.email)
        return AuthResponse(success=True, **result)

    @app.put("/api/user/password", response_model=AuthResponse, response_model_exclude_none=True)
    def update_password(body: UpdatePasswordRequest, request: Request,
                        authorization: Optional[str] = Header(None)):
        result = request.app.state.auth_service.update_password(
            authorization, body.current_password, body.new_password
        )
        return AuthResponse(success=True, **result)

    # Chat

    @app.post("/api/chat", response_model=ChatResponse, response_model_exclude_none=True)
    def chat(body: ChatRequest, request: Request):
        controller: Controller = request.app.state.controller
        try:
            answer = controller.handle_query(body.message, body.conversation_history)
        except ValidationError as e:
            return _error(e.status_code, e.message, aiProvider="fallback")
        except ChatPipelineError as e:
            logger.error(f"[API] Chat pipeline failed: {type(e).__name__}: {e.detail}")
            return _error(500, e.message, aiProvider=controller.provider, error=AI_UNAVAILABLE)
        except Exception:
            logger.exception("[API] Chat endpoint error")
            return _error(500, ChatPipelineError.default_message, aiProvider="fallback",
                          error="Internal server error")

        return ChatResponse(
            success=True,
            message=answer.message,
            imageSearchTerm=answer.image_search_term,
            aiProvider=answer.provider,
        )

    @app.get("/api/chat/status", response_model=ChatStatusResponse)
    def chat_status(request: Request):
        return request.app.state.controller.status()

    # Misc

    @app.get("/api/ping")
    def ping():
        return {"message": Config.PING_MESSAGE}

    @app.get("/health")
    def health_check():
        """Health check endpoint."""
        return {"status": "healthy"}

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    Config.debug_print()
    uvicorn.run(app, host="0.0.0.0", port=8000)
