"""Pydantic models for API I/O and agent contracts.

Request fields are optional on purpose: missing values are reported by the
services with their own 400 messages instead of framework validation errors.
"""
from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict, List, Literal, Optional

ProviderName = Literal["openai", "fallback"]


class ChatMessage(BaseModel):
    role: Literal["user", "assistant", "system"]
    content: str


class RetrievedMatch(BaseModel):
    id: Optional[Any] = None
    content: str
    metadata: Dict[str, Any] = Field(default_factory=dict)
    similarity: float = 0.0


class RAGAnswer(BaseModel):
    answer: str
    matches: List[RetrievedMatch] = Field(default_factory=list)


class ChatAnswer(BaseModel):
    agent: str
    message: str
    image_search_term: Optional[str] = None
    provider: ProviderName = "fallback"
    matches: List[RetrievedMatch] = Field(default_factory=list)


# HTTP requests

class _CamelRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class SignupRequest(_CamelRequest):
    full_name: Optional[str] = Field(default=None, alias="fullName")
    email: Optional[str] = None
    password: Optional[str] = None


class LoginRequest(_CamelRequest):
    email: Optional[str] = None
    password: Optional[str] = None


class UpdateProfileRequest(_CamelRequest):
    full_name: Optional[str] = Field(default=None, alias="fullName")
    email: Optional[str] = None


class UpdatePasswordRequest(_CamelRequest):
    current_password: Optional[str] = Field(default=None, alias="currentPassword")
    new_password: Optional[str] = Field(default=None, alias="newPassword")


class ChatRequest(_CamelRequest):
    message: Any = None
    conversation_history: Any = Field(default=None, alias="conversationHistory")


# HTTP responses

class PublicUserOut(BaseModel):
    id: str
    fullName: str
    email: str


class AuthResponse(BaseModel):
    success: bool
    message: str
    user: Optional[PublicUserOut] = None
    token: Optional[str] = None


class ChatResponse(BaseModel):
    success: bool
    message: str
    imageSearchTerm: Optional[str] = None
    aiProvider: ProviderName
    error: Optional[str] = None


class ChatStatusResponse(BaseModel):
    aiAvailable: bool
    provider: ProviderName
    status: str
