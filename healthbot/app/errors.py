"""Error taxonomy shared by the auth and chat services.

Every error carries the client-facing message and the HTTP status the API
layer responds with. Backend errors keep their detail in ``detail`` for the
server log; only ``message`` reaches the client.
"""
from typing import Optional


class HealthBotError(Exception):
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None, detail: Optional[str] = None):
        self.message = message or self.default_message
        self.detail = detail
        super().__init__(self.message)


class ValidationError(HealthBotError):
    status_code = 400
    default_message = "Invalid request"


class DuplicateEmail(ValidationError):
    default_message = "User with this email already exists"


class EmptyMessage(ValidationError):
    default_message = "Please provide a valid message"


class MessageTooLong(ValidationError):
    default_message = "Message is too long. Please keep your message under 1000 characters."


class AuthenticationError(HealthBotError):
    status_code = 401
    default_message = "Authentication failed"


class InvalidCredentials(AuthenticationError):
    default_message = "Invalid email or password"


class Unauthorized(AuthenticationError):
    default_message = "Authorization token required"


class TokenInvalid(AuthenticationError):
    default_message = "Invalid token"


class TokenExpired(AuthenticationError):
    default_message = "Token expired"


class NotFoundError(HealthBotError):
    status_code = 404
    default_message = "Not found"


class UserNotFound(NotFoundError):
    default_message = "User not found"


class BackendUnavailable(HealthBotError):
    default_message = "Database error. Please try again."


class ChatPipelineError(HealthBotError):
    default_message = "I'm experiencing technical difficulties. Please try again in a moment."


class EmbeddingServiceError(ChatPipelineError):
    pass


class RetrievalError(ChatPipelineError):
    pass


class GenerationError(ChatPipelineError):
    pass
