"""Auth service: signup, login, profile and password flows.

Sits on top of a credential store and the token service. Validation errors
are raised before any store call; login failures never say whether the email
exists.
"""
from typing import Any, Dict, Optional

from ..app.errors import (
    DuplicateEmail,
    InvalidCredentials,
    TokenInvalid,
    Unauthorized,
    UserNotFound,
    ValidationError,
)
from ..data.user_store import UserStore
from ..schemas.user_models import UserRecord
from ..utils.logger import get_logger
from ..utils.security import mask_email
from .passwords import make_password_hash, verify_password
from .tokens import TokenService

logger = get_logger()

MIN_PASSWORD_LENGTH = 6
BEARER_PREFIX = "Bearer "


def parse_bearer(authorization: Optional[str]) -> str:
    """Extract the token from an ``Authorization: Bearer <token>`` header."""
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        raise Unauthorized()
    token = authorization[len(BEARER_PREFIX):].strip()
    if not token:
        raise TokenInvalid()
    return token


class AuthService:
    def __init__(self, store: UserStore, tokens: TokenService):
        self.store = store
        self.tokens = tokens

    def _session_payload(self, user: UserRecord, message: str) -> Dict[str, Any]:
        return {
            "message": message,
            "user": user.public().model_dump(),
            "token": self.tokens.issue(user.id),
        }

    def signup(self, full_name: Optional[str], email: Optional[str], password: Optional[str]) -> Dict[str, Any]:
        if not full_name or not email or not password:
            raise ValidationError("All fields are required")
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError("Password must be at least 6 characters long")

        if self.store.find_by_email(email):
            raise DuplicateEmail()

        user = self.store.insert(full_name, email, make_password_hash(password))
        logger.info(f"[AUTH] signup id={user.id} email={mask_email(email)} backend={self.store.backend}")
        return self._session_payload(user, "Account created successfully")

    def login(self, email: Optional[str], password: Optional[str]) -> Dict[str, Any]:
        if not email or not password:
            raise ValidationError("Email and password are required")

        user = self.store.find_by_email(email)
        # Same error for unknown email and wrong password
        if user is None or not verify_password(password, user.password_hash):
            logger.info(f"[AUTH] failed login email={mask_email(email)}")
            raise InvalidCredentials()

        logger.info(f"[AUTH] login id={user.id}")
        return self._session_payload(user, "Login successful")

    def authenticate(self, authorization: Optional[str]) -> UserRecord:
        """Resolve the user behind a bearer header."""
        user_id = self.tokens.verify(parse_bearer(authorization))
        user = self.store.find_by_id(user_id)
        if user is None:
            raise UserNotFound()
        return user

    def get_profile(self, authorization: Optional[str]) -> Dict[str, Any]:
        user = self.authenticate(authorization)
        return {"message": "Profile retrieved successfully", "user": user.public().model_dump()}

    def update_profile(
        self, authorization: Optional[str], full_name: Optional[str], email: Optional[str]
    ) -> Dict[str, Any]:
        user_id = self.tokens.verify(parse_bearer(authorization))
        if not full_name or not email:
            raise ValidationError("Full name and email are required")

        if self.store.find_by_id(user_id) is None:
            raise UserNotFound()
        owner = self.store.find_by_email(email)
        if owner is not None and owner.id != user_id:
            raise DuplicateEmail()

        user = self.store.update(user_id, {"full_name": full_name, "email": email})
        if user is None:
            raise UserNotFound()
        logger.info(f"[AUTH] profile updated id={user.id}")
        return {"message": "Profile updated successfully", "user": user.public().model_dump()}

    def update_password(
        self, authorization: Optional[str], current_password: Optional[str], new_password: Optional[str]
    ) -> Dict[str, Any]:
        user_id = self.tokens.verify(parse_bearer(authorization))
        if not current_password or not new_password:
            raise ValidationError("Current password and new password are required")
        if len(new_password) < MIN_PASSWORD_LENGTH:
            raise ValidationError("New password must be at least 6 characters long")

        user = self.store.find_by_id(user_id)
        if user is None:
            raise UserNotFound()
        if not verify_password(current_password, user.password_hash):
            raise ValidationError("Current password is incorrect")

        if self.store.update(user_id, {"password_hash": make_password_hash(new_password)}) is None:
            raise UserNotFound()
        logger.info(f"[AUTH] password updated id={user_id}")
        return {"message": "Password updated successfully"}
