"""Salted password hashing.

Storage format is ``"<hexHash>:<hexSalt>"`` where the hash is
``sha256(password + salt)``, kept compatible with existing user rows.
"""
import hashlib
import hmac
import secrets
from typing import Optional, Tuple

SALT_BYTES = 16


def hash_password(password: str, salt: Optional[str] = None) -> Tuple[str, str]:
    """Return ``(hex_hash, hex_salt)``; a fresh random salt is generated when none is given."""
    password_salt = salt or secrets.token_hex(SALT_BYTES)
    digest = hashlib.sha256((password + password_salt).encode("utf-8")).hexdigest()
    return digest, password_salt


def make_password_hash(password: str) -> str:
    digest, salt = hash_password(password)
    return f"{digest}:{salt}"


def verify_password(password: str, stored: str) -> bool:
    """Check ``password`` against a stored ``hash:salt`` string."""
    if not stored or ":" not in stored:
        return False
    expected, salt = stored.split(":", 1)
    digest, _ = hash_password(password, salt)
    return hmac.compare_digest(digest, expected)
