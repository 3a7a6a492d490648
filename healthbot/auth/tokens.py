"""Bearer tokens.

A token is base64 of a JSON object ``{"userId", "timestamp", "exp"}`` with
millisecond timestamps. Signed tokens add ``"v": 2`` and ``"sig"`` (HMAC-SHA256
of ``userId|timestamp|exp``) inside the same object, so every token still
decodes to the same shape. Nothing is stored server-side: expiry is the only
way a token stops working.
"""
import base64
import binascii
import hashlib
import hmac
import json
import math
import time
from typing import Any, Callable, Dict, Optional

from ..app.errors import TokenExpired, TokenInvalid

TOKEN_VERSION = 2


def _now_ms() -> int:
    return int(time.time() * 1000)


class TokenService:
    """Issues and verifies self-contained, time-limited tokens."""

    def __init__(
        self,
        secret: Optional[str],
        ttl_hours: int = 24,
        allow_unsigned: bool = False,
        clock: Callable[[], int] = _now_ms,
    ):
        self.secret = secret.encode("utf-8") if secret else None
        self.ttl_ms = ttl_hours * 60 * 60 * 1000
        self.allow_unsigned = allow_unsigned
        self.clock = clock

    def _signature(self, user_id: str, issued_at: int, expires_at: int) -> str:
        message = f"{user_id}|{issued_at}|{expires_at}".encode("utf-8")
        return hmac.new(self.secret, message, hashlib.sha256).hexdigest()

    def issue(self, user_id: str) -> str:
        now = self.clock()
        payload: Dict[str, Any] = {
            "userId": user_id,
            "timestamp": now,
            "exp": now + self.ttl_ms,
        }
        if self.secret:
            payload["v"] = TOKEN_VERSION
            payload["sig"] = self._signature(user_id, payload["timestamp"], payload["exp"])
        return base64.b64encode(json.dumps(payload).encode("utf-8")).decode("ascii")

    def decode(self, token: str) -> Dict[str, Any]:
        """Decode without checking signature or expiry. Raises TokenInvalid."""
        try:
            payload = json.loads(base64.b64decode(token.encode("ascii"), validate=True))
        except (binascii.Error, UnicodeError, ValueError) as e:
            raise TokenInvalid(detail=f"undecodable token: {e}") from e

        if not isinstance(payload, dict):
            raise TokenInvalid(detail="token payload is not an object")
        user_id = payload.get("userId")
        if user_id is None or user_id == "":
            raise TokenInvalid(detail="token has no userId")
        if not isinstance(payload.get("exp"), (int, float)) or isinstance(payload.get("exp"), bool):
            raise TokenInvalid(detail="token has no numeric exp")
        if isinstance(payload["exp"], float) and not math.isfinite(payload["exp"]):
            raise TokenInvalid(detail="token exp is not finite")
        return payload

    def verify(self, token: str) -> str:
        """Return the user id carried by a valid token."""
        payload = self.decode(token)
        user_id = str(payload["userId"])

        sig = payload.get("sig")
        if sig is not None or not self.allow_unsigned:
            if not self.secret or not isinstance(sig, str):
                raise TokenInvalid(detail="unsigned token rejected")
            expected = self._signature(user_id, payload.get("timestamp"), payload["exp"])
            if not hmac.compare_digest(sig, expected):
                raise TokenInvalid(detail="bad token signature")

        if payload["exp"] <= self.clock():
            raise TokenExpired()
        return user_id
