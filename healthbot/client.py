"""HTTP client for the chat API that keeps the conversation window locally.

The server is stateless about conversations, so whoever calls ``/api/chat``
owns the history. This client appends each successful exchange and keeps the
last ``max_history`` messages (20 by default, i.e. 10 exchanges).
"""
from typing import Any, Dict, List, Optional

import requests

from .app.config import Config
from .app.session import ConversationHistory
from .utils.logger import get_logger

logger = get_logger()

NETWORK_ERROR_REPLY = {
    "success": False,
    "message": "Sorry, I'm having trouble connecting to the AI service. Please try again.",
    "aiProvider": "fallback",
    "error": "Network error",
}


class HealthChatClient:
    def __init__(self, base_url: str = "http://127.0.0.1:8000",
                 max_history: int = Config.MAX_HISTORY_MESSAGES,
                 timeout: float = Config.HTTP_TIMEOUT,
                 http: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.http = http or requests.Session()
        self.history = ConversationHistory(max_messages=max_history)
        self.token: Optional[str] = None
        self.user: Optional[Dict[str, Any]] = None

    def _url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    def _auth_headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"} if self.token else {}

    # Chat

    def send_message(self, message: str) -> Dict[str, Any]:
        """Send one message with the current history; history only grows on success."""
        payload = {"message": message, "conversationHistory": self.history.as_list()}
        try:
            response = self.http.post(self._url("/api/chat"), json=payload, timeout=self.timeout)
            data = response.json()
        except (requests.exceptions.RequestException, ValueError) as e:
            logger.error(f"[CLIENT] Chat request failed: {e}")
            return dict(NETWORK_ERROR_REPLY)

        if data.get("success"):
            self.history.add_exchange(message, data.get("message", ""))
        return data

    def get_status(self) -> Dict[str, Any]:
        try:
            response = self.http.get(self._url("/api/chat/status"), timeout=self.timeout)
            response.raise_for_status()
            return response.json()
        except (requests.exceptions.RequestException, ValueError) as e:
            logger.error(f"[CLIENT] Status check failed: {e}")
            return {"aiAvailable": False, "provider": "fallback"}

    def get_history(self) -> List[Dict[str, str]]:
        return self.history.as_list()

    def clear_history(self) -> None:
        self.history.clear()

    # Auth

    def _store_session(self, data: Dict[str, Any]) -> Dict[str, Any]:
        if data.get("success") and data.get("token"):
            self.token = data["token"]
            self.user = data.get("user")
        return data

    def signup(self, full_name: str, email: str, password: str) -> Dict[str, Any]:
        response = self.http.post(
            self._url("/api/auth/signup"),
            json={"fullName": full_name, "email": email, "password": password},
            timeout=self.timeout,
        )
        return self._store_session(response.json())

    def login(self, email: str, password: str) -> Dict[str, Any]:
        response = self.http.post(
            self._url("/api/auth/login"),
            json={"email": email, "password": password},
            timeout=self.timeout,
        )
        return self._store_session(response.json())

    def get_profile(self) -> Dict[str, Any]:
        response = self.http.get(self._url("/api/auth/profile"), headers=self._auth_headers(),
                                 timeout=self.timeout)
        return response.json()

    def logout(self) -> None:
        """Tokens are never revoked server-side; logging out just forgets it."""
        self.token = None
        self.user = None
        self.clear_history()
