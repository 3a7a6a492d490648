#!/usr/bin/env python3
"""
API tests for the FastAPI app.

Each test builds its own app around an in-memory credential store and a
controller with mocked AI agents.

USAGE:
    python -m pytest tests/test_api.py -v
"""

import unittest
from unittest.mock import MagicMock

from fastapi.testclient import TestClient

from healthbot.app.controller import Controller
from healthbot.app.errors import GenerationError, RetrievalError
from healthbot.app.main import create_app
from healthbot.auth.service import AuthService
from healthbot.auth.tokens import TokenService
from healthbot.data.user_store import MemoryUserStore
from healthbot.schemas.io_models import ChatAnswer

TECHNICAL_DIFFICULTIES = "I'm experiencing technical difficulties. Please try again in a moment."


def _rag_agent(message="Grounded answer."):
    agent = MagicMock()
    agent.name = "rag"
    agent.provider = "openai"
    agent.handle.return_value = ChatAnswer(agent="rag", message=message, provider="openai")
    return agent


class APITestCase(unittest.TestCase):

    def setUp(self):
        self.store = MemoryUserStore()
        self.tokens = TokenService("test-secret")
        self.rag = _rag_agent()
        self.controller = Controller(rag_agent=self.rag)
        self.app = create_app(AuthService(self.store, self.tokens), self.controller)
        self.client = TestClient(self.app)

    def signup(self, email="jane@example.com", password="secret123", full_name="Jane Doe"):
        return self.client.post("/api/auth/signup",
                                json={"fullName": full_name, "email": email, "password": password})

    def auth_header(self, **kwargs):
        token = self.signup(**kwargs).json()["token"]
        return {"Authorization": f"Bearer {token}"}


class TestAuthEndpoints(APITestCase):

    def test_signup(self):
        response = self.signup()
        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertTrue(data["success"])
        self.assertEqual(data["message"], "Account created successfully")
        self.assertEqual(set(data["user"]), {"id", "fullName", "email"})
        self.assertEqual(data["user"]["fullName"], "Jane Doe")
        self.assertTrue(data["token"])

    def test_signup_short_password(self):
        response = self.signup(password="12345")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"success": False,
                                           "message": "Password must be at least 6 characters long"})

    def test_signup_missing_fields(self):
        response = self.client.post("/api/auth/signup", json={"email": "jane@example.com"})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["message"], "All fields are required")

    def test_signup_duplicate(self):
        self.signup()
        response = self.signup(full_name="Someone Else")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["message"], "User with this email already exists")

    def test_malformed_body(self):
        response = self.client.post("/api/auth/signup", content="not json",
                                    headers={"Content-Type": "application/json"})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"success": False, "message": "Invalid request body"})

    def test_login(self):
        user_id = self.signup().json()["user"]["id"]
        response = self.client.post("/api/auth/login",
                                    json={"email": "jane@example.com", "password": "secret123"})
        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertEqual(data["message"], "Login successful")
        self.assertEqual(self.tokens.verify(data["token"]), user_id)

    def test_login_failures_are_indistinguishable(self):
        self.signup()
        unknown = self.client.post("/api/auth/login",
                                   json={"email": "nobody@example.com", "password": "secret123"})
        wrong = self.client.post("/api/auth/login",
                                 json={"email": "jane@example.com", "password": "wrong-one"})
        self.assertEqual(unknown.status_code, 401)
        self.assertEqual(wrong.status_code, 401)
        self.assertEqual(unknown.json(), wrong.json())
        self.assertEqual(wrong.json(), {"success": False, "message": "Invalid email or password"})

    def test_profile(self):
        headers = self.auth_header()
        response = self.client.get("/api/auth/profile", headers=headers)
        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertEqual(data["message"], "Profile retrieved successfully")
        self.assertEqual(data["user"]["email"], "jane@example.com")
        self.assertNotIn("token", data)

    def test_profile_without_token(self):
        response = self.client.get("/api/auth/profile")
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()["message"], "Authorization token required")

    def test_profile_with_garbage_token(self):
        response = self.client.get("/api/auth/profile", headers={"Authorization": "Bearer garbage"})
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()["message"], "Invalid token")

    def test_profile_for_missing_user_looks_like_bad_token(self):
        headers = {"Authorization": f"Bearer {self.tokens.issue('ghost')}"}
        response = self.client.get("/api/auth/profile", headers=headers)
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json(), {"success": False, "message": "Invalid token"})


class TestUserEndpoints(APITestCase):

    def test_update_profile(self):
        headers = self.auth_header()
        response = self.client.put("/api/user/profile", headers=headers,
                                   json={"fullName": "Jane Smith", "email": "js@example.com"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["user"]["fullName"], "Jane Smith")

        profile = self.client.get("/api/auth/profile", headers=headers).json()
        self.assertEqual(profile["user"]["email"], "js@example.com")

    def test_update_profile_requires_token(self):
        response = self.client.put("/api/user/profile",
                                   json={"fullName": "Jane Smith", "email": "js@example.com"})
        self.assertEqual(response.status_code, 401)

    def test_update_profile_for_missing_user(self):
        headers = {"Authorization": f"Bearer {self.tokens.issue('ghost')}"}
        response = self.client.put("/api/user/profile", headers=headers,
                                   json={"fullName": "Ghost", "email": "ghost@example.com"})
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["message"], "User not found")

    def test_update_password(self):
        headers = self.auth_header()
        response = self.client.put("/api/user/password", headers=headers,
                                   json={"currentPassword": "secret123", "newPassword": "newsecret"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"success": True, "message": "Password updated successfully"})

        login = self.client.post("/api/auth/login",
                                 json={"email": "jane@example.com", "password": "newsecret"})
        self.assertEqual(login.status_code, 200)

    def test_update_password_wrong_current(self):
        headers = self.auth_header()
        response = self.client.put("/api/user/password", headers=headers,
                                   json={"currentPassword": "nope", "newPassword": "newsecret"})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["message"], "Current password is incorrect")


class TestChatEndpoints(APITestCase):

    def test_keyword_answer_is_static(self):
        response = self.client.post("/api/chat", json={"message": "I have a headache",
                                                       "conversationHistory": []})
        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertTrue(data["success"])
        self.assertEqual(data["aiProvider"], "fallback")
        self.assertEqual(data["imageSearchTerm"], "headache relief techniques")
        self.rag.handle.assert_not_called()

    def test_rag_answer(self):
        response = self.client.post("/api/chat", json={"message": "What is hypertension?"})
        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertEqual(data, {"success": True, "message": "Grounded answer.", "aiProvider": "openai"})

    def test_history_is_passed_through(self):
        history = [{"role": "user", "content": "hi"}, {"role": "assistant", "content": "hello"}]
        self.client.post("/api/chat", json={"message": "What is hypertension?",
                                            "conversationHistory": history})
        self.assertEqual(self.rag.handle.call_args[1]["history"], history)

    def test_empty_message(self):
        for body in [{}, {"message": ""}, {"message": "   "}, {"message": 5}]:
            with self.subTest(body=body):
                response = self.client.post("/api/chat", json=body)
                self.assertEqual(response.status_code, 400)
                self.assertEqual(response.json(), {"success": False,
                                                   "message": "Please provide a valid message",
                                                   "aiProvider": "fallback"})

    def test_message_length_limit(self):
        ok = self.client.post("/api/chat", json={"message": "a" * 1000})
        self.assertEqual(ok.status_code, 200)
        too_long = self.client.post("/api/chat", json={"message": "a" * 1001})
        self.assertEqual(too_long.status_code, 400)
        self.assertIn("under 1000 characters", too_long.json()["message"])

    def test_pipeline_failure(self):
        for error in [GenerationError(detail="upstream 503"), RetrievalError(detail="db down")]:
            with self.subTest(error=type(error).__name__):
                self.rag.handle.side_effect = error
                response = self.client.post("/api/chat", json={"message": "What is hypertension?"})
                self.assertEqual(response.status_code, 500)
                self.assertEqual(response.json(), {
                    "success": False,
                    "message": TECHNICAL_DIFFICULTIES,
                    "aiProvider": "openai",
                    "error": "AI service temporarily unavailable",
                })

    def test_unexpected_failure(self):
        self.rag.handle.side_effect = RuntimeError("bug")
        response = self.client.post("/api/chat", json={"message": "What is hypertension?"})
        self.assertEqual(response.status_code, 500)
        self.assertFalse(response.json()["success"])
        self.assertNotIn("bug", response.text)

    def test_status(self):
        response = self.client.get("/api/chat/status")
        self.assertEqual(response.json(), {"aiAvailable": True, "provider": "openai",
                                           "status": "operational"})

    def test_status_without_ai(self):
        app = create_app(AuthService(MemoryUserStore(), self.tokens), Controller())
        response = TestClient(app).get("/api/chat/status")
        self.assertEqual(response.json(), {"aiAvailable": False, "provider": "fallback",
                                           "status": "operational"})


class TestMiscEndpoints(APITestCase):

    def test_ping(self):
        response = self.client.get("/api/ping")
        self.assertEqual(response.status_code, 200)
        self.assertIn("message", response.json())

    def test_health(self):
        self.assertEqual(self.client.get("/health").json(), {"status": "healthy"})


if __name__ == '__main__':
    unittest.main()
