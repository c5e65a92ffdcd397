"""Shared fixtures: local dev mode app on a fresh in-memory LocalStore."""

from datetime import date, timedelta
from typing import List, Optional, Union

import pytest
from fastapi.testclient import TestClient

from toyrotator import dependencies
from toyrotator.dependencies import get_db_client, get_openai_service
from toyrotator.main import app
from toyrotator.services.local_store import LocalStore


class FakeChat:
    """Scripted stand-in for OpenAIService."""

    def __init__(self):
        self.replies: List[Union[str, Exception]] = []
        self.calls: List[dict] = []

    def complete(self, system_prompt: str, user_prompt: str, image_url: Optional[str] = None, **kwargs) -> str:
        self.calls.append({"system": system_prompt, "user": user_prompt, "image": image_url})
        if not self.replies:
            raise RuntimeError("no scripted reply")
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


@pytest.fixture
def store(monkeypatch):
    monkeypatch.setattr(dependencies, "_is_local_mode", True)
    dependencies.reset_local_auth()
    yield LocalStore()
    dependencies.reset_local_auth()


@pytest.fixture
def chat():
    return FakeChat()


@pytest.fixture
def client(store, chat):
    app.dependency_overrides[get_db_client] = lambda: store
    app.dependency_overrides[get_openai_service] = lambda: chat
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def no_ai_client(store):
    app.dependency_overrides[get_db_client] = lambda: store
    app.dependency_overrides[get_openai_service] = lambda: None
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


class Caller:
    """Signed-in caller bound to a test client."""

    def __init__(self, client: TestClient, email: str, display_name: Optional[str] = None):
        self.client = client
        response = client.post(
            "/api/v1/auth/dev-token",
            json={"email": email, "displayName": display_name},
        )
        assert response.status_code == 200, response.text
        data = response.json()["data"]
        self.uid = data["uid"]
        self.email = email
        self.headers = {"Authorization": f"Bearer {data['token']}"}

    def call(self, name: str, body: Optional[dict] = None):
        return self.client.post(f"/api/v1/functions/{name}", json=body or {}, headers=self.headers)

    def ok(self, name: str, body: Optional[dict] = None):
        response = self.call(name, body)
        assert response.status_code == 200, response.text
        payload = response.json()
        assert payload["success"] is True
        return payload["data"]

    def set_tier(self, tier: str, trial_end: Optional[date] = None):
        subscription = {"tier": tier, "active": True}
        if trial_end is not None:
            subscription["trialEndDate"] = trial_end.isoformat()
        elif tier == "trial":
            subscription["trialEndDate"] = (date.today() + timedelta(days=7)).isoformat()
        return self.ok("updateUserProfile", {"subscriptionStatus": subscription})


def error_code(response) -> str:
    return response.json()["error"]["code"]


@pytest.fixture
def parent(client):
    return Caller(client, "parent@example.com", "Pat Parent")


@pytest.fixture
def make_caller(client):
    def _make(email: str, display_name: Optional[str] = None) -> Caller:
        return Caller(client, email, display_name)
    return _make
