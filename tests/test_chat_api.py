from types import SimpleNamespace

import httpx
import openai
import pytest
from fastapi.testclient import TestClient

from chatrelay.core.config import settings
from chatrelay.main import app
from chatrelay.services.llm_gateway import CompletionGateway

PROVIDER_URL = "https://api.groq.com/openai/v1/chat/completions"


class FakeCompletions:
    def __init__(self, result=None, error=None) -> None:
        self.result = result
        self.error = error
        self.calls: list[dict] = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return self.result


class FakeOpenAI:
    def __init__(self, completions: FakeCompletions) -> None:
        self.chat = SimpleNamespace(completions=completions)
        self.closed = False

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        self.closed = True
        return False


def _completion(content):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


def _status_error(status_code: int, body):
    request = httpx.Request("POST", PROVIDER_URL)
    response = httpx.Response(status_code, request=request)
    return openai.APIStatusError(f"Error code: {status_code}", response=response, body=body)


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def fake_provider(monkeypatch):
    completions = FakeCompletions(result=_completion("Hello from the model"))
    fake = FakeOpenAI(completions)
    monkeypatch.setattr(CompletionGateway, "_build_client", lambda self: fake)
    return fake


def test_health(client: TestClient):
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "message": "Server is running"}


def test_chat_requires_message(client: TestClient, fake_provider):
    response = client.post("/api/chat", json={})
    assert response.status_code == 400
    assert response.json() == {"error": "Message is required"}
    assert fake_provider.chat.completions.calls == []


@pytest.mark.parametrize("body", [{"message": ""}, {"message": None}, {"message": 42}, []])
def test_chat_rejects_unusable_message(client: TestClient, fake_provider, body):
    response = client.post("/api/chat", json=body)
    assert response.status_code == 400
    assert response.json()["error"] == "Message is required"


def test_chat_without_body(client: TestClient, fake_provider):
    response = client.post("/api/chat")
    assert response.status_code == 400
    assert response.json() == {"error": "Message is required"}


def test_chat_forwards_single_turn_request(client: TestClient, fake_provider):
    response = client.post("/api/chat", json={"message": "hi there"})
    assert response.status_code == 200
    assert response.json() == {"response": "Hello from the model"}

    [call] = fake_provider.chat.completions.calls
    assert call == {
        "model": "llama-3.3-70b-versatile",
        "messages": [{"role": "user", "content": "hi there"}],
        "temperature": 0.7,
        "max_tokens": 1024,
    }
    assert fake_provider.closed is True


@pytest.mark.parametrize("result", [_completion(None), _completion(""), SimpleNamespace(choices=[])])
def test_chat_uses_fallback_when_completion_empty(client: TestClient, fake_provider, result):
    fake_provider.chat.completions.result = result
    response = client.post("/api/chat", json={"message": "hi"})
    assert response.status_code == 200
    assert response.json() == {"response": settings.FALLBACK_RESPONSE}


def test_chat_maps_provider_error_detail(client: TestClient, fake_provider):
    fake_provider.chat.completions.error = _status_error(
        401, {"message": "Invalid API Key", "type": "invalid_request_error"}
    )
    response = client.post("/api/chat", json={"message": "hi"})
    assert response.status_code == 500
    assert response.json() == {"error": settings.ERROR_MESSAGE, "details": "Invalid API Key"}


def test_chat_maps_provider_error_without_message(client: TestClient, fake_provider):
    fake_provider.chat.completions.error = _status_error(503, None)
    response = client.post("/api/chat", json={"message": "hi"})
    assert response.status_code == 500
    assert response.json() == {"error": settings.ERROR_MESSAGE, "details": "API Error"}


def test_chat_maps_connection_error(client: TestClient, fake_provider):
    fake_provider.chat.completions.error = openai.APIConnectionError(
        request=httpx.Request("POST", PROVIDER_URL)
    )
    response = client.post("/api/chat", json={"message": "hi"})
    assert response.status_code == 500
    payload = response.json()
    assert payload["error"] == settings.ERROR_MESSAGE
    assert payload["details"] == "Connection error."


def test_chat_maps_unexpected_error(client: TestClient, fake_provider):
    fake_provider.chat.completions.error = RuntimeError("boom")
    response = client.post("/api/chat", json={"message": "hi"})
    assert response.status_code == 500
    assert response.json() == {"error": settings.ERROR_MESSAGE, "details": "boom"}


def test_chat_reports_missing_api_key(client: TestClient, monkeypatch):
    monkeypatch.setenv("GROQ_API_KEY", "")
    response = client.post("/api/chat", json={"message": "hi"})
    assert response.status_code == 500
    payload = response.json()
    assert payload["error"] == settings.ERROR_MESSAGE
    assert "GROQ_API_KEY" in payload["details"]
