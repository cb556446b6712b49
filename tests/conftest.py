"""Shared fixtures: a fake Ollama backend and a client for the gateway."""

import inspect
from typing import Any, Callable, Dict, List

import httpx
import pytest
from fastapi.testclient import TestClient

from flownlp.core.config import Settings
from flownlp.dependencies.get_chat_proxy_service import get_chat_proxy_service
from flownlp.main import create_application
from flownlp.services.chat_proxy import FORWARD_TIMEOUT_SECONDS, ChatProxyService

API_KEY = "test-secret"
BACKEND_URL = "http://ollama.test/api/chat"

CHAT_REQUEST: Dict[str, Any] = {
    "model": "llama2",
    "messages": [{"role": "user", "content": "hi"}],
}

CHAT_RESPONSE: Dict[str, Any] = {
    "model": "llama2",
    "created_at": "t0",
    "done": True,
    "message": {"role": "assistant", "content": "hello"},
}


class FakeBackend:
    """Records every call and answers through a swappable handler."""

    def __init__(self) -> None:
        self.requests: List[httpx.Request] = []
        self.handler: Callable[[httpx.Request], Any] = lambda request: httpx.Response(
            200, json=CHAT_RESPONSE
        )

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        result = self.handler(request)
        if inspect.isawaitable(result):
            result = await result
        return result


@pytest.fixture
def settings() -> Settings:
    return Settings(API_KEY=API_KEY, _env_file=None)


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def auth_headers() -> Dict[str, str]:
    return {"Authorization": f"Bearer {API_KEY}"}


@pytest.fixture
def make_service(backend):
    def _make(timeout_seconds: float = FORWARD_TIMEOUT_SECONDS) -> ChatProxyService:
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(backend))
        return ChatProxyService(
            client=http_client, backend_url=BACKEND_URL, timeout_seconds=timeout_seconds
        )

    return _make


@pytest.fixture
def make_app(settings, make_service):
    def _make(timeout_seconds: float = FORWARD_TIMEOUT_SECONDS):
        app = create_application(settings)
        service = make_service(timeout_seconds)
        app.dependency_overrides[get_chat_proxy_service] = lambda: service
        return app

    return _make


@pytest.fixture
def client(make_app):
    with TestClient(make_app()) as test_client:
        yield test_client
