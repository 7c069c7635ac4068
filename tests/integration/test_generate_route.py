"""Integration tests for the model relay endpoint."""

from collections.abc import Iterator
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from pdfchat.api.routes.generate import INVALID_RESPONSE, PROMPT_REQUIRED
from pdfchat.llm.provider import (
    ContentBlockedError,
    EmptyProviderResponseError,
    get_model_provider,
)
from pdfchat.main import app


@pytest.fixture
def provider() -> MagicMock:
    """Provider double injected through the FastAPI dependency."""
    fake = MagicMock()
    fake.name = "fake"
    fake.generate = AsyncMock(return_value="Generated text.")
    return fake


@pytest.fixture
def client(provider: MagicMock) -> Iterator[TestClient]:
    app.dependency_overrides[get_model_provider] = lambda: provider
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def test_generate_returns_text(client: TestClient, provider: MagicMock) -> None:
    """A prompt is forwarded and the text returned as {"text"}."""
    response = client.post("/api/generate", json={"prompt": "Hello?"})

    assert response.status_code == 200
    assert response.json() == {"text": "Generated text."}
    provider.generate.assert_awaited_once_with("Hello?")


@pytest.mark.parametrize("body", [{}, {"prompt": ""}, {"prompt": "   "}, {"prompt": None}])
def test_missing_prompt_is_400(client: TestClient, provider: MagicMock, body: dict) -> None:
    """Missing or blank prompts are rejected before reaching the provider."""
    response = client.post("/api/generate", json=body)

    assert response.status_code == 400
    assert response.json() == {"error": PROMPT_REQUIRED}
    provider.generate.assert_not_awaited()


def test_malformed_body_is_400(client: TestClient) -> None:
    """A body that is not a JSON object is reported as {"error"}."""
    response = client.post(
        "/api/generate", content=b"not json", headers={"Content-Type": "application/json"}
    )

    assert response.status_code == 400
    assert "error" in response.json()


def test_empty_provider_reply_is_500(client: TestClient, provider: MagicMock) -> None:
    """A provider without usable text yields the invalid-response error."""
    provider.generate.side_effect = EmptyProviderResponseError("empty")

    response = client.post("/api/generate", json={"prompt": "Hello?"})

    assert response.status_code == 500
    assert response.json() == {"error": INVALID_RESPONSE}


def test_provider_failure_message_is_forwarded(client: TestClient, provider: MagicMock) -> None:
    """Provider errors are passed to the client as the error text."""
    provider.generate.side_effect = RuntimeError("quota exceeded")

    response = client.post("/api/generate", json={"prompt": "Hello?"})

    assert response.status_code == 500
    assert response.json() == {"error": "quota exceeded"}


def test_blocked_prompt_is_400(client: TestClient, provider: MagicMock) -> None:
    """Prompts stopped by the safety gate are a client error."""
    provider.generate.side_effect = ContentBlockedError("blocked by filter")

    response = client.post("/api/generate", json={"prompt": "unsafe"})

    assert response.status_code == 400
    assert response.json() == {"error": "blocked by filter"}


def test_cors_allows_ui_origin(client: TestClient) -> None:
    """The configured UI origin may call the relay from the browser."""
    response = client.options(
        "/api/generate",
        headers={
            "Origin": "http://localhost:5173",
            "Access-Control-Request-Method": "POST",
        },
    )

    assert response.headers.get("access-control-allow-origin") == "http://localhost:5173"
