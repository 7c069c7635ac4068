"""Tests for the relay-backed remote model client."""

import json

import httpx
import pytest

from pdfchat.config import Settings
from pdfchat.errors import RemoteModelError
from pdfchat.llm.client import GENERATE_PATH, ModelSession, RelayModelClient, create_relay_model


def _client(handler) -> RelayModelClient:  # type: ignore[no-untyped-def]
    session = ModelSession("http://relay.test", transport=httpx.MockTransport(handler))
    return RelayModelClient(session)


@pytest.mark.asyncio
async def test_generate_posts_prompt_and_returns_text() -> None:
    """The prompt is sent as {"prompt"} and {"text"} is returned."""
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"text": "Answer."})

    client = _client(handler)

    assert await client.generate("Question?") == "Answer."
    assert seen[0].url.path == GENERATE_PATH
    assert seen[0].method == "POST"
    assert json.loads(seen[0].content) == {"prompt": "Question?"}


@pytest.mark.asyncio
async def test_session_is_reused_across_calls() -> None:
    """Consecutive calls share one HTTP client."""
    client = _client(lambda request: httpx.Response(200, json={"text": "ok"}))

    await client.generate("one")
    first = client.session.client()
    await client.generate("two")

    assert client.session.client() is first


@pytest.mark.asyncio
async def test_error_body_becomes_remote_model_error() -> None:
    """A non-2xx {"error"} body is surfaced verbatim."""
    client = _client(lambda request: httpx.Response(500, json={"error": "quota exceeded"}))

    with pytest.raises(RemoteModelError, match="quota exceeded"):
        await client.generate("Question?")


@pytest.mark.asyncio
async def test_error_without_body_reports_status() -> None:
    """A non-JSON error response reports the HTTP status."""
    client = _client(lambda request: httpx.Response(502, text="Bad Gateway"))

    with pytest.raises(RemoteModelError, match="status 502"):
        await client.generate("Question?")


@pytest.mark.asyncio
async def test_invalid_success_body() -> None:
    """A 2xx response without text is treated as a failure."""
    client = _client(lambda request: httpx.Response(200, json={"answer": "wrong field"}))

    with pytest.raises(RemoteModelError, match="invalid response"):
        await client.generate("Question?")


@pytest.mark.asyncio
async def test_transport_error_resets_session() -> None:
    """An unreachable relay raises and the next call opens a new channel."""
    calls = {"n": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        calls["n"] += 1
        if calls["n"] == 1:
            raise httpx.ConnectError("connection refused", request=request)
        return httpx.Response(200, json={"text": "back"})

    client = _client(handler)

    with pytest.raises(RemoteModelError, match="Could not reach the model relay"):
        await client.generate("Question?")
    assert not client.session.is_open

    assert await client.generate("Question?") == "back"
    assert client.session.is_open


def test_create_relay_model_uses_settings() -> None:
    """The relay URL and timeout come from settings."""
    model = create_relay_model(Settings(relay_url="http://relay:9000", relay_timeout_seconds=5.0))

    assert model.session.base_url == "http://relay:9000"
    assert model.session.timeout == 5.0
