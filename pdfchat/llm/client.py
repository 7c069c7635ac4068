"""Client side of the remote model call: prompt in, text out, or a failure.

The client only talks to the local relay; the provider credential stays on
the relay.
"""

import logging
from typing import Protocol

import httpx

from pdfchat.config import Settings
from pdfchat.errors import RemoteModelError

logger = logging.getLogger(__name__)

GENERATE_PATH = "/api/generate"


class RemoteModel(Protocol):
    """Protocol for remote model implementations."""

    async def generate(self, prompt: str) -> str:
        """Send a prompt and return the model's text.

        Raises:
            RemoteModelError: With a user-displayable reason
        """
        ...


class ModelSession:
    """One logical channel to the relay.

    The underlying HTTP client is created on first use and reused across
    calls. ``reset`` discards it, e.g. after a transport failure, and the
    next call opens a fresh one.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize session.

        Args:
            base_url: Relay base URL (e.g. http://localhost:3001)
            timeout: Per-request timeout in seconds
            transport: Optional httpx transport (for testing with mocks)
        """
        self.base_url = base_url
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def is_open(self) -> bool:
        return self._client is not None

    def client(self) -> httpx.AsyncClient:
        """Return the live HTTP client, creating it on first use."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url, timeout=self.timeout, transport=self._transport
            )
        return self._client

    async def reset(self) -> None:
        """Drop the current channel; the next call opens a new one."""
        client, self._client = self._client, None
        if client is not None:
            await client.aclose()

    async def aclose(self) -> None:
        await self.reset()


def _relay_error_message(response: httpx.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        data = None
    if isinstance(data, dict) and isinstance(data.get("error"), str) and data["error"]:
        return data["error"]
    return f"Model relay request failed with status {response.status_code}"


class RelayModelClient:
    """RemoteModel that POSTs prompts to the relay's /api/generate."""

    def __init__(self, session: ModelSession) -> None:
        self.session = session

    async def generate(self, prompt: str) -> str:
        """Send a prompt to the relay."""
        try:
            response = await self.session.client().post(GENERATE_PATH, json={"prompt": prompt})
        except httpx.HTTPError as e:
            logger.error(f"Model relay unreachable: {e!r}")
            await self.session.reset()
            raise RemoteModelError(f"Could not reach the model relay ({type(e).__name__})") from e

        if response.is_error:
            message = _relay_error_message(response)
            logger.warning(f"Model relay returned {response.status_code}: {message}")
            raise RemoteModelError(message)

        try:
            text = response.json()["text"]
        except (ValueError, KeyError, TypeError) as e:
            raise RemoteModelError("The model relay returned an invalid response.") from e
        if not isinstance(text, str):
            raise RemoteModelError("The model relay returned an invalid response.")
        return text


def create_relay_model(settings: Settings) -> RelayModelClient:
    """Create a relay-backed remote model from settings."""
    session = ModelSession(settings.relay_url, timeout=settings.relay_timeout_seconds)
    return RelayModelClient(session)
