"""Model providers used by the relay.

Security: the provider API key is read from settings on the relay only and
never reaches the client. Without a key a deterministic stub provider is
used so the relay stays usable for local development and tests.
"""

import logging
from functools import lru_cache
from typing import Protocol

from openai import AsyncOpenAI

from pdfchat.config import get_settings

logger = logging.getLogger(__name__)


class ProviderError(Exception):
    """Model provider call failed."""

    pass


class EmptyProviderResponseError(ProviderError):
    """Provider answered without usable text."""

    pass


class ContentBlockedError(ProviderError):
    """Prompt rejected by the content-safety gate."""

    pass


class ModelProvider(Protocol):
    """Protocol for relay model providers."""

    name: str

    async def generate(self, prompt: str) -> str:
        """Generate text for a prompt.

        Args:
            prompt: Fully composed prompt from the client

        Returns:
            Generated text

        Raises:
            ProviderError: If the provider rejects the prompt or returns nothing
        """
        ...


class DeterministicStubProvider:
    """Deterministic stub provider (no API key required)."""

    name = "stub"

    async def generate(self, prompt: str) -> str:
        """Describe the prompt instead of answering it."""
        question = prompt.strip().splitlines()[-1] if prompt.strip() else ""
        return (
            f"*Stub response: no model provider is configured.*\n\n"
            f"Received a prompt of {len(prompt)} characters ending with: {question}"
        )


class OpenAIProvider:
    """OpenAI-backed provider with a fixed generation configuration."""

    name = "openai"

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-mini",
        *,
        temperature: float = 0.9,
        top_p: float = 1.0,
        max_output_tokens: int = 2048,
        moderation_enabled: bool = True,
    ):
        """Initialize OpenAI provider.

        Args:
            api_key: OpenAI API key (read from environment)
            model: Chat model name
            temperature: Fixed sampling temperature
            top_p: Fixed nucleus sampling value
            max_output_tokens: Bound on generated tokens
            moderation_enabled: Run the moderation endpoint before generation
        """
        self.client = AsyncOpenAI(api_key=api_key)
        self.model = model
        self.temperature = temperature
        self.top_p = top_p
        self.max_output_tokens = max_output_tokens
        self.moderation_enabled = moderation_enabled

    async def _check_content_safety(self, prompt: str) -> None:
        moderation = await self.client.moderations.create(input=prompt)
        if any(result.flagged for result in moderation.results):
            logger.warning("Prompt blocked by moderation")
            raise ContentBlockedError("The prompt was blocked by the content safety filter.")

    async def generate(self, prompt: str) -> str:
        """Generate text using the chat completions API."""
        if self.moderation_enabled:
            await self._check_content_safety(prompt)

        response = await self.client.chat.completions.create(
            model=self.model,
            messages=[{"role": "user", "content": prompt}],
            temperature=self.temperature,
            top_p=self.top_p,
            max_tokens=self.max_output_tokens,
        )

        text = response.choices[0].message.content if response.choices else None
        if not text or not text.strip():
            logger.warning(f"OpenAI returned no text (choices={len(response.choices)})")
            raise EmptyProviderResponseError("The AI did not return a valid response.")
        return text


@lru_cache
def get_model_provider() -> ModelProvider:
    """Factory function to get the provider for the current config.

    Returns:
        OpenAIProvider if an API key is configured, DeterministicStubProvider otherwise
    """
    settings = get_settings()
    api_key = settings.openai_api_key

    if api_key and api_key.get_secret_value():
        logger.info(f"Using OpenAI provider ({settings.openai_model})")
        return OpenAIProvider(
            api_key=api_key.get_secret_value(),
            model=settings.openai_model,
            temperature=settings.generation_temperature,
            top_p=settings.generation_top_p,
            max_output_tokens=settings.generation_max_output_tokens,
            moderation_enabled=settings.moderation_enabled,
        )
    else:
        logger.warning("No OpenAI API key configured, using deterministic stub provider")
        return DeterministicStubProvider()
