"""Typed settings configuration - single source of truth."""

from functools import lru_cache
from typing import Literal

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Model provider (relay side only, never sent to the client)
    openai_api_key: SecretStr | None = None
    openai_model: str = "gpt-4o-mini"

    # Fixed generation configuration
    generation_temperature: float = 0.9
    generation_top_p: float = 1.0
    generation_max_output_tokens: int = 2048
    moderation_enabled: bool = True

    # Relay
    ui_origin: str = "http://localhost:5173"
    relay_url: str = "http://localhost:3001"
    relay_timeout_seconds: float = 60.0

    # History store
    history_backend: Literal["memory", "file", "redis"] = "file"
    history_path: str = ".pdfchat/history.json"
    history_key_prefix: str = "pdfchat"
    redis_url: str | None = None

    # Logging
    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
