"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    openai_api_key: str
    openai_api_base: str | None = None
    openai_model: str = "gpt-4o"
    openai_max_tokens: int = 1500
    openai_temperature: float = 0.1
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    @property
    def is_local(self) -> bool:
        """Return True when running in the local environment."""
        return self.environment == "local"


def normalize_base_url(raw: str | None) -> str | None:
    """Return a cleaned OpenAI-compatible base URL, or None for the default."""
    if raw is None:
        return None
    cleaned = raw.strip().rstrip("/")
    return cleaned or None
