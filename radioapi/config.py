from __future__ import annotations

from functools import lru_cache
from typing import Any

from loguru import logger
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from radioapi.client_config import DEFAULT_LANGUAGE, DEFAULT_TIMEOUT_SECONDS, ClientConfig
from radioapi.errors import InvalidArgument

log = logger.bind(module="config")


class Settings(BaseSettings):
    """Environment-driven defaults for RadioAPI clients and the CLI."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    base_url: str | None = Field(default=None, alias="RADIOAPI_BASE_URL")
    api_key: str | None = Field(default=None, alias="RADIOAPI_API_KEY")
    language: str = Field(default=DEFAULT_LANGUAGE, alias="RADIOAPI_LANGUAGE")
    default_service: str | None = Field(default=None, alias="RADIOAPI_SERVICE")
    include_history: bool = Field(default=True, alias="RADIOAPI_WITH_HISTORY")
    timeout_seconds: float = Field(default=DEFAULT_TIMEOUT_SECONDS, alias="RADIOAPI_TIMEOUT_SECONDS")
    max_retries: int = Field(default=0, alias="RADIOAPI_MAX_RETRIES")
    retry_backoff_seconds: float = Field(default=0.5, alias="RADIOAPI_RETRY_BACKOFF_SECONDS")
    throw_on_api_errors: bool = Field(default=True, alias="RADIOAPI_THROW_ON_API_ERRORS")

    def to_client_config(self, **overrides: Any) -> ClientConfig:
        """Build a validated `ClientConfig`; `overrides` win over the environment.

        Raises:
            InvalidArgument: When no base URL is configured or a value is invalid.
        """
        data: dict[str, Any] = {
            "base_url": self.base_url,
            "api_key": self.api_key,
            "language": self.language,
            "default_service": self.default_service,
            "include_history": self.include_history,
            "timeout_seconds": self.timeout_seconds,
            "max_retries": self.max_retries,
            "retry_backoff_seconds": self.retry_backoff_seconds,
            "throw_on_api_errors": self.throw_on_api_errors,
        }
        data.update({key: value for key, value in overrides.items() if value is not None})
        if not data.get("base_url"):
            raise InvalidArgument("RADIOAPI_BASE_URL is required.")
        return ClientConfig(**data)

    def export_safe(self) -> dict[str, Any]:
        """Return non-sensitive settings for debugging/logging."""
        return {
            "base_url": self.base_url,
            "api_key": "***" if self.api_key else None,
            "language": self.language,
            "default_service": self.default_service,
            "include_history": self.include_history,
            "timeout_seconds": self.timeout_seconds,
            "max_retries": self.max_retries,
            "throw_on_api_errors": self.throw_on_api_errors,
        }


@lru_cache
def get_settings() -> Settings:
    """Load and cache application settings."""
    settings = Settings()
    log.debug("Settings initialised: {}", settings.export_safe())
    return settings
