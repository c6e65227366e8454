"""Immutable client configuration.

`ClientConfig` is validated once at construction and never mutated; the
fluent setters on `radioapi.client.RadioAPI` produce new configs with
`model_copy(update=...)`, so a config can be shared freely across threads.
"""

from __future__ import annotations

import re
from typing import Any
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from radioapi.errors import InvalidArgument
from radioapi.services import ServiceHint, normalize_service

__all__ = [
    "DEFAULT_LANGUAGE",
    "DEFAULT_TIMEOUT_SECONDS",
    "ClientConfig",
    "validate_language",
]

DEFAULT_LANGUAGE = "en"
DEFAULT_TIMEOUT_SECONDS = 30.0

_LANGUAGE_RE = re.compile(r"[a-z]{2}")


def validate_language(code: str) -> str:
    """Return `code` if it is a lowercase ISO 639-1 code, else raise InvalidArgument."""
    if not isinstance(code, str) or not _LANGUAGE_RE.fullmatch(code):
        raise InvalidArgument(
            f'Language must be a valid ISO 639-1 code (e.g., "en", "fr", "es"); got {code!r}.'
        )
    return code


class ClientConfig(BaseModel):
    """Connection and default request settings for a RadioAPI client."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    base_url: str
    api_key: str | None = None
    language: str = DEFAULT_LANGUAGE
    include_history: bool = True
    default_service: str | None = None
    timeout_seconds: float = Field(default=DEFAULT_TIMEOUT_SECONDS, gt=0)
    throw_on_api_errors: bool = True
    max_retries: int = Field(default=0, ge=0)
    retry_backoff_seconds: float = Field(default=0.5, ge=0)
    user_agent: str = "radioapi-python"

    def __init__(self, **data: Any) -> None:
        # Callers see InvalidArgument regardless of which field failed.
        try:
            super().__init__(**data)
        except ValidationError as exc:
            raise InvalidArgument(_format_validation_error(exc)) from exc

    @field_validator("base_url", mode="before")
    @classmethod
    def _check_base_url(cls, value: Any) -> str:
        text = str(value or "").strip().rstrip("/")
        if not text:
            raise ValueError("base URL must be non-empty")
        parsed = urlparse(text)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError(f"base URL must be an absolute http(s) URL, got {text!r}")
        return text

    @field_validator("api_key", mode="before")
    @classmethod
    def _blank_api_key_is_none(cls, value: Any) -> str | None:
        if value is None:
            return None
        text = str(value).strip()
        return text or None

    @field_validator("language")
    @classmethod
    def _check_language(cls, value: str) -> str:
        if not _LANGUAGE_RE.fullmatch(value):
            raise ValueError(f"language must be a lowercase ISO 639-1 code, got {value!r}")
        return value

    @field_validator("default_service", mode="before")
    @classmethod
    def _normalize_service(cls, value: ServiceHint | None) -> str | None:
        return normalize_service(value)

    def replace(self, **changes: Any) -> "ClientConfig":
        """Return a validated copy with `changes` applied."""
        data = self.model_dump()
        data.update(changes)
        return ClientConfig(**data)

    def export_safe(self) -> dict[str, Any]:
        """Return the config with the API key redacted, for logging."""
        data = self.model_dump()
        if data.get("api_key"):
            data["api_key"] = "***"
        return data


def _format_validation_error(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors():
        loc = ".".join(str(item) for item in error.get("loc", ())) or "config"
        msg = str(error.get("msg", "invalid value"))
        parts.append(f"{loc}: {msg}")
    return "Invalid client configuration: " + "; ".join(parts)
