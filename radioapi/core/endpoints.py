"""Request builders for the three RadioAPI endpoints.

Each builder is a pure function of a `ClientConfig` and a query object: it
validates required input, resolves per-call overrides against the config
defaults, and returns the path and query parameters to send. Nothing here
performs I/O, so invalid input always fails before a request is attempted.

Resolution order for every optional parameter:
explicit per-call override > client default > built-in default.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping
from urllib.parse import urlencode

from radioapi.client_config import ClientConfig, validate_language
from radioapi.errors import InvalidArgument
from radioapi.services import ServiceHint, normalize_service

__all__ = [
    "COLOR_THIEF",
    "MUSIC_SEARCH",
    "STREAM_TITLE",
    "ColorQuery",
    "EndpointRequest",
    "MusicSearchQuery",
    "StreamTitleQuery",
    "build_color_thief",
    "build_music_search",
    "build_stream_title",
]

STREAM_TITLE = "streamtitle"
MUSIC_SEARCH = "musicsearch"
COLOR_THIEF = "colorthief"


@dataclass(frozen=True, slots=True)
class StreamTitleQuery:
    stream_url: str
    service: ServiceHint | None = None
    with_history: bool | None = None


@dataclass(frozen=True, slots=True)
class MusicSearchQuery:
    query: str
    service: ServiceHint | None = None
    language: str | None = None


@dataclass(frozen=True, slots=True)
class ColorQuery:
    image_url: str


@dataclass(frozen=True, slots=True)
class EndpointRequest:
    """Path and query parameters for a single GET request."""

    endpoint: str
    path: str
    params: Mapping[str, str]

    def query_string(self) -> str:
        """URL-encoded query string in parameter insertion order."""
        return urlencode(list(self.params.items()))

    def url(self, base_url: str) -> str:
        return f"{base_url.rstrip('/')}{self.path}?{self.query_string()}"


def _require_text(value: str | None, *, name: str) -> str:
    if value is None or not str(value).strip():
        raise InvalidArgument(f"{name} cannot be empty.")
    return str(value).strip()


def _build_path(endpoint: str, service: ServiceHint | None) -> str:
    segment = normalize_service(service)
    if segment:
        return f"/{endpoint}/{segment}"
    return f"/{endpoint}"


def _with_api_key(params: dict[str, str], config: ClientConfig) -> dict[str, str]:
    if config.api_key:
        params["api_key"] = config.api_key
    return params


def _resolve_language(config: ClientConfig, override: str | None) -> str:
    if override is None:
        return config.language
    return validate_language(override)


def build_stream_title(config: ClientConfig, query: StreamTitleQuery) -> EndpointRequest:
    """Build a `/streamtitle[/{service}]` request."""
    stream_url = _require_text(query.stream_url, name="Stream URL")
    service = query.service if query.service is not None else config.default_service
    with_history = query.with_history if query.with_history is not None else config.include_history
    params = {
        "url": stream_url,
        "language": config.language,
        "history": "true" if with_history else "false",
    }
    return EndpointRequest(
        endpoint=STREAM_TITLE,
        path=_build_path(STREAM_TITLE, service),
        params=_with_api_key(params, config),
    )


def build_music_search(config: ClientConfig, query: MusicSearchQuery) -> EndpointRequest:
    """Build a `/musicsearch[/{service}]` request."""
    text = _require_text(query.query, name="Search query")
    service = query.service if query.service is not None else config.default_service
    params = {
        "query": text,
        "language": _resolve_language(config, query.language),
    }
    return EndpointRequest(
        endpoint=MUSIC_SEARCH,
        path=_build_path(MUSIC_SEARCH, service),
        params=_with_api_key(params, config),
    )


def build_color_thief(config: ClientConfig, query: ColorQuery) -> EndpointRequest:
    """Build a `/colorthief` request. Service hints never apply here."""
    image_url = _require_text(query.image_url, name="Image URL")
    params = {
        "url": image_url,
        "language": config.language,
    }
    return EndpointRequest(
        endpoint=COLOR_THIEF,
        path=f"/{COLOR_THIEF}",
        params=_with_api_key(params, config),
    )
