"""Shared HTTP transport built on top of httpx.

This module centralizes default timeout/header behavior and returns a uniform
`TransportResult` instead of raising: completed exchanges (including 4xx/5xx)
come back as `TransportOk`, while timeouts and connection problems come back
as `TransportFailure`. Status codes are never retried here.
"""

from __future__ import annotations

import enum
import json
import weakref
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Mapping, Union

import httpx
from loguru import logger

__all__ = [
    "FailureKind",
    "HttpClient",
    "TransportFailure",
    "TransportOk",
    "TransportResult",
]

log = logger.bind(module="net.http")

_MIN_TIMEOUT_SECONDS = 0.1
_MAX_ERROR_TEXT_CHARS = 2048
DEFAULT_USER_AGENT = "radioapi-python"


class FailureKind(str, enum.Enum):
    TIMEOUT = "timeout"
    NETWORK_ERROR = "network_error"


@dataclass(frozen=True, slots=True)
class TransportOk:
    """A completed HTTP exchange, whatever its status code."""

    status_code: int
    headers: Mapping[str, str]
    body: str
    url: str = ""

    @property
    def successful(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def failed(self) -> bool:
        return self.status_code >= 400

    @property
    def is_client_error(self) -> bool:
        return 400 <= self.status_code < 500

    @property
    def is_server_error(self) -> bool:
        return 500 <= self.status_code < 600

    @property
    def is_redirect(self) -> bool:
        return 300 <= self.status_code < 400

    @property
    def is_ok(self) -> bool:
        return self.status_code == 200

    @property
    def is_unauthorized(self) -> bool:
        return self.status_code == 401

    @property
    def is_forbidden(self) -> bool:
        return self.status_code == 403

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404

    @property
    def is_too_many_requests(self) -> bool:
        return self.status_code == 429

    def header(self, name: str, default: str | None = None) -> str | None:
        """Case-insensitive header lookup."""
        lowered = name.lower()
        for key, value in self.headers.items():
            if key.lower() == lowered:
                return value
        return default

    def json(self) -> Any:
        """Decode the body as JSON (None for an empty body).

        Raises:
            json.JSONDecodeError: When the body is not valid JSON.
        """
        if not self.body.strip():
            return None
        return json.loads(self.body)


@dataclass(frozen=True, slots=True)
class TransportFailure:
    """No HTTP response was obtained."""

    kind: FailureKind
    message: str
    url: str = ""


TransportResult = Union[TransportOk, TransportFailure]


def _truncate(text: str, *, limit: int) -> str:
    """Return a truncated string with an ellipsis when needed."""
    if limit <= 0:
        return ""
    if len(text) <= limit:
        return text
    head = text[: max(0, limit - 3)].rstrip()
    return f"{head}..."


def _response_text(response: httpx.Response) -> str:
    try:
        return response.text or ""
    except UnicodeDecodeError:
        return response.content.decode("utf-8", errors="replace")


@dataclass(slots=True)
class _Options:
    timeout_seconds: float
    headers: dict[str, str] = field(default_factory=dict)


class HttpClient:
    """Small sync HTTP client with consistent defaults and failure mapping.

    Notes:
        - By default, a short-lived `httpx.Client` is created per request.
        - When `reuse_connections=True`, an internal persistent `httpx.Client` is
          used to enable connection pooling. Call `close()` (or use this object
          as a context manager) to release resources deterministically.
        - Timeouts are clamped to at least `_MIN_TIMEOUT_SECONDS`.
        - `with_headers()` / `with_timeout()` return configured copies; the
          original client is never changed.
    """

    def __init__(
        self,
        *,
        base_url: str | None = None,
        timeout_seconds: float = 30.0,
        follow_redirects: bool = True,
        user_agent: str | None = DEFAULT_USER_AGENT,
        headers: Mapping[str, str] | None = None,
        transport: httpx.BaseTransport | None = None,
        reuse_connections: bool = False,
    ) -> None:
        self.base_url = (base_url or "").rstrip("/") if base_url else None
        self.follow_redirects = bool(follow_redirects)
        self.transport = transport
        self.reuse_connections = bool(reuse_connections)

        merged: dict[str, str] = {"Accept": "application/json"}
        merged.update(dict(headers or {}))
        if user_agent and "User-Agent" not in merged:
            merged["User-Agent"] = user_agent
        self._options = _Options(timeout_seconds=float(timeout_seconds), headers=merged)
        self._client: httpx.Client | None = None
        self._finalizer: weakref.finalize | None = None

    @property
    def timeout_seconds(self) -> float:
        return self._options.timeout_seconds

    @property
    def headers(self) -> dict[str, str]:
        return dict(self._options.headers)

    # Copy-on-write configuration ---------------------------------------------

    def _copy(self, *, timeout_seconds: float | None = None, headers: Mapping[str, str] | None = None) -> "HttpClient":
        merged = dict(self._options.headers)
        merged.update(dict(headers or {}))
        return HttpClient(
            base_url=self.base_url,
            timeout_seconds=self.timeout_seconds if timeout_seconds is None else timeout_seconds,
            follow_redirects=self.follow_redirects,
            user_agent=None,
            headers=merged,
            transport=self.transport,
            reuse_connections=self.reuse_connections,
        )

    def with_headers(self, headers: Mapping[str, str]) -> "HttpClient":
        return self._copy(headers=headers)

    def with_token(self, token: str) -> "HttpClient":
        return self._copy(headers={"Authorization": f"Bearer {token}"})

    def with_timeout(self, seconds: float) -> "HttpClient":
        return self._copy(timeout_seconds=seconds)

    # Connection lifecycle ----------------------------------------------------

    def _build_client(self) -> httpx.Client:
        kwargs: dict[str, object] = {
            "timeout": float(max(_MIN_TIMEOUT_SECONDS, self.timeout_seconds)),
            "follow_redirects": self.follow_redirects,
            "headers": self._options.headers,
        }
        if self.base_url:
            kwargs["base_url"] = self.base_url
        if self.transport is not None:
            kwargs["transport"] = self.transport
        return httpx.Client(**kwargs)  # type: ignore[arg-type]

    def open(self) -> None:
        """Open an internal persistent `httpx.Client` when reuse is enabled."""
        if not self.reuse_connections:
            return
        if self._client is not None:
            return
        self._client = self._build_client()
        # Ensure we don't leak open pools if callers forget to close explicitly.
        self._finalizer = weakref.finalize(self, self._client.close)

    def close(self) -> None:
        """Close any internal persistent `httpx.Client`."""
        if self._finalizer is not None:
            self._finalizer.detach()
            self._finalizer = None
        if self._client is None:
            return
        self._client.close()
        self._client = None

    def __enter__(self) -> "HttpClient":
        self.open()
        return self

    def __exit__(self, exc_type: object, exc: object, tb: object) -> None:
        self.close()

    @contextmanager
    def _client_ctx(self) -> Iterator[httpx.Client]:
        if self.reuse_connections:
            self.open()
            assert self._client is not None
            yield self._client
            return
        with self._build_client() as client:
            yield client

    # Requests ----------------------------------------------------------------

    def execute_get(
        self,
        url_or_path: str,
        params: Mapping[str, Any] | None = None,
        *,
        timeout_seconds: float | None = None,
    ) -> TransportResult:
        """Send a single GET request and return a `TransportResult`.

        Query parameters keep their insertion order. Non-2xx responses are
        returned as `TransportOk`; only transport problems become
        `TransportFailure`.
        """
        target = (url_or_path or "").strip()
        if not target:
            raise ValueError("url_or_path must be non-empty.")

        request_kwargs: dict[str, Any] = {"params": list(dict(params).items()) if params else None}
        if timeout_seconds is not None:
            request_kwargs["timeout"] = float(max(_MIN_TIMEOUT_SECONDS, timeout_seconds))

        try:
            with self._client_ctx() as client:
                response = client.get(target, **request_kwargs)
                result = TransportOk(
                    status_code=int(response.status_code),
                    headers=dict(response.headers),
                    body=_response_text(response),
                    url=str(response.request.url),
                )
        except httpx.TimeoutException as exc:
            log.warning("GET {} timed out: {}", target, exc)
            return TransportFailure(
                kind=FailureKind.TIMEOUT,
                message=_truncate(f"Request timed out: {exc}", limit=_MAX_ERROR_TEXT_CHARS),
                url=self._describe(target),
            )
        except httpx.RequestError as exc:
            log.warning("GET {} failed: {}", target, exc)
            return TransportFailure(
                kind=FailureKind.NETWORK_ERROR,
                message=_truncate(str(exc) or type(exc).__name__, limit=_MAX_ERROR_TEXT_CHARS),
                url=self._describe(target),
            )

        log.debug("GET {} -> {}", result.url, result.status_code)
        return result

    def is_reachable(self, url_or_path: str, *, timeout_seconds: float | None = None) -> bool:
        """Return True when a GET request returns a 2xx response."""
        target = (url_or_path or "").strip()
        if not target:
            return False
        result = self.execute_get(target, timeout_seconds=timeout_seconds)
        return isinstance(result, TransportOk) and result.successful

    def _describe(self, target: str) -> str:
        if self.base_url and not target.startswith(("http://", "https://")):
            return f"{self.base_url}/{target.lstrip('/')}"
        return target
