"""RadioAPI client facade.

`RadioAPI` holds an immutable `ClientConfig` and exposes the three endpoint
operations. Every call is independent: one request is built, sent and
classified, and a typed response view is returned.

Two error styles share one code path:

- ``try_*`` methods return ``Ok(view) | Err(RadioAPIError)``;
- the plain methods unwrap that result, raising `RadioAPIError` when
  ``throw_on_api_errors`` is set, or returning a view whose ``is_success()``
  is False otherwise.

`InvalidArgument` is always raised, before any request is made.

The fluent setters (`language()`, `service()`, ...) return new clients and
never modify the receiver, so a client can be shared between threads.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, TypeVar

from loguru import logger

from radioapi.client_config import ClientConfig, validate_language
from radioapi.core.classify import Err, Ok, Result, classify
from radioapi.core.endpoints import (
    ColorQuery,
    EndpointRequest,
    MusicSearchQuery,
    StreamTitleQuery,
    build_color_thief,
    build_music_search,
    build_stream_title,
)
from radioapi.errors import RadioAPIError, TransportFailureError
from radioapi.net.http import HttpClient
from radioapi.net.retry import transport_retrying
from radioapi.responses import ApiResponse, ColorResponse, MusicSearchResponse, StreamTitleResponse
from radioapi.services import ServiceHint, normalize_service

if TYPE_CHECKING:
    import httpx

__all__ = [
    "RadioAPI",
    "get_image_colors",
    "get_stream_title",
    "search_music",
]

log = logger.bind(module="client")

V = TypeVar("V", bound=ApiResponse)


def _error_body(error: RadioAPIError) -> dict[str, Any]:
    """Body used for views returned in non-throwing mode."""
    body = dict(error.error_data)
    body["error"] = error.message
    body["status"] = error.status_code
    body["context"] = dict(error.context)
    return body


class RadioAPI:
    """Client for the RadioAPI service.

    The fluent setters (`language`, `service`, `with_history`, ...) return new
    clients with an updated config but the same `HttpClient`. Closing any of
    them, or leaving its `with` block, closes the shared connection pool for
    all of them when `reuse_connections=True`; close only the client you
    created and let derived clients go out of scope.
    """

    def __init__(
        self,
        config: ClientConfig,
        *,
        http: HttpClient | None = None,
        transport: "httpx.BaseTransport | None" = None,
        reuse_connections: bool = False,
    ) -> None:
        self.config = config
        self._http = http or HttpClient(
            base_url=config.base_url,
            timeout_seconds=config.timeout_seconds,
            user_agent=config.user_agent,
            transport=transport,
            reuse_connections=reuse_connections,
        )

    @classmethod
    def make(cls, base_url: str, api_key: str | None = None, **options: Any) -> "RadioAPI":
        """Build a client from a base URL; `options` are other `ClientConfig` fields
        plus the `transport` / `reuse_connections` keyword arguments."""
        transport = options.pop("transport", None)
        reuse_connections = bool(options.pop("reuse_connections", False))
        config = ClientConfig(base_url=base_url, api_key=api_key, **options)
        return cls(config, transport=transport, reuse_connections=reuse_connections)

    @classmethod
    def from_settings(cls, settings: Any = None, **overrides: Any) -> "RadioAPI":
        """Build a client from environment settings (see `radioapi.config`)."""
        if settings is None:
            from radioapi.config import get_settings

            settings = get_settings()
        transport = overrides.pop("transport", None)
        return cls(settings.to_client_config(**overrides), transport=transport)

    # Lifecycle ---------------------------------------------------------------

    def close(self) -> None:
        """Close any underlying persistent HTTP resources."""
        self._http.close()

    def __enter__(self) -> "RadioAPI":
        self._http.open()
        return self

    def __exit__(self, exc_type: object, exc: object, tb: object) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"RadioAPI(base_url={self.config.base_url!r}, language={self.config.language!r})"

    # Fluent configuration ----------------------------------------------------

    def _with(self, **changes: Any) -> "RadioAPI":
        return RadioAPI(self.config.replace(**changes), http=self._http)

    def language(self, code: str) -> "RadioAPI":
        return self._with(language=validate_language(code))

    def service(self, service: ServiceHint | None) -> "RadioAPI":
        return self._with(default_service=normalize_service(service))

    def with_history(self, enabled: bool = True) -> "RadioAPI":
        return self._with(include_history=bool(enabled))

    def without_history(self) -> "RadioAPI":
        return self.with_history(False)

    def timeout(self, seconds: float) -> "RadioAPI":
        return self._with(timeout_seconds=seconds)

    def throw_on_api_errors(self, enabled: bool = True) -> "RadioAPI":
        return self._with(throw_on_api_errors=bool(enabled))

    # Request execution -------------------------------------------------------

    def _send(self, request: EndpointRequest, url: str) -> Result[dict[str, Any]]:
        result = self._http.execute_get(
            request.path,
            request.params,
            timeout_seconds=self.config.timeout_seconds,
        )
        return classify(result, url=url, endpoint=request.endpoint)

    def execute(self, request: EndpointRequest) -> Result[dict[str, Any]]:
        """Send `request` and classify the outcome.

        Transport failures are retried only when ``max_retries > 0``; completed
        HTTP exchanges are never retried.
        """
        url = request.url(self.config.base_url)
        log.debug("GET {} endpoint={}", url, request.endpoint)

        if self.config.max_retries <= 0:
            outcome = self._send(request, url)
        else:

            def attempt() -> Result[dict[str, Any]]:
                sent = self._send(request, url)
                if isinstance(sent, Err) and isinstance(sent.error, TransportFailureError):
                    raise sent.error
                return sent

            retrying = transport_retrying(
                max_attempts=self.config.max_retries + 1,
                backoff_seconds=self.config.retry_backoff_seconds,
                log=log,
                operation=f"RadioAPI {request.endpoint}",
            )
            try:
                outcome = retrying(attempt)
            except TransportFailureError as exc:
                outcome = Err(exc)

        if isinstance(outcome, Err):
            log.warning(
                "RadioAPI {} failed: {} (status={})",
                request.endpoint,
                outcome.error.message,
                outcome.error.status_code,
            )
        return outcome

    def _view_result(self, request: EndpointRequest, factory: Callable[[dict[str, Any]], V]) -> Result[V]:
        outcome = self.execute(request)
        if isinstance(outcome, Ok):
            return Ok(factory(outcome.value))
        return outcome

    def _unwrap(self, result: Result[V], factory: Callable[[dict[str, Any]], V]) -> V:
        if isinstance(result, Ok):
            return result.value
        if self.config.throw_on_api_errors:
            raise result.error
        return factory(_error_body(result.error))

    # Result-returning operations ---------------------------------------------

    def try_get_stream_title(
        self,
        stream_url: str,
        service: ServiceHint | None = None,
        with_history: bool | None = None,
    ) -> Result[StreamTitleResponse]:
        request = build_stream_title(self.config, StreamTitleQuery(stream_url, service, with_history))
        return self._view_result(request, StreamTitleResponse)

    def try_search_music(
        self,
        query: str,
        service: ServiceHint | None = None,
        language: str | None = None,
    ) -> Result[MusicSearchResponse]:
        request = build_music_search(self.config, MusicSearchQuery(query, service, language))
        return self._view_result(request, MusicSearchResponse)

    def try_get_image_colors(self, image_url: str) -> Result[ColorResponse]:
        request = build_color_thief(self.config, ColorQuery(image_url))
        return self._view_result(request, ColorResponse)

    # Throwing / sentinel operations ------------------------------------------

    def get_stream_title(
        self,
        stream_url: str,
        service: ServiceHint | None = None,
        with_history: bool | None = None,
    ) -> StreamTitleResponse:
        """Get the current track (and optionally history) of a radio stream.

        Args:
            stream_url: URL of the radio stream.
            service: Catalog or platform hint; overrides the client default.
            with_history: Include play history; overrides the client default.

        Raises:
            InvalidArgument: When `stream_url` is empty.
            RadioAPIError: On failure, when ``throw_on_api_errors`` is set.
        """
        return self._unwrap(self.try_get_stream_title(stream_url, service, with_history), StreamTitleResponse)

    def search_music(
        self,
        query: str,
        service: ServiceHint | None = None,
        language: str | None = None,
    ) -> MusicSearchResponse:
        """Search music catalogs, e.g. ``search_music("Artist - Title", Service.SPOTIFY)``."""
        return self._unwrap(self.try_search_music(query, service, language), MusicSearchResponse)

    def get_image_colors(self, image_url: str) -> ColorResponse:
        """Extract dominant/text colors and a palette from a remote image."""
        return self._unwrap(self.try_get_image_colors(image_url), ColorResponse)


# Module-level conveniences: a fresh client per call, configured from the environment.


def get_stream_title(
    stream_url: str,
    service: ServiceHint | None = None,
    with_history: bool | None = None,
) -> StreamTitleResponse:
    with RadioAPI.from_settings() as client:
        return client.get_stream_title(stream_url, service, with_history)


def search_music(
    query: str,
    service: ServiceHint | None = None,
    language: str | None = None,
) -> MusicSearchResponse:
    with RadioAPI.from_settings() as client:
        return client.search_music(query, service, language)


def get_image_colors(image_url: str) -> ColorResponse:
    with RadioAPI.from_settings() as client:
        return client.get_image_colors(image_url)
