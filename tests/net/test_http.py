from __future__ import annotations

import httpx
import pytest

from radioapi.net.http import FailureKind, HttpClient, TransportFailure, TransportOk


def test_execute_get_encodes_params_in_order_and_sends_json_headers() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.method == "GET"
        assert request.url.scheme == "http"
        assert request.url.host == "example.local"
        assert request.url.path == "/api/streamtitle"
        assert list(request.url.params.keys()) == ["url", "language", "history"]
        assert request.url.params["url"] == "https://stream.example/radio?x=1"
        assert request.headers.get("accept") == "application/json"
        assert request.headers.get("user-agent") == "test-agent"
        return httpx.Response(200, json={"ok": True}, request=request)

    client = HttpClient(
        base_url="http://example.local/api/",
        timeout_seconds=1.0,
        user_agent="test-agent",
        transport=httpx.MockTransport(handler),
    )
    result = client.execute_get(
        "/streamtitle",
        {"url": "https://stream.example/radio?x=1", "language": "en", "history": "true"},
    )
    assert isinstance(result, TransportOk)
    assert result.status_code == 200
    assert result.successful
    assert result.json() == {"ok": True}
    assert result.url.startswith("http://example.local/api/streamtitle?")


def test_execute_get_returns_error_statuses_without_raising() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, content=b"down", headers={"Retry-After": "5"}, request=request)

    client = HttpClient(base_url="http://example.local", transport=httpx.MockTransport(handler))
    result = client.execute_get("/musicsearch")
    assert isinstance(result, TransportOk)
    assert result.status_code == 503
    assert result.failed
    assert result.is_server_error
    assert not result.is_client_error
    assert result.body == "down"
    assert result.header("retry-after") == "5"


def test_execute_get_maps_timeouts_to_timeout_failures() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("too slow", request=request)

    client = HttpClient(base_url="http://example.local", transport=httpx.MockTransport(handler))
    result = client.execute_get("/streamtitle")
    assert isinstance(result, TransportFailure)
    assert result.kind is FailureKind.TIMEOUT
    assert "too slow" in result.message
    assert result.url == "http://example.local/streamtitle"


def test_execute_get_maps_connection_errors_to_network_failures() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = HttpClient(base_url="http://example.local", transport=httpx.MockTransport(handler))
    result = client.execute_get("/colorthief")
    assert isinstance(result, TransportFailure)
    assert result.kind is FailureKind.NETWORK_ERROR
    assert "connection refused" in result.message


def test_execute_get_rejects_empty_target() -> None:
    client = HttpClient(base_url="http://example.local")
    with pytest.raises(ValueError):
        client.execute_get("  ")


def test_status_predicates() -> None:
    assert TransportOk(200, {}, "").is_ok
    assert TransportOk(301, {}, "").is_redirect
    assert TransportOk(401, {}, "").is_unauthorized
    assert TransportOk(403, {}, "").is_forbidden
    assert TransportOk(404, {}, "").is_not_found
    assert TransportOk(429, {}, "").is_too_many_requests
    assert TransportOk(204, {}, "").json() is None


def test_with_headers_returns_copy_and_keeps_original() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={}, request=request)

    base = HttpClient(base_url="http://example.local", transport=httpx.MockTransport(handler))
    tokened = base.with_token("secret").with_timeout(5)

    assert "Authorization" not in base.headers
    assert tokened.headers["Authorization"] == "Bearer secret"
    assert tokened.timeout_seconds == 5
    assert base.timeout_seconds == 30.0

    tokened.execute_get("/x")
    base.execute_get("/x")
    assert seen[0].headers.get("authorization") == "Bearer secret"
    assert seen[1].headers.get("authorization") is None


def test_reused_connections_close_cleanly() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={}, request=request)

    with HttpClient(
        base_url="http://example.local",
        transport=httpx.MockTransport(handler),
        reuse_connections=True,
    ) as client:
        assert isinstance(client.execute_get("/a"), TransportOk)
        assert isinstance(client.execute_get("/b"), TransportOk)
        assert client._client is not None
    assert client._client is None


def test_is_reachable_true_for_2xx_false_for_non_2xx_and_errors() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/ok":
            return httpx.Response(204, request=request)
        if request.url.path == "/bad":
            return httpx.Response(500, request=request)
        raise httpx.ConnectError("boom", request=request)

    client = HttpClient(base_url="http://example.local", transport=httpx.MockTransport(handler))
    assert client.is_reachable("/ok") is True
    assert client.is_reachable("/bad") is False
    assert client.is_reachable("/error") is False
