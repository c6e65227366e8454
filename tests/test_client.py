from __future__ import annotations

import httpx
import pytest

from radioapi import (
    ClientConfig,
    Err,
    InvalidArgument,
    Ok,
    ProtocolError,
    RadioAPI,
    RadioAPIError,
    Service,
    TransportFailureError,
)
from radioapi.responses import ColorResponse, MusicSearchResponse, StreamTitleResponse


def test_get_stream_title_builds_request_and_wraps_body(make_client) -> None:
    client, transport = make_client(
        {"metadataFound": True, "artist": "A", "song": "B", "history": []},
        api_key="secret",
    )
    response = client.get_stream_title("https://stream.example/radio", Service.SPOTIFY)

    assert isinstance(response, StreamTitleResponse)
    assert response.get_current_track().title == "B"
    assert transport.calls == 1
    request = transport.requests[0]
    assert request.url.path == "/streamtitle/spotify"
    assert dict(request.url.params) == {
        "url": "https://stream.example/radio",
        "language": "en",
        "history": "true",
        "api_key": "secret",
    }
    assert request.headers["accept"] == "application/json"


def test_search_music_scenario(make_client) -> None:
    client, transport = make_client({"artist": "The Beatles", "title": "Hey Jude"})
    response = client.search_music("The Beatles - Hey Jude", service="spotify")

    assert isinstance(response, MusicSearchResponse)
    assert response.get_tracks() == [response.get_first_track()]
    request = transport.requests[0]
    assert request.url.path == "/musicsearch/spotify"
    assert request.url.params["query"] == "The Beatles - Hey Jude"
    assert request.url.params["language"] == "en"


def test_get_image_colors_scenario(make_client) -> None:
    client, transport = make_client({"dominant_color_rgb": {"r": 255, "g": 87, "b": 51}})
    response = client.get_image_colors("https://x/img.jpg")

    assert isinstance(response, ColorResponse)
    assert response.get_dominant_color_css() == "rgb(255, 87, 51)"
    assert transport.requests[0].url.path == "/colorthief"


def test_empty_stream_url_makes_no_request(make_client) -> None:
    client, transport = make_client({})
    with pytest.raises(InvalidArgument):
        client.get_stream_title("")
    with pytest.raises(InvalidArgument):
        client.search_music("   ")
    with pytest.raises(InvalidArgument):
        client.get_image_colors("")
    assert transport.calls == 0


def test_invalid_argument_raised_even_when_not_throwing(make_client) -> None:
    client, transport = make_client({}, throw_on_api_errors=False)
    with pytest.raises(InvalidArgument):
        client.get_stream_title(" ")
    assert transport.calls == 0


def test_api_error_is_raised_by_default(make_client) -> None:
    client, transport = make_client({"error": "not found"}, status_code=404)
    with pytest.raises(RadioAPIError) as excinfo:
        client.get_stream_title("https://stream.example/radio")
    error = excinfo.value
    assert error.status_code == 404
    assert error.message == "not found"
    assert error.is_client_error
    assert error.context["endpoint"] == "streamtitle"
    assert error.context["url"].startswith("http://radio.local/streamtitle?url=")
    assert transport.calls == 1


def test_non_throwing_mode_returns_unsuccessful_view(make_client) -> None:
    client, _ = make_client({"error": "quota exceeded", "status": 429}, throw_on_api_errors=False)
    response = client.search_music("anything")
    assert not response.is_success()
    assert response.error == "quota exceeded"
    assert response.status_code == 429
    assert response.get_tracks() == []


def test_try_methods_return_results(make_client) -> None:
    client, _ = make_client({"metadataFound": False})
    outcome = client.try_get_stream_title("https://stream.example/radio")
    assert isinstance(outcome, Ok)
    assert outcome.value.get_current_track() is None

    failing, _ = make_client({"error": "boom"}, status_code=500)
    outcome = failing.try_get_image_colors("https://x/img.jpg")
    assert isinstance(outcome, Err)
    assert outcome.error.is_server_error


def test_timeout_is_status_zero_after_single_call(config: ClientConfig, recording_transport) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectTimeout("timed out", request=request)

    transport = recording_transport(handler)
    client = RadioAPI(config, transport=transport)
    with pytest.raises(TransportFailureError) as excinfo:
        client.get_stream_title("https://stream.example/radio")
    assert excinfo.value.status_code == 0
    assert excinfo.value.kind == "timeout"
    assert excinfo.value.is_network_error
    assert transport.calls == 1


def test_invalid_json_raises_protocol_error(config: ClientConfig, recording_transport) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=b"{not json", request=request)

    client = RadioAPI(config, transport=recording_transport(handler))
    with pytest.raises(ProtocolError):
        client.get_image_colors("https://x/img.jpg")


def test_nan_in_body_raises_protocol_error(config: ClientConfig, recording_transport) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=b'{"dominant_color_rgb": {"r": NaN, "g": 1, "b": 2}}', request=request)

    client = RadioAPI(config, transport=recording_transport(handler))
    with pytest.raises(ProtocolError):
        client.get_image_colors("https://x/img.jpg")
    response = client.throw_on_api_errors(False).get_image_colors("https://x/img.jpg")
    assert not response.is_success()
    assert response.get_dominant_color_css() is None


def test_retries_only_transport_failures(config: ClientConfig, recording_transport) -> None:
    state = {"n": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        state["n"] += 1
        if state["n"] == 1:
            raise httpx.ConnectError("reset", request=request)
        return httpx.Response(200, json={"metadataFound": True, "artist": "A", "song": "B"}, request=request)

    transport = recording_transport(handler)
    client = RadioAPI(config.replace(max_retries=2, retry_backoff_seconds=0), transport=transport)
    assert client.get_stream_title("https://stream.example/radio").artist == "A"
    assert transport.calls == 2

    server_error = recording_transport(lambda request: httpx.Response(500, json={"error": "x"}, request=request))
    client = RadioAPI(config.replace(max_retries=3, retry_backoff_seconds=0), transport=server_error)
    with pytest.raises(RadioAPIError):
        client.get_stream_title("https://stream.example/radio")
    assert server_error.calls == 1


def test_no_retry_by_default(config: ClientConfig, recording_transport) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("reset", request=request)

    transport = recording_transport(handler)
    client = RadioAPI(config, transport=transport)
    outcome = client.try_search_music("q")
    assert isinstance(outcome, Err)
    assert transport.calls == 1


def test_fluent_setters_return_new_clients(make_client) -> None:
    client, transport = make_client({"metadataFound": False})
    tuned = client.language("fr").service(Service.DEEZER).without_history().timeout(5).throw_on_api_errors(False)

    assert client.config.language == "en"
    assert client.config.default_service is None
    assert client.config.include_history is True
    assert tuned.config.language == "fr"
    assert tuned.config.default_service == "deezer"
    assert tuned.config.include_history is False
    assert tuned.config.timeout_seconds == 5
    assert tuned.config.throw_on_api_errors is False

    tuned.get_stream_title("https://stream.example/radio")
    request = transport.requests[0]
    assert request.url.path == "/streamtitle/deezer"
    assert request.url.params["language"] == "fr"
    assert request.url.params["history"] == "false"


def test_derived_clients_share_the_connection_pool(config: ClientConfig, recording_transport) -> None:
    transport = recording_transport(lambda request: httpx.Response(200, json={}, request=request))
    client = RadioAPI(config, transport=transport, reuse_connections=True)
    derived = client.language("fr")
    assert derived._http is client._http

    with derived:
        derived.get_image_colors("https://x/img.jpg")
        assert client._http._client is not None
    assert client._http._client is None

    client.get_image_colors("https://x/img.jpg")
    assert transport.calls == 2
    client.close()


def test_fluent_language_is_validated(make_client) -> None:
    client, _ = make_client({})
    with pytest.raises(InvalidArgument):
        client.language("EN")


def test_make_and_context_manager() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"palette": [{"hex": "#000000"}]}, request=request)

    with RadioAPI.make(
        "https://api.example.com/",
        api_key="k",
        language="ja",
        transport=httpx.MockTransport(handler),
        reuse_connections=True,
    ) as client:
        assert client.config.base_url == "https://api.example.com"
        assert client.get_image_colors("https://x/img.jpg").palette_count == 1


def test_from_settings_uses_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("RADIOAPI_BASE_URL", "https://env.example.com")
    monkeypatch.setenv("RADIOAPI_SERVICE", "kkbox")

    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"tracks": []}, request=request)

    client = RadioAPI.from_settings(transport=httpx.MockTransport(handler))
    client.search_music("q")
    assert str(seen[0].url).startswith("https://env.example.com/musicsearch/kkbox?")
