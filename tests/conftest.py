from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Generator

import os
import pytest

import sys

import httpx


ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

# Keep a developer's shell/.env from leaking into tests.
for _name in list(os.environ):
    if _name.startswith("RADIOAPI_"):
        del os.environ[_name]

from radioapi.client import RadioAPI
from radioapi.client_config import ClientConfig
from radioapi.config import get_settings

BASE_URL = "http://radio.local"


class RecordingTransport(httpx.MockTransport):
    """MockTransport that remembers every request it served."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self.requests: list[httpx.Request] = []

        def _record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(_record)

    @property
    def calls(self) -> int:
        return len(self.requests)


def json_transport(payload: Any, status_code: int = 200) -> RecordingTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, json=payload, request=request)

    return RecordingTransport(handler)


@pytest.fixture(autouse=True)
def _clear_settings_cache() -> Generator[None, None, None]:
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def config() -> ClientConfig:
    """Return a fresh client config pointing at a fake host."""
    return ClientConfig(base_url=BASE_URL)


@pytest.fixture
def make_client(config: ClientConfig) -> Callable[..., tuple[RadioAPI, RecordingTransport]]:
    """Build a client whose transport answers every request with `payload`."""

    def _make(payload: Any = None, status_code: int = 200, **changes: Any) -> tuple[RadioAPI, RecordingTransport]:
        transport = json_transport(payload if payload is not None else {}, status_code)
        cfg = config.replace(**changes) if changes else config
        return RadioAPI(cfg, transport=transport), transport

    return _make


@pytest.fixture
def recording_transport() -> type[RecordingTransport]:
    """Return the RecordingTransport class for tests that need a custom handler."""
    return RecordingTransport
