from __future__ import annotations

from typing import Any

import pytest

from radioapi.errors import RadioAPIError, TransportFailureError
from radioapi.net.retry import transport_retrying


class _Log:
    def __init__(self) -> None:
        self.warnings: list[tuple[Any, ...]] = []

    def warning(self, *args: Any) -> None:
        self.warnings.append(args)


def test_retries_transport_failures_then_succeeds() -> None:
    log = _Log()
    attempts = {"n": 0}

    def flaky() -> str:
        attempts["n"] += 1
        if attempts["n"] < 3:
            raise TransportFailureError("boom", kind="timeout")
        return "ok"

    retrying = transport_retrying(max_attempts=3, backoff_seconds=0.0, log=log, operation="test")
    assert retrying(flaky) == "ok"
    assert attempts["n"] == 3
    assert len(log.warnings) == 2


def test_reraises_last_transport_failure() -> None:
    def always_fails() -> None:
        raise TransportFailureError("down", kind="network_error")

    retrying = transport_retrying(max_attempts=2, backoff_seconds=0.0, log=_Log(), operation="test")
    with pytest.raises(TransportFailureError, match="down"):
        retrying(always_fails)


def test_does_not_retry_http_errors() -> None:
    attempts = {"n": 0}

    def server_error() -> None:
        attempts["n"] += 1
        raise RadioAPIError("oops", status_code=500)

    retrying = transport_retrying(max_attempts=5, backoff_seconds=0.0, log=_Log(), operation="test")
    with pytest.raises(RadioAPIError):
        retrying(server_error)
    assert attempts["n"] == 1
