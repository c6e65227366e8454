"""Turn transport results into either a JSON body or a `RadioAPIError`.

This is the single place where error values are constructed. The client's
throwing and non-throwing modes both consume the `Ok | Err` returned here.

Policies:
- A transport failure always becomes a status-0 error.
- An unparseable body (or a JSON value that is not an object) is always a
  `ProtocolError`, even on a 2xx; it is never coerced into an empty success.
- The remote API may report business errors with a 200 status, so a
  top-level ``error`` key or a body ``status`` >= 400 is an error too. When
  the body carries its own ``status`` >= 400 it takes precedence over the
  transport status code.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Generic, TypeVar, Union

from loguru import logger

from radioapi.errors import ProtocolError, RadioAPIError, TransportFailureError
from radioapi.net.http import TransportFailure, TransportOk, TransportResult

__all__ = ["Err", "Ok", "Result", "classify", "error_message"]

log = logger.bind(module="core.classify")

T = TypeVar("T")

UNKNOWN_ERROR = "Unknown API error"
INVALID_BODY = "invalid response body"


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    value: T

    @property
    def ok(self) -> bool:
        return True

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True, slots=True)
class Err:
    error: RadioAPIError

    @property
    def ok(self) -> bool:
        return False

    def unwrap(self) -> Any:
        raise self.error


Result = Union[Ok[T], Err]


def error_message(body: dict[str, Any]) -> str:
    """Pick the error message from a body: error, message, detail, else a default."""
    for key in ("error", "message", "detail"):
        value = body.get(key)
        if value is None or value == "":
            continue
        if isinstance(value, str):
            return value
        if isinstance(value, dict):
            nested = value.get("message")
            if isinstance(nested, str) and nested:
                return nested
        return json.dumps(value, default=str)
    return UNKNOWN_ERROR


def _body_status(body: dict[str, Any]) -> int | None:
    value = body.get("status")
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return None


def _reject_constant(name: str) -> Any:
    raise ValueError(f"non-standard JSON constant {name}")


def _parse_body(text: str) -> dict[str, Any] | None:
    """Return the JSON object in `text`, {} for an empty body, None if unusable."""
    if not text.strip():
        return {}
    try:
        data = json.loads(text, parse_constant=_reject_constant)
    except (json.JSONDecodeError, ValueError):
        return None
    if not isinstance(data, dict):
        return None
    return data


def classify(result: TransportResult, *, url: str, endpoint: str) -> Result[dict[str, Any]]:
    """Classify a transport result for `endpoint`."""
    context: dict[str, Any] = {"url": url or getattr(result, "url", ""), "endpoint": endpoint}

    if isinstance(result, TransportFailure):
        return Err(
            TransportFailureError(
                f"HTTP request failed: {result.message}",
                kind=result.kind.value,
                context=context,
            )
        )

    assert isinstance(result, TransportOk)
    context["status_code"] = result.status_code
    body = _parse_body(result.body)

    if body is None:
        log.warning("Unparseable body from {} (status={})", endpoint, result.status_code)
        if result.status_code >= 400:
            return Err(RadioAPIError(UNKNOWN_ERROR, status_code=result.status_code, context=context))
        return Err(ProtocolError(INVALID_BODY, status_code=result.status_code, context=context))

    body_status = _body_status(body)
    if result.status_code >= 400 or body.get("error") is not None or (body_status is not None and body_status >= 400):
        status = body_status if body_status is not None and body_status >= 400 else result.status_code
        message = error_message(body)
        log.debug("{} returned an error: {} (status={})", endpoint, message, status)
        return Err(RadioAPIError(message, status_code=status, error_data=body, context=context))

    if not 200 <= result.status_code < 300:
        # 1xx/3xx that were not followed.
        return Err(ProtocolError(f"unexpected HTTP status {result.status_code}", status_code=result.status_code, context=context))

    return Ok(body)
