"""Exception hierarchy for the RadioAPI client.

A single `RadioAPIError` type carries every failure that reached (or tried to
reach) the remote service. The status code decides what kind of failure it
was; use the `is_*` predicates rather than subclass checks when branching on
client/server/network errors.
"""

from __future__ import annotations

import json
from typing import Any, Mapping

__all__ = [
    "InvalidArgument",
    "ProtocolError",
    "RadioAPICoreError",
    "RadioAPIError",
    "TransportFailureError",
]


class RadioAPICoreError(RuntimeError):
    """Base class for all errors raised by the radioapi package."""


class InvalidArgument(RadioAPICoreError, ValueError):
    """Raised when caller input or configuration is invalid.

    Always raised before any network call is attempted.
    """


class RadioAPIError(RadioAPICoreError):
    """Raised when a RadioAPI request fails or returns an error response."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int = 0,
        error_data: Mapping[str, Any] | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = str(message)
        self.status_code = int(status_code or 0)
        self.error_data: dict[str, Any] = dict(error_data or {})
        self.context: dict[str, Any] = dict(context or {})

    def __str__(self) -> str:
        if self.status_code <= 0:
            return self.message
        return f"{self.message} (status={self.status_code})"

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r}, status_code={self.status_code})"

    # Error body helpers ------------------------------------------------------

    def has_error_field(self, field: str) -> bool:
        return self.error_data.get(field) is not None

    def get_error_field(self, field: str, default: Any = None) -> Any:
        value = self.error_data.get(field)
        return default if value is None else value

    def detailed_message(self) -> str:
        """Return the message followed by status, context, and error data."""
        parts = [self.message]
        if self.status_code > 0:
            parts[0] += f" (HTTP {self.status_code})"
        if self.context:
            parts.append("Context: " + json.dumps(self.context, indent=2, default=str))
        if self.error_data:
            parts.append("Error Data: " + json.dumps(self.error_data, indent=2, default=str))
        return "\n".join(parts)

    # Classification ----------------------------------------------------------

    @property
    def is_client_error(self) -> bool:
        return 400 <= self.status_code < 500

    @property
    def is_server_error(self) -> bool:
        return 500 <= self.status_code < 600

    @property
    def is_network_error(self) -> bool:
        return self.status_code < 100

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
    def is_rate_limited(self) -> bool:
        return self.status_code == 429

    @property
    def is_timeout(self) -> bool:
        return self.context.get("failure_kind") == "timeout"


class ProtocolError(RadioAPIError):
    """Raised when a response arrived but its body cannot be used."""


class TransportFailureError(RadioAPIError):
    """Raised when no HTTP response was obtained (timeout, DNS, reset...)."""

    def __init__(
        self,
        message: str,
        *,
        kind: str,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        merged = dict(context or {})
        merged["failure_kind"] = kind
        super().__init__(message, status_code=0, context=merged)
        self.kind = kind
