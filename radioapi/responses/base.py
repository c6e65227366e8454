"""Common base for RadioAPI response views."""

from __future__ import annotations

from typing import Any, Mapping

from radioapi.core.accessors import JsonView
from radioapi.core.classify import error_message

__all__ = ["ApiResponse"]


class ApiResponse:
    """Read-only view over a raw RadioAPI response body.

    Views never raise on missing or malformed fields; every accessor documents
    the value it falls back to. The body is deep-copied on construction so
    later mutation of the caller's dict cannot change what the view returns.
    """

    def __init__(self, data: Mapping[str, Any] | None) -> None:
        self._view = JsonView(data)

    @property
    def raw_data(self) -> dict[str, Any]:
        return self._view.data

    def to_dict(self) -> dict[str, Any]:
        return self._view.data

    def is_success(self) -> bool:
        """True unless the body carries a top-level ``error`` key."""
        return not self._view.has("error")

    @property
    def error(self) -> str | None:
        """Error message when `is_success()` is False; object errors use their ``message``."""
        if not self._view.has("error"):
            return None
        return error_message({"error": self._view.raw("error")})

    @property
    def status_code(self) -> int | None:
        """Status recorded in an error body (only set on non-throwing failures)."""
        return self._view.get_int("status")

    def __repr__(self) -> str:
        state = "ok" if self.is_success() else f"error={self.error!r}"
        return f"{type(self).__name__}({state})"
