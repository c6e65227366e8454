"""Tenacity retry helpers for transport failures.

The client never retries on its own. Callers that opt in (``max_retries > 0``)
get a consistent linear backoff applied to timeouts and connection errors only;
completed HTTP exchanges are never retried, whatever their status code.
"""

from __future__ import annotations

from typing import Any

from tenacity import Retrying, retry_if_exception_type, stop_after_attempt, wait_incrementing

from radioapi.errors import TransportFailureError

__all__ = ["transport_retrying"]


def transport_retrying(
    *,
    max_attempts: int,
    backoff_seconds: float,
    log: Any,
    operation: str,
) -> Retrying:
    """Return a configured Tenacity `Retrying` instance for RadioAPI calls.

    Notes:
    - `max_attempts` maps to Tenacity's `stop_after_attempt(max_attempts)`.
    - sleep = backoff_seconds * attempt_number (1-indexed).
    - Only `TransportFailureError` is retried; the last one is re-raised.
    """

    max_attempts = max(1, int(max_attempts))
    backoff_seconds = max(0.0, float(backoff_seconds))
    operation = (operation or "RadioAPI call").strip() or "RadioAPI call"

    def _before_sleep(retry_state) -> None:  # type: ignore[no-untyped-def]
        exc = retry_state.outcome.exception() if retry_state.outcome else None
        sleep = getattr(getattr(retry_state, "next_action", None), "sleep", None)
        attempt = getattr(retry_state, "attempt_number", None)
        if sleep is None:
            log.warning("{} attempt {} failed: {}. Retrying...", operation, attempt, exc)
            return
        log.warning(
            "{} attempt {} failed: {}. Retrying in {:.1f}s",
            operation,
            attempt,
            exc,
            float(sleep),
        )

    return Retrying(
        stop=stop_after_attempt(max_attempts),
        wait=wait_incrementing(start=backoff_seconds, increment=backoff_seconds),
        retry=retry_if_exception_type(TransportFailureError),
        reraise=True,
        before_sleep=_before_sleep,
    )
