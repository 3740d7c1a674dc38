"""Error classification for the remote service boundaries.

One classifier decides, for every absorbed failure:
- whether the gateway retries it (transient/server/timeout only)
- whether it counts against the gateway circuit breaker
- which class is recorded on a failed Outcome and in the logs
"""

from __future__ import annotations

import asyncio
from enum import Enum

import httpx


class ErrorClass(Enum):
    TRANSIENT = "transient"  # 429, connection errors: retryable
    SERVER = "server"  # 500, 502, 503: retryable
    TIMEOUT = "timeout"  # deadline exceeded: retryable with backoff
    CLIENT = "client"  # 400, 401, 403, 404: do NOT retry
    MALFORMED = "malformed"  # unexpected payload shape: do NOT retry
    UNKNOWN = "unknown"  # unclassified: do NOT retry


def status_code_of(error: BaseException) -> int | None:
    """HTTP status attached to an error, if any.

    httpx puts it on ``error.response``; litellm and openai errors carry
    ``status_code`` directly.
    """
    status_code = getattr(error, "status_code", None)
    if isinstance(status_code, int):
        return status_code
    response = getattr(error, "response", None)
    if isinstance(response, httpx.Response):
        return response.status_code
    return None


def classify_error(error: BaseException) -> ErrorClass:
    """Classify an error to determine handling strategy.

    Checks structured attributes and httpx exception types first, falls
    back to string matching for untyped exceptions.
    """
    status_code = status_code_of(error)
    if status_code is not None:
        if status_code == 429:
            return ErrorClass.TRANSIENT
        if 400 <= status_code < 500:
            return ErrorClass.CLIENT
        if 500 <= status_code < 600:
            return ErrorClass.SERVER

    if isinstance(
        error, (TimeoutError, asyncio.TimeoutError, httpx.TimeoutException)
    ):
        return ErrorClass.TIMEOUT
    if isinstance(error, (httpx.TransportError, ConnectionError)):
        return ErrorClass.TRANSIENT
    if isinstance(error, (ValueError, TypeError, KeyError)):
        return ErrorClass.MALFORMED

    msg = str(error).lower()

    if "timeout" in msg or "timed out" in msg:
        return ErrorClass.TIMEOUT
    if "429" in msg or "rate limit" in msg or "rate_limit" in msg:
        return ErrorClass.TRANSIENT
    if any(code in msg for code in ("500", "502", "503", "504")):
        return ErrorClass.SERVER
    if "econnrefused" in msg or "connection" in msg:
        return ErrorClass.TRANSIENT

    return ErrorClass.UNKNOWN


_RETRYABLE = frozenset({
    ErrorClass.TRANSIENT,
    ErrorClass.SERVER,
    ErrorClass.TIMEOUT,
})


def is_retryable(error: BaseException) -> bool:
    """Return True if the error category supports retry."""
    return classify_error(error) in _RETRYABLE
