"""
Error classification helpers mapping exceptions to normalized ErrorCode values.

Implements httpx exception mapping, HTTP status extraction, and a status-to-code
table shared by transport failures and non-2xx initial responses.
"""
from __future__ import annotations

import asyncio
from typing import Dict, Optional

import httpx

from .error_code import ErrorCode
from .stream_error import StreamError


def _extract_status(exc: Exception) -> Optional[int]:
    """Attempt to extract an HTTP status code from an exception.

    Supported attribute shapes (checked in order):
    - ``exc.status_code``
    - ``exc.response.status_code``
    Returns ``None`` if no valid status can be found.
    """
    val = getattr(exc, "status_code", None)
    if isinstance(val, int) and 100 <= val < 600:
        return val
    try:
        resp = getattr(exc, "response", None)
    except RuntimeError:  # httpx raises when the request has no response yet
        resp = None
    if resp is not None:
        sc = getattr(resp, "status_code", None)
        if isinstance(sc, int) and 100 <= sc < 600:
            return sc
    return None


_HTTP_STATUS_MAP: Dict[int, ErrorCode] = {
    400: ErrorCode.VALIDATION,
    401: ErrorCode.AUTH,
    403: ErrorCode.AUTH,
    404: ErrorCode.NOT_FOUND,
    408: ErrorCode.TIMEOUT,
    409: ErrorCode.CONFLICT,
    422: ErrorCode.VALIDATION,
    429: ErrorCode.RATE_LIMIT,
    500: ErrorCode.SERVER_ERROR,
    502: ErrorCode.TRANSIENT,
    503: ErrorCode.UNAVAILABLE,
    504: ErrorCode.TIMEOUT,
}


def code_for_status(status: int) -> ErrorCode:
    """Map an HTTP status to an :class:`ErrorCode` (5xx default to server error)."""
    if status in _HTTP_STATUS_MAP:
        return _HTTP_STATUS_MAP[status]
    if status >= 500:
        return ErrorCode.SERVER_ERROR
    return ErrorCode.UNKNOWN


def classify_exception(exc: Exception) -> ErrorCode:
    """Classify an exception into a normalized :class:`ErrorCode`.

    Precedence:
        1. StreamError passthrough.
        2. Timeout exceptions (httpx, builtin, asyncio).
        3. Connection failures (DNS, refused) and broken reads.
        4. HTTP status mapping.
        5. ``UNKNOWN`` fallback.
    """
    if isinstance(exc, StreamError):
        return exc.code
    if isinstance(exc, (httpx.TimeoutException, TimeoutError, asyncio.TimeoutError)):
        return ErrorCode.TIMEOUT
    if isinstance(exc, httpx.ConnectError):
        return ErrorCode.UNAVAILABLE
    if isinstance(exc, (httpx.ReadError, httpx.RemoteProtocolError, httpx.WriteError)):
        return ErrorCode.TRANSIENT
    status = _extract_status(exc)
    if status is not None:
        return code_for_status(status)
    return ErrorCode.UNKNOWN


def status_error(status_code: int, body: str, *, model: Optional[str] = None) -> StreamError:
    """Build the error reported for a non-2xx initial response.

    The body text is surfaced verbatim as the detail; an empty body falls back
    to the status line so callers never render a blank error.
    """
    detail = body if body.strip() else f"HTTP {status_code}"
    return StreamError(
        code=code_for_status(status_code),
        message=detail,
        model=model,
        status_code=status_code,
    )


__all__ = [
    "classify_exception",
    "code_for_status",
    "status_error",
    "_extract_status",
    "_HTTP_STATUS_MAP",
]
