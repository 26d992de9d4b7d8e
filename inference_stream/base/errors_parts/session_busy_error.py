"""Rejection raised when a conversation already has an active stream."""
from __future__ import annotations

from dataclasses import dataclass

from .error_code import ErrorCode
from .stream_error import StreamError


@dataclass
class SessionBusyError(StreamError):
    """Raised synchronously by ``StreamSession.start`` under single-in-flight.

    The already-active session is left untouched.
    """

    code: ErrorCode = ErrorCode.CONFLICT
    message: str = "a stream is already active for this conversation"


__all__ = ["SessionBusyError"]
