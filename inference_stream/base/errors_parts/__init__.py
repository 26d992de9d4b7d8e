"""Errors parts package public surface.

Prefer importing from `inference_stream.base.errors` for the stable surface.
"""

from .error_code import ErrorCode
from .stream_error import StreamError
from .session_busy_error import SessionBusyError
from .classification import classify_exception, status_error

__all__ = ["ErrorCode", "StreamError", "SessionBusyError", "classify_exception", "status_error"]
