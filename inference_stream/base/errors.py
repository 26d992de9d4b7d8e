"""Unified stream error taxonomy public surface.

This module re-exports the one-class-per-file implementations under
``inference_stream.base.errors_parts`` to maintain a stable import path.
"""

from .errors_parts.error_code import ErrorCode
from .errors_parts.stream_error import StreamError
from .errors_parts.session_busy_error import SessionBusyError
from .errors_parts.classification import classify_exception, status_error

__all__ = ["ErrorCode", "StreamError", "SessionBusyError", "classify_exception", "status_error"]
