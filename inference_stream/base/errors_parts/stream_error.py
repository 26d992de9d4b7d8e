"""
Structured stream error exception type.

Wraps transport failures, non-2xx responses, and internal faults with a
normalized `ErrorCode`. Instances are what ``on_error`` receives.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .error_code import ErrorCode


@dataclass
class StreamError(Exception):
    """Represents a structured stream failure with a normalized error code.

    Attributes:
        code: Normalized :class:`ErrorCode` classification for the failure.
        message: Human-readable detail. For a non-2xx response this is the
            response body text exactly as the backend sent it.
        model: Optional model identifier associated with the failure.
        status_code: HTTP status of the initial response, when there was one.
        raw: Optional original exception for diagnostics.
    """

    code: ErrorCode
    message: str
    model: Optional[str] = None
    status_code: Optional[int] = None
    raw: Optional[Exception] = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        """Return the detail message; code and status are available as fields."""
        return self.message

    def describe(self) -> str:
        """Return a compact one-line description for logs and CLI output."""
        status = f" (HTTP {self.status_code})" if self.status_code is not None else ""
        return f"{self.model or '-'} {self.code.value}{status}: {self.message}"


__all__ = ["StreamError"]
