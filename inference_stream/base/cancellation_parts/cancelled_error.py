"""Cancellation error type.

Defines the public ``CancelledError`` used inside the read loop to unwind a
session when its cancellation token fires. Deliberately distinct from
``asyncio.CancelledError``: this one means "the caller asked to stop", which
ends the session in the ``Aborted`` state rather than cancelling the task.
"""

from __future__ import annotations


class CancelledError(RuntimeError):
    """Raised when a stream observes a cooperative cancellation request."""


__all__ = ["CancelledError"]
