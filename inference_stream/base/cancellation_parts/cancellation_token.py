"""Cooperative cancellation token implementation.

Exposes the ``CancellationToken`` class handed in by callers to stop an
in-flight stream. Besides polling (``cancelled`` / ``raise_if_cancelled``) the
token supports callback registration so an awaiting read loop can be woken
immediately instead of at the next chunk boundary.
"""

from __future__ import annotations

from threading import Lock
from typing import Callable, List, Optional

from .state import State
from .cancelled_error import CancelledError


class CancellationToken:
    """A cooperative cancellation token with optional cascading semantics.

    Thread-safe: ``cancel`` may be invoked from a UI thread while the stream
    runs on an event loop elsewhere. Child tokens inherit cancellation when the
    parent is cancelled.
    """

    def __init__(self, *, parent: "CancellationToken | None" = None) -> None:
        self._state = State()
        self._lock = Lock()
        self._children: List[CancellationToken] = []
        if parent is not None:
            parent.link_child(self)

    @property
    def cancelled(self) -> bool:  # noqa: D401 - short form
        """Whether cancellation has been requested."""
        return self._state.cancelled

    @property
    def reason(self) -> str | None:  # noqa: D401 - short form
        """Reason string supplied at cancel time (if any)."""
        return self._state.reason

    def cancel(self, reason: str | None = None) -> None:
        """Request cancellation, notify callbacks, and cascade to children.

        Idempotent: only the first call records a reason and fires callbacks.
        """
        with self._lock:
            if self._state.cancelled:
                return
            self._state.cancelled = True
            self._state.reason = reason
            callbacks = list(self._state.callbacks.values())
            self._state.callbacks.clear()
            children = list(self._children)
        for callback in callbacks:
            callback(reason)
        for child in children:
            child.cancel(reason)

    def add_callback(self, callback: Callable[[Optional[str]], None]) -> int:
        """Register ``callback(reason)`` to run once when the token fires.

        If the token is already cancelled the callback runs immediately.
        Returns a handle for :meth:`remove_callback`.
        """
        with self._lock:
            handle = self._state.next_handle
            self._state.next_handle += 1
            if not self._state.cancelled:
                self._state.callbacks[handle] = callback
                return handle
            reason = self._state.reason
        callback(reason)
        return handle

    def remove_callback(self, handle: int) -> None:
        """Unregister a callback; unknown or already-fired handles are ignored."""
        with self._lock:
            self._state.callbacks.pop(handle, None)

    def link_child(self, token: "CancellationToken") -> "CancellationToken":
        """Link a child token so parent cancellation cascades (returns child)."""
        with self._lock:
            self._children.append(token)
            should_cancel = self._state.cancelled
            reason = self._state.reason
        if should_cancel:
            token.cancel(reason)
        return token

    def raise_if_cancelled(self) -> None:
        """Raise ``CancelledError`` if token is cancelled."""
        if self._state.cancelled:
            raise CancelledError(self._state.reason or "stream cancelled")

    def child(self) -> "CancellationToken":
        """Create and link a child token (shortcut)."""
        return CancellationToken(parent=self)

    def __repr__(self) -> str:  # pragma: no cover - introspection aid
        return (
            f"CancellationToken(cancelled={self._state.cancelled}, "
            f"reason={self._state.reason!r}, children={len(self._children)})"
        )


__all__ = ["CancellationToken"]
