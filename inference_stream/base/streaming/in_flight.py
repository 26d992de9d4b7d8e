"""Single-in-flight guard owned by a conversation.

At most one stream session may be active per conversation. The guard is the
only piece of state shared between sessions: it is acquired synchronously
before any asynchronous work starts and released from the session's terminal
transition. Each conversation owns its own guard, so independent
conversations can stream concurrently.
"""
from __future__ import annotations

from threading import Lock
from typing import Optional

from ..errors import SessionBusyError


class InFlightGuard:
    """Ownership flag for the active session of one conversation."""

    def __init__(self) -> None:
        self._lock = Lock()
        self._owner: Optional[object] = None

    @property
    def active(self) -> bool:
        return self._owner is not None

    @property
    def owner(self) -> Optional[object]:
        return self._owner

    def acquire(self, owner: object) -> None:
        """Mark ``owner`` as the active session.

        Raises :class:`SessionBusyError` without touching the current owner when
        another session holds the guard. Re-acquiring by the same owner is a no-op.
        """
        with self._lock:
            if self._owner is not None and self._owner is not owner:
                raise SessionBusyError()
            self._owner = owner

    def release(self, owner: object) -> bool:
        """Clear the flag if ``owner`` holds it; returns whether it did."""
        with self._lock:
            if self._owner is not owner:
                return False
            self._owner = None
            return True


__all__ = ["InFlightGuard"]
