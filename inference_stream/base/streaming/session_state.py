"""Lifecycle states of a stream session."""
from __future__ import annotations

from enum import Enum


class SessionState(str, Enum):
    """``IDLE -> ACTIVE -> {COMPLETED | ABORTED | FAILED}``; terminal states are sinks."""

    IDLE = "idle"
    ACTIVE = "active"
    COMPLETED = "completed"
    ABORTED = "aborted"
    FAILED = "failed"

    @property
    def terminal(self) -> bool:
        return self in (SessionState.COMPLETED, SessionState.ABORTED, SessionState.FAILED)


__all__ = ["SessionState"]
