"""Parsed stream events.

Each logical line is classified into exactly one of four variants. A line is
parsed into a tuple of events because an NDJSON record may carry both a final
content fragment and the ``done`` flag; in that case the tuple is
``(TokenEvent, DoneEvent)`` in that order.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class StreamEvent:
    """Base class for parsed line events."""


@dataclass(frozen=True)
class TokenEvent(StreamEvent):
    """A content fragment to append, in arrival order."""

    text: str


@dataclass(frozen=True)
class DoneEvent(StreamEvent):
    """Explicit end-of-stream sentinel."""


@dataclass(frozen=True)
class SkipEvent(StreamEvent):
    """A structurally valid but semantically empty line (blank, comment, heartbeat)."""


@dataclass(frozen=True)
class MalformedEvent(StreamEvent):
    """A line that failed to parse; non-fatal."""

    raw_line: str
    error: Optional[str] = None


DONE = DoneEvent()
SKIP = SkipEvent()

__all__ = [
    "StreamEvent",
    "TokenEvent",
    "DoneEvent",
    "SkipEvent",
    "MalformedEvent",
    "DONE",
    "SKIP",
]
