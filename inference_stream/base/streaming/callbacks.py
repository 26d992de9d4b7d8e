"""Caller-facing callback bundle for a stream session."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

from ..errors import StreamError


@dataclass(frozen=True)
class StreamCallbacks:
    """The three public callbacks plus an optional diagnostic sink.

    on_token: called once per token, in arrival order (zero or more times).
    on_complete: called exactly once on graceful end or cancellation.
    on_error: called exactly once on failure; never together with on_complete.
    on_malformed: receives the raw text of each unparseable line.
    """

    on_token: Callable[[str], None]
    on_complete: Callable[[], None]
    on_error: Callable[[StreamError], None]
    on_malformed: Optional[Callable[[str], None]] = None


__all__ = ["StreamCallbacks"]
