"""Streaming metrics for a single session.

Kept separate from the session so the finalize log can be built from a plain
value object.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional


@dataclass
class StreamMetrics:
    """Counters collected while a session is active.

    Fields:
      emitted: number of ``on_token`` calls
      bytes_received: raw bytes read from the transport
      lines: complete logical lines parsed
      malformed: lines that failed to parse (absorbed)
      time_to_first_token_ms: latency from start to the first token
      total_duration_ms: latency from start to the terminal transition
    """

    emitted: int = 0
    bytes_received: int = 0
    lines: int = 0
    malformed: int = 0
    time_to_first_token_ms: Optional[float] = None
    total_duration_ms: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


__all__ = ["StreamMetrics"]
