"""Wire format selector bound to the target endpoint."""
from __future__ import annotations

from enum import Enum


class WireFormat(str, Enum):
    """Streaming body shapes understood by the record parser.

    SSE: OpenAI-style ``data: {json}`` records terminated by ``data: [DONE]``.
    NDJSON: one JSON object per line, terminated by ``"done": true``.
    """

    SSE = "sse"
    NDJSON = "ndjson"


__all__ = ["WireFormat"]
