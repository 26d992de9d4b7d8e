"""Streaming package for the consumer.

Exposes the read-loop stages, the session lifecycle and the caller-facing
helpers under a single namespace.
"""

from .stream_event import DONE, SKIP, DoneEvent, MalformedEvent, SkipEvent, StreamEvent, TokenEvent
from .chunk_decoder import ChunkDecoder
from .line_reassembler import LineReassembler
from .record_parser import RecordParser, parse_ndjson_line, parse_sse_line
from .cancellation_gate import CancellationGate
from .in_flight import InFlightGuard
from .callbacks import StreamCallbacks
from .session_state import SessionState
from .streaming_metrics import StreamMetrics
from .stream_session import StreamSession
from .accumulator import ResponseAccumulator, stream_events

__all__ = [
    "StreamEvent",
    "TokenEvent",
    "DoneEvent",
    "SkipEvent",
    "MalformedEvent",
    "DONE",
    "SKIP",
    "ChunkDecoder",
    "LineReassembler",
    "RecordParser",
    "parse_sse_line",
    "parse_ndjson_line",
    "CancellationGate",
    "InFlightGuard",
    "StreamCallbacks",
    "SessionState",
    "StreamMetrics",
    "StreamSession",
    "ResponseAccumulator",
    "stream_events",
]
