"""Classification of logical lines into stream events.

Two modes, selected once per session from ``StreamRequest.format``:

SSE
    Blank lines and ``:`` comments are skipped, as is any field other than
    ``data: `` (``event:``, ``id:``, ``retry:``). ``data: [DONE]`` ends the
    stream. Other payloads are JSON chat-completion chunks whose
    ``choices[0].delta.content`` carries the token text.

NDJSON
    Each non-blank line is a JSON object. ``message.content`` (or a top-level
    ``response`` string, as sent by ``/api/generate``) carries the token text;
    ``"done": true`` ends the stream. Both may appear on the same line.

Parse failures are reported as :class:`MalformedEvent` and never raise.
"""
from __future__ import annotations

import json
from typing import Any, Optional, Tuple

from ..constants import SSE_COMMENT_PREFIX, SSE_DATA_PREFIX, SSE_DONE_SENTINEL
from ..models import WireFormat
from .stream_event import DONE, SKIP, MalformedEvent, StreamEvent, TokenEvent

Events = Tuple[StreamEvent, ...]


def _non_empty_str(value: Any) -> Optional[str]:
    return value if isinstance(value, str) and value else None


def _sse_delta_content(data: Any) -> Optional[str]:
    """Return ``choices[0].delta.content`` when present and non-empty."""
    if not isinstance(data, dict):
        return None
    choices = data.get("choices")
    if not isinstance(choices, list) or not choices:
        return None
    first = choices[0]
    if not isinstance(first, dict):
        return None
    delta = first.get("delta")
    if not isinstance(delta, dict):
        return None
    return _non_empty_str(delta.get("content"))


def parse_sse_line(line: str) -> Events:
    """Parse one SSE line."""
    text = line.strip()
    if not text or text.startswith(SSE_COMMENT_PREFIX):
        return (SKIP,)
    if not text.startswith(SSE_DATA_PREFIX):
        return (SKIP,)
    payload = text[len(SSE_DATA_PREFIX):].strip()
    if payload == SSE_DONE_SENTINEL:
        return (DONE,)
    try:
        data = json.loads(payload)
    except ValueError as e:
        return (MalformedEvent(raw_line=line, error=str(e)),)
    content = _sse_delta_content(data)
    return (TokenEvent(content),) if content is not None else (SKIP,)


def _ndjson_content(data: dict) -> Optional[str]:
    message = data.get("message")
    if isinstance(message, dict):
        content = _non_empty_str(message.get("content"))
        if content is not None:
            return content
    return _non_empty_str(data.get("response"))


def parse_ndjson_line(line: str) -> Events:
    """Parse one NDJSON line; token precedes done when both are present."""
    text = line.strip()
    if not text:
        return (SKIP,)
    try:
        data = json.loads(text)
    except ValueError as e:
        return (MalformedEvent(raw_line=line, error=str(e)),)
    if not isinstance(data, dict):
        return (SKIP,)
    events: list[StreamEvent] = []
    content = _ndjson_content(data)
    if content is not None:
        events.append(TokenEvent(content))
    if data.get("done") is True:
        events.append(DONE)
    return tuple(events) or (SKIP,)


class RecordParser:
    """Parse logical lines according to a fixed wire format."""

    def __init__(self, format: WireFormat) -> None:
        self.format = WireFormat(format)
        self._parse = parse_sse_line if self.format is WireFormat.SSE else parse_ndjson_line

    def parse(self, line: str) -> Events:
        return self._parse(line)


__all__ = ["RecordParser", "parse_sse_line", "parse_ndjson_line"]
