"""SSE (OpenAI-style ``/chat/completions``) request payloads.

Turns without images carry plain string content. Turns with images use the
multi-part form::

    [{"type": "text", "text": "..."},
     {"type": "image_url", "image_url": {"url": "data:image/png;base64,..."}}]

Options (``temperature``, ``max_tokens`` ...) are top-level keys; they never
override ``model``, ``messages`` or ``stream``.
"""
from __future__ import annotations

from typing import Any, Dict, List

from ..base.models import Message, StreamRequest
from .attachments import content_with_documents

_RESERVED_KEYS = frozenset({"model", "messages", "stream"})


def sse_message(message: Message) -> Dict[str, Any]:
    text = content_with_documents(message)
    images = message.images()
    if not images:
        return {"role": message.role, "content": text}
    parts: List[Dict[str, Any]] = []
    if text:
        parts.append({"type": "text", "text": text})
    parts.extend({"type": "image_url", "image_url": {"url": img.as_data_url()}} for img in images)
    return {"role": message.role, "content": parts}


def build_sse_payload(request: StreamRequest) -> Dict[str, Any]:
    """Create the streaming chat payload for an SSE backend."""
    payload: Dict[str, Any] = {k: v for k, v in request.options.items() if k not in _RESERVED_KEYS}
    payload |= {
        "model": request.model,
        "messages": [sse_message(m) for m in request.messages],
        "stream": True,
    }
    return payload


__all__ = ["sse_message", "build_sse_payload"]
