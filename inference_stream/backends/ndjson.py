"""NDJSON (Ollama-style ``/api/chat``) request payloads.

Shape::

    {"model": "...", "messages": [{"role", "content", "images"?}], "stream": true,
     "options"?: {...}}

``images`` carries bare base64 strings. Sampling parameters travel inside
``options`` as the server expects.
"""
from __future__ import annotations

from typing import Any, Dict

from ..base.models import Message, StreamRequest
from .attachments import content_with_documents


def ndjson_message(message: Message) -> Dict[str, Any]:
    out: Dict[str, Any] = {"role": message.role, "content": content_with_documents(message)}
    if images := message.images():
        out["images"] = [img.as_base64() for img in images]
    return out


def build_ndjson_payload(request: StreamRequest) -> Dict[str, Any]:
    """Create the streaming chat payload for an NDJSON backend."""
    payload: Dict[str, Any] = {
        "model": request.model,
        "messages": [ndjson_message(m) for m in request.messages],
        "stream": True,
    }
    if request.options:
        payload["options"] = dict(request.options)
    return payload


__all__ = ["ndjson_message", "build_ndjson_payload"]
