"""Backend request construction per wire format.

Payload builders for NDJSON and SSE chat servers, endpoint resolution from
configuration, and :class:`BackendRequestFactory`, the default request
factory handed to stream sessions.
"""

from .attachments import content_with_documents, render_attachment
from .ndjson import build_ndjson_payload
from .sse import build_sse_payload
from .routing import BackendRequestFactory, Endpoint, build_payload, resolve_endpoint

__all__ = [
    "content_with_documents",
    "render_attachment",
    "build_ndjson_payload",
    "build_sse_payload",
    "BackendRequestFactory",
    "Endpoint",
    "build_payload",
    "resolve_endpoint",
]
