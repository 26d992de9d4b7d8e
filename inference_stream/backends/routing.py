"""Endpoint resolution and the request factory used by stream sessions.

The base URL comes from :func:`get_stream_config` for the request's wire
format. A ``routes`` table (model-id substring -> base URL) lets model
families live on different servers; the first matching entry in table order
wins. The format's chat path is appended to the chosen base URL.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

from ..base.constants import NDJSON_ACCEPT, NDJSON_CHAT_PATH, SSE_ACCEPT, SSE_CHAT_PATH
from ..base.http import HttpRequestSpec
from ..base.models import StreamRequest, WireFormat
from ..config import get_stream_config
from .ndjson import build_ndjson_payload
from .sse import build_sse_payload

_CHAT_PATHS = {
    WireFormat.NDJSON: NDJSON_CHAT_PATH,
    WireFormat.SSE: SSE_CHAT_PATH,
}
_ACCEPT = {
    WireFormat.NDJSON: NDJSON_ACCEPT,
    WireFormat.SSE: SSE_ACCEPT,
}


@dataclass(frozen=True)
class Endpoint:
    """Absolute chat URL plus the headers sent with it."""

    url: str
    headers: Dict[str, str] = field(default_factory=dict)


def route_base_url(model: str, config: Mapping[str, Any]) -> str:
    """Return the base URL for ``model``: first matching route, else ``base_url``."""
    routes = config.get("routes") or {}
    lowered = model.lower()
    for needle, base_url in routes.items():
        if needle and needle.lower() in lowered:
            return str(base_url)
    return str(config["base_url"])


def join_url(base_url: str, path: str) -> str:
    base = base_url.rstrip("/")
    if base.endswith(path):
        return base
    return f"{base}{path}"


def resolve_endpoint(request: StreamRequest, config: Optional[Mapping[str, Any]] = None) -> Endpoint:
    """Resolve the chat endpoint for ``request``.

    ``config`` defaults to ``get_stream_config(request.format)``. A base URL
    that already ends with the chat path is used unchanged.
    """
    cfg = config if config is not None else get_stream_config(request.format)
    url = join_url(route_base_url(request.model, cfg), _CHAT_PATHS[request.format])
    return Endpoint(url=url, headers={"Accept": _ACCEPT[request.format]})


def build_payload(request: StreamRequest) -> Dict[str, Any]:
    """Build the JSON body for the request's wire format."""
    if request.format is WireFormat.SSE:
        return build_sse_payload(request)
    return build_ndjson_payload(request)


class BackendRequestFactory:
    """Request factory binding endpoint resolution to payload building.

    Parameters:
        overrides: Optional config overrides applied on top of the merged
            configuration (e.g. ``{"base_url": ...}`` from a CLI flag).
    """

    def __init__(self, overrides: Optional[Mapping[str, Any]] = None) -> None:
        self._overrides = dict(overrides or {})

    def config_for(self, format: WireFormat) -> Dict[str, Any]:
        return get_stream_config(format, self._overrides)

    def __call__(self, request: StreamRequest) -> HttpRequestSpec:
        endpoint = resolve_endpoint(request, self.config_for(request.format))
        return HttpRequestSpec(url=endpoint.url, json=build_payload(request), headers=endpoint.headers)


__all__ = [
    "Endpoint",
    "route_base_url",
    "join_url",
    "resolve_endpoint",
    "build_payload",
    "BackendRequestFactory",
]
