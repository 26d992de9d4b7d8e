"""HTTP request description handed from backends to the stream session.

The session layer stays backend-agnostic: it receives a factory that turns a
``StreamRequest`` into one of these and only performs the I/O.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Protocol

from ..models import StreamRequest


@dataclass(frozen=True)
class HttpRequestSpec:
    """Method, absolute URL, headers and JSON body of a streaming request."""

    url: str
    json: Dict[str, Any]
    headers: Dict[str, str] = field(default_factory=dict)
    method: str = "POST"


class RequestFactory(Protocol):
    """Callable building the HTTP request for a stream request."""

    def __call__(self, request: StreamRequest) -> HttpRequestSpec:  # pragma: no cover - protocol
        ...


__all__ = ["HttpRequestSpec", "RequestFactory"]
