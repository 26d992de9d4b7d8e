"""Async HTTP client construction for stream sessions.

Purpose:
    Build ``httpx.AsyncClient`` instances configured from
    :func:`get_timeout_config`, and provide a context manager that yields
    either a caller-supplied client (left open) or a session-owned one
    (closed on exit).

External dependencies:
    - ``httpx`` for the underlying asynchronous HTTP client.

Lifecycle:
    Async clients are bound to the event loop they first run on, so there is
    no process-wide pool; long-lived callers (e.g. ``Conversation``) create one
    client and pass it to every session they start.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import httpx

from ..timeouts import httpx_timeout


def create_async_client(
    *,
    base_url: Optional[str] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.AsyncClient:
    """Return a new ``httpx.AsyncClient`` with streaming timeouts applied.

    Parameters:
        base_url: Optional base URL for relative requests.
        transport: Optional transport override (tests pass
            ``httpx.MockTransport``).
    """
    kwargs = {"timeout": httpx_timeout()}
    if base_url:
        kwargs["base_url"] = base_url
    if transport is not None:
        kwargs["transport"] = transport
    return httpx.AsyncClient(**kwargs)


@asynccontextmanager
async def owned_client(client: Optional[httpx.AsyncClient]) -> AsyncIterator[httpx.AsyncClient]:
    """Yield ``client`` unchanged, or a fresh client closed on exit."""
    if client is not None:
        yield client
        return
    fresh = create_async_client()
    try:
        yield fresh
    finally:
        await fresh.aclose()


__all__ = ["create_async_client", "owned_client"]
