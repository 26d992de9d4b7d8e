"""Unified timeout configuration for stream sessions.

Centralizes the timeout values used when opening a streaming response and
while waiting for the next chunk, so no module hard-codes its own literals.

Key Components
--------------
TimeoutConfig
    Dataclass capturing normalized timeout values (seconds).

get_timeout_config()
    Returns a process-cached configuration, parsing environment overrides on
    first use and again only when those variables change. Supported
    environment variables (all optional):
        STREAM_TIMEOUT_CONNECT_SECONDS
        STREAM_TIMEOUT_READ_SECONDS
        STREAM_TIMEOUT_WRITE_SECONDS

httpx_timeout()
    Converts the config into an ``httpx.Timeout``.

Failure Modes
-------------
Invalid or non-positive values silently fall back to the defaults. A read
timeout elapsing mid-stream surfaces as a transport failure (``TIMEOUT``).
"""
from __future__ import annotations

from dataclasses import dataclass
import os
from typing import Optional

import httpx

_ENV_NAMES = (
    "STREAM_TIMEOUT_CONNECT_SECONDS",
    "STREAM_TIMEOUT_READ_SECONDS",
    "STREAM_TIMEOUT_WRITE_SECONDS",
)


@dataclass(frozen=True)
class TimeoutConfig:
    """Container for normalized timeout values (seconds).

    Attributes:
        connect_timeout_seconds: Establishing the connection to the backend.
        read_timeout_seconds: Idle time allowed between two chunks; local
            models can pause for a long time before the first token.
        write_timeout_seconds: Sending the request body.
    """

    connect_timeout_seconds: float = 10.0
    read_timeout_seconds: float = 120.0
    write_timeout_seconds: float = 30.0


_CACHED: TimeoutConfig | None = None
_ENV_GUARD: str | None = None


def _parse_env_float(name: str, default: float) -> float:
    """Parse a positive float from the environment, falling back to ``default``."""
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        val = float(raw)
    except ValueError:
        return default
    return val if val > 0 else default


def get_timeout_config() -> TimeoutConfig:
    """Return the process-cached :class:`TimeoutConfig`."""
    global _CACHED, _ENV_GUARD  # noqa: PLW0603 - documented module cache
    guard = "/".join(os.getenv(name, "") for name in _ENV_NAMES)
    if _CACHED is not None and _ENV_GUARD == guard:
        return _CACHED
    defaults = TimeoutConfig()
    _CACHED = TimeoutConfig(
        connect_timeout_seconds=_parse_env_float(_ENV_NAMES[0], defaults.connect_timeout_seconds),
        read_timeout_seconds=_parse_env_float(_ENV_NAMES[1], defaults.read_timeout_seconds),
        write_timeout_seconds=_parse_env_float(_ENV_NAMES[2], defaults.write_timeout_seconds),
    )
    _ENV_GUARD = guard
    return _CACHED


def httpx_timeout(cfg: Optional[TimeoutConfig] = None) -> httpx.Timeout:
    """Build the ``httpx.Timeout`` used by streaming clients."""
    cfg = cfg or get_timeout_config()
    return httpx.Timeout(
        connect=cfg.connect_timeout_seconds,
        read=cfg.read_timeout_seconds,
        write=cfg.write_timeout_seconds,
        pool=cfg.connect_timeout_seconds,
    )


__all__ = ["TimeoutConfig", "get_timeout_config", "httpx_timeout"]
