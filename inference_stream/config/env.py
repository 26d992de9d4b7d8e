"""inference_stream.config.env
============================

Environment helpers for the configuration layer.

Purpose
-------
- Map configuration fields to ``STREAM_<FORMAT>_<FIELD>`` variable names.
- Load a ``.env`` file once per process (no external dependency).

Failure Modes
-------------
- A missing ``.env`` file is not an error.
- Helpers never raise on unset variables; callers fall back to defaults.
"""

from __future__ import annotations

import os
from typing import Any, Dict, Optional

from .defaults import DOTENV_DEFAULT_PATH, DOTENV_FILE_ENV, ENV_PREFIX

# Config field -> env var suffix
ENV_FIELD_MAP: Dict[str, str] = {
    "base_url": "BASE_URL",
    "model": "MODEL",
    "system_message": "SYSTEM_MESSAGE",
}

_DOTENV_LOADED = False


def is_placeholder(val: Optional[str]) -> bool:
    """Return True if the provided string looks like a placeholder value.

    Heuristics: contains 'placeholder', 'changeme' or 'example'. The check is
    case-insensitive and resilient to surrounding spaces.
    """
    if val is None:
        return False
    v = str(val).strip().lower()
    return "placeholder" in v or "changeme" in v or "example" in v


def env_var_name(format_name: str, field: str) -> str:
    """Return the env var consulted for ``field`` of ``format_name``.

    >>> env_var_name("ndjson", "base_url")
    'STREAM_NDJSON_BASE_URL'
    """
    return f"{ENV_PREFIX}_{format_name.upper()}_{ENV_FIELD_MAP[field]}"


def env_overrides(format_name: str) -> Dict[str, Any]:
    """Collect the per-format values set in the environment."""
    out: Dict[str, Any] = {}
    for field in ENV_FIELD_MAP:
        val = os.getenv(env_var_name(format_name, field))
        if val is not None and val.strip():
            out[field] = val.strip()
    return out


def load_dotenv_once() -> None:
    """Lightweight .env loader.

    Parses KEY=VALUE lines, ignoring comments and blank lines. Safe to call
    multiple times. Existing environment variables win unless their current
    value looks like a placeholder.
    """
    global _DOTENV_LOADED
    if _DOTENV_LOADED:
        return
    path = os.getenv(DOTENV_FILE_ENV, DOTENV_DEFAULT_PATH)
    if not os.path.isfile(path):
        _DOTENV_LOADED = True
        return
    try:
        with open(path, "r", encoding="utf-8") as fh:
            for line in fh:
                line = line.strip()
                if not line or line.startswith("#") or "=" not in line:
                    continue
                k, v = line.split("=", 1)
                k = k.strip()
                v = v.strip().strip('"').strip("'")
                if k and (k not in os.environ or is_placeholder(os.environ.get(k))):
                    os.environ[k] = v
    finally:
        _DOTENV_LOADED = True


def reset_dotenv_state() -> None:
    """Allow the next :func:`load_dotenv_once` call to read the file again."""
    global _DOTENV_LOADED
    _DOTENV_LOADED = False


__all__ = [
    "ENV_FIELD_MAP",
    "is_placeholder",
    "env_var_name",
    "env_overrides",
    "load_dotenv_once",
    "reset_dotenv_state",
]
