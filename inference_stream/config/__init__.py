"""Unified configuration layer for stream backends.

Goals
-----
* Centralize defaults (models, base URLs) per wire format.
* Merge sources in a predictable order (later wins):
    1. Built-in defaults
    2. Optional JSON config file pointed to by INFERENCE_STREAM_CONFIG_FILE
    3. Environment variables (e.g. STREAM_NDJSON_BASE_URL, STREAM_SSE_MODEL)
    4. In-code overrides passed to the helper
* Provide a single call site: ``get_stream_config(format)``.

External Config File (Optional)
-------------------------------
JSON object keyed by wire format. ``routes`` maps a model-id substring to a
base URL, letting different model families live on different servers::

    {
      "ndjson": {
        "base_url": "http://localhost:11434",
        "model": "llama3",
        "routes": {"mistral": "http://gpu-box:11434"}
      },
      "sse": {"base_url": "http://localhost:12434/engines/v1"}
    }

Public API
----------
* get_stream_config(format, overrides=None) -> dict
* get_model(format) -> str | None
* reset_config_cache()
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Mapping, Optional
import os

from ..base.logging import get_logger
from ..base.models import WireFormat
from .defaults import (
    CONFIG_FILE_ENV,
    NDJSON_DEFAULT_BASE_URL,
    NDJSON_DEFAULT_MODEL,
    SSE_DEFAULT_BASE_URL,
    SSE_DEFAULT_MODEL,
)
from .env import env_overrides, load_dotenv_once, reset_dotenv_state


# -------------------- Defaults --------------------

DEFAULTS: Dict[str, Dict[str, Any]] = {
    WireFormat.NDJSON.value: {
        "base_url": NDJSON_DEFAULT_BASE_URL,
        "model": NDJSON_DEFAULT_MODEL,
        "routes": {},
    },
    WireFormat.SSE.value: {
        "base_url": SSE_DEFAULT_BASE_URL,
        "model": SSE_DEFAULT_MODEL,
        "routes": {},
    },
}

_FILE_CACHE: Optional[Dict[str, Any]] = None
_logger = get_logger("config")


def _load_external_config() -> Dict[str, Any]:
    """Read the JSON config file once; unreadable or invalid files count as empty."""
    global _FILE_CACHE
    if _FILE_CACHE is not None:
        return _FILE_CACHE
    path = os.getenv(CONFIG_FILE_ENV)
    if not path or not Path(path).is_file():
        _FILE_CACHE = {}
        return _FILE_CACHE
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        _logger.warning("ignoring config file %s: %s", path, e)
        data = {}
    if not isinstance(data, dict):
        data = {}
    _FILE_CACHE = data
    return data


def reset_config_cache() -> None:
    """Forget the cached config file and dotenv state (tests, reloads)."""
    global _FILE_CACHE
    _FILE_CACHE = None
    reset_dotenv_state()


def _merge(cfg: Dict[str, Any], layer: Mapping[str, Any]) -> None:
    for key, value in layer.items():
        if value is None:
            continue
        if key == "routes" and isinstance(value, Mapping):
            cfg["routes"] = {**cfg.get("routes", {}), **value}
        else:
            cfg[key] = value


def get_stream_config(format: WireFormat | str, overrides: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
    """Return merged configuration for a wire format.

    Merge order (later wins): defaults -> config file -> env vars -> overrides.
    ``routes`` tables are merged key by key rather than replaced.
    """
    load_dotenv_once()
    name = WireFormat(format).value
    cfg: Dict[str, Any] = {"routes": {}}

    # 1. Defaults
    _merge(cfg, DEFAULTS.get(name, {}))

    # 2. External config file section
    file_cfg = _load_external_config().get(name)
    if isinstance(file_cfg, dict):
        _merge(cfg, file_cfg)

    # 3. Env overrides
    _merge(cfg, env_overrides(name))

    # 4. Explicit overrides arg
    if overrides:
        _merge(cfg, overrides)

    return cfg


def get_model(format: WireFormat | str) -> Optional[str]:
    return get_stream_config(format).get("model")


__all__ = [
    "get_stream_config",
    "get_model",
    "reset_config_cache",
    "DEFAULTS",
]
