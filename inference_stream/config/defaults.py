"""inference_stream.config.defaults
=================================

Central place for small, stable default values used by the configuration
layer and the CLI. These defaults can be overridden via environment
variables or an external configuration file, but provide sensible fallbacks
for local development and tests.

This module intentionally avoids importing from other packages; only plain
constants live here.
"""

from __future__ import annotations

# ---- Backends ----

# Ollama-style NDJSON chat server on its default port.
NDJSON_DEFAULT_BASE_URL = "http://localhost:11434"
NDJSON_DEFAULT_MODEL = "llama3"

# OpenAI-compatible SSE server (Docker Model Runner exposes one on 12434).
SSE_DEFAULT_BASE_URL = "http://localhost:12434/engines/v1"
SSE_DEFAULT_MODEL = "ai/smollm2"

# ---- Files ----

# Env var naming the optional JSON configuration file.
CONFIG_FILE_ENV = "INFERENCE_STREAM_CONFIG_FILE"
# Env var naming the dotenv file loaded once before env lookups.
DOTENV_FILE_ENV = "DOTENV_FILE"
DOTENV_DEFAULT_PATH = ".env"

# Prefix of per-format env overrides: STREAM_<FORMAT>_<FIELD>.
ENV_PREFIX = "STREAM"

# ---- CLI Defaults ----
CLI_DEFAULT_FORMAT = "ndjson"

__all__ = [
    "NDJSON_DEFAULT_BASE_URL",
    "NDJSON_DEFAULT_MODEL",
    "SSE_DEFAULT_BASE_URL",
    "SSE_DEFAULT_MODEL",
    "CONFIG_FILE_ENV",
    "DOTENV_FILE_ENV",
    "DOTENV_DEFAULT_PATH",
    "ENV_PREFIX",
    "CLI_DEFAULT_FORMAT",
]
