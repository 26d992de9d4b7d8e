"""Base shared constants for the streaming consumer.

Central location for wire-format literals and small limits so parsers and
payload builders never scatter magic strings.
"""
from __future__ import annotations

# ---- SSE (OpenAI-style chat completions) ----
SSE_DATA_PREFIX = "data: "
SSE_COMMENT_PREFIX = ":"
SSE_DONE_SENTINEL = "[DONE]"
SSE_CHAT_PATH = "/chat/completions"
SSE_ACCEPT = "text/event-stream"

# ---- NDJSON (Ollama-style chat) ----
NDJSON_CHAT_PATH = "/api/chat"
NDJSON_ACCEPT = "application/x-ndjson"

# Text attachments are inlined into the prompt up to this many characters.
MAX_ATTACHMENT_CHARS = 10_000

# Longest raw line echoed into diagnostics for a malformed record.
MALFORMED_LINE_LOG_LIMIT = 200

__all__ = [
    "SSE_DATA_PREFIX",
    "SSE_COMMENT_PREFIX",
    "SSE_DONE_SENTINEL",
    "SSE_CHAT_PATH",
    "SSE_ACCEPT",
    "NDJSON_CHAT_PATH",
    "NDJSON_ACCEPT",
    "MAX_ATTACHMENT_CHARS",
    "MALFORMED_LINE_LOG_LIMIT",
]
