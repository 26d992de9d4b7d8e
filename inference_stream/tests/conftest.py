"""Pytest configuration for the inference_stream test suite.

Keeps configuration caches and environment lookups isolated per test so a
developer's local ``.env`` or exported STREAM_* variables never leak in.
"""

from __future__ import annotations

from typing import Iterator

import pytest

from inference_stream.config import reset_config_cache


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch: pytest.MonkeyPatch, tmp_path) -> Iterator[None]:
    """Point dotenv/config lookups at an empty temp dir and reset caches."""
    monkeypatch.setenv("DOTENV_FILE", str(tmp_path / "missing.env"))
    monkeypatch.delenv("INFERENCE_STREAM_CONFIG_FILE", raising=False)
    for fmt in ("NDJSON", "SSE"):
        for field in ("BASE_URL", "MODEL", "SYSTEM_MESSAGE"):
            monkeypatch.delenv(f"STREAM_{fmt}_{field}", raising=False)
    reset_config_cache()
    yield
    reset_config_cache()
