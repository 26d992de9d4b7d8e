"""Fragmentation invariance: chunk boundaries never change the token sequence."""
from __future__ import annotations

import pytest

from inference_stream.base.models import WireFormat

from .helpers import ndjson_tokens, run_stream, sse_tokens

TOKENS = ("Hé", "llo ", "wörld ", "🌍", "!")

BODIES = {
    WireFormat.NDJSON: ndjson_tokens(*TOKENS),
    WireFormat.SSE: sse_tokens(*TOKENS),
}


@pytest.mark.parametrize("fmt", [WireFormat.NDJSON, WireFormat.SSE])
def test_every_two_way_split_yields_same_tokens(fmt):
    body = BODIES[fmt]
    for i in range(len(body) + 1):
        _, rec = run_stream([body[:i], body[i:]], fmt)
        assert tuple(rec.tokens) == TOKENS, f"split at byte {i}"  # nosec B101
        assert rec.completes == 1 and not rec.errors  # nosec B101


@pytest.mark.parametrize("fmt", [WireFormat.NDJSON, WireFormat.SSE])
def test_one_byte_chunks_yield_same_tokens(fmt):
    body = BODIES[fmt]
    _, rec = run_stream([body[i : i + 1] for i in range(len(body))], fmt)
    assert tuple(rec.tokens) == TOKENS  # nosec B101


def test_crlf_framing_matches_lf_framing():
    body = sse_tokens(*TOKENS).replace(b"\n", b"\r\n")
    _, rec = run_stream([body[:7], body[7:40], body[40:]], WireFormat.SSE)
    assert tuple(rec.tokens) == TOKENS  # nosec B101


@pytest.mark.parametrize("fmt", [WireFormat.NDJSON, WireFormat.SSE])
def test_splits_inside_raw_utf8_sequences_yield_same_tokens(fmt):
    body = BODIES[fmt]
    multibyte = [i for i in range(1, len(body)) if body[i] & 0xC0 == 0x80]
    assert multibyte, "bodies must carry unescaped multi-byte characters"  # nosec B101
    for i in multibyte:
        _, rec = run_stream([body[:i], body[i:]], fmt)
        assert tuple(rec.tokens) == TOKENS, f"split inside a code point at byte {i}"  # nosec B101
        assert rec.completes == 1 and not rec.errors  # nosec B101
