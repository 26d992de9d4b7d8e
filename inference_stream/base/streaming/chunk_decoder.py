"""Streaming-safe UTF-8 decoding of raw network chunks."""
from __future__ import annotations

import codecs


class ChunkDecoder:
    """Turn raw byte chunks into text without splitting characters.

    An incomplete multi-byte sequence at the end of a chunk is held back and
    prepended to the next chunk. Invalid bytes, and whatever is still held
    back when the final chunk is decoded, become U+FFFD instead of raising.
    """

    def __init__(self, encoding: str = "utf-8") -> None:
        self._decoder = codecs.getincrementaldecoder(encoding)(errors="replace")

    def decode(self, raw: bytes, final: bool = False) -> str:
        return self._decoder.decode(raw, final)

    def reset(self) -> None:
        self._decoder.reset()


__all__ = ["ChunkDecoder"]
