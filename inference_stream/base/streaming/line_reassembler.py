"""Reassembly of decoded text into complete logical lines.

Network chunks carry no alignment guarantee with record boundaries; the
reassembler buffers text and releases a line only once its terminating
newline has arrived.

Invariant: between two ``push`` calls the buffer holds at most one partial
(non-newline-terminated) line. Lines are emitted once, in arrival order.
"""
from __future__ import annotations

from typing import List, Optional


class LineReassembler:
    """Buffer decoded text and yield complete lines."""

    def __init__(self) -> None:
        self._buffer = ""

    @property
    def pending(self) -> str:
        """The retained partial line (may be empty)."""
        return self._buffer

    def push(self, text: str) -> List[str]:
        """Append ``text`` and return every line it completed.

        A ``\\r`` directly before the newline is stripped from the emitted line.
        """
        if not text:
            return []
        self._buffer += text
        if "\n" not in text:
            return []
        *complete, self._buffer = self._buffer.split("\n")
        return [line[:-1] if line.endswith("\r") else line for line in complete]

    def flush(self) -> Optional[str]:
        """Return the retained partial line as a final line, or ``None``.

        Some NDJSON producers omit the newline after the last record.
        """
        rest, self._buffer = self._buffer, ""
        if not rest:
            return None
        return rest[:-1] if rest.endswith("\r") else rest


__all__ = ["LineReassembler"]
