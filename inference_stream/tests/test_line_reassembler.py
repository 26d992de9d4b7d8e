"""Unit tests for logical line reassembly."""
from __future__ import annotations

from inference_stream.base.streaming import LineReassembler


def test_partial_line_retained_until_newline():
    r = LineReassembler()
    assert r.push('{"a":') == []  # nosec B101
    assert r.pending == '{"a":'  # nosec B101
    assert r.push('1}\n{"b"') == ['{"a":1}']  # nosec B101
    assert r.pending == '{"b"'  # nosec B101


def test_multiple_lines_in_one_push_keep_order():
    r = LineReassembler()
    assert r.push("one\ntwo\n\nthree\n") == ["one", "two", "", "three"]  # nosec B101
    assert r.pending == ""  # nosec B101


def test_crlf_is_normalized():
    r = LineReassembler()
    assert r.push("data: x\r\n\r\n") == ["data: x", ""]  # nosec B101


def test_cr_split_from_its_newline():
    r = LineReassembler()
    assert r.push("line\r") == []  # nosec B101
    assert r.push("\nnext") == ["line"]  # nosec B101


def test_flush_returns_tail_once():
    r = LineReassembler()
    r.push('{"done":true}')
    assert r.flush() == '{"done":true}'  # nosec B101
    assert r.flush() is None  # nosec B101


def test_empty_push_is_noop():
    r = LineReassembler()
    assert r.push("") == []  # nosec B101
    assert r.flush() is None  # nosec B101
