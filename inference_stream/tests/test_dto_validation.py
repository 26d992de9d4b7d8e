"""Validation tests for inbound stream request DTOs."""
from __future__ import annotations

import pytest
from pydantic import ValidationError

from inference_stream.base.dto import StreamRequestDTO, parse_stream_request
from inference_stream.base.models import StreamRequest, WireFormat


def _payload(**over):
    data = {
        "model": "llama3",
        "format": "ndjson",
        "messages": [{"role": "user", "content": "hello"}],
    }
    data.update(over)
    return data


def test_valid_payload_converts_to_domain():
    req = parse_stream_request(_payload(options={"temperature": 0.5}))
    assert isinstance(req, StreamRequest)  # nosec B101
    assert req.format is WireFormat.NDJSON  # nosec B101
    assert req.messages[0].content == "hello"  # nosec B101
    assert dict(req.options) == {"temperature": 0.5}  # nosec B101


def test_default_format_fills_missing_value():
    data = _payload()
    data.pop("format")
    assert parse_stream_request(data, default_format=WireFormat.SSE).format is WireFormat.SSE  # nosec B101


@pytest.mark.parametrize(
    "over",
    [
        {"model": ""},
        {"messages": []},
        {"format": "xml"},
        {"messages": [{"role": "tool", "content": "x"}]},
        {"messages": [{"role": "assistant", "content": "hi"}]},
        {"messages": [{"role": "user", "content": "   "}]},
    ],
)
def test_invalid_payloads_rejected(over):
    with pytest.raises(ValidationError):
        StreamRequestDTO.model_validate(_payload(**over))


def test_user_turn_with_only_attachment_is_valid():
    req = parse_stream_request(
        _payload(messages=[{"role": "user", "content": "", "attachments": [{"name": "a.txt", "media_type": "text/plain", "data": "x"}]}])
    )
    assert req.messages[0].attachments[0].name == "a.txt"  # nosec B101


def test_domain_request_options_are_read_only():
    req = parse_stream_request(_payload(options={"a": 1}))
    with pytest.raises(TypeError):
        req.options["a"] = 2  # type: ignore[index]
