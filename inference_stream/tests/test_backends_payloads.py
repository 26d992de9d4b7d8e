"""Tests for per-format request payloads and attachment inlining."""
from __future__ import annotations

import base64

from inference_stream.backends import build_ndjson_payload, build_sse_payload, render_attachment
from inference_stream.backends.attachments import content_with_documents, fence_language
from inference_stream.base.constants import MAX_ATTACHMENT_CHARS
from inference_stream.base.models import Attachment, Message, StreamRequest

PNG = b"\x89PNG\r\n\x1a\nfake"
IMAGE = Attachment(name="cat.png", media_type="image/png", data=PNG)
NOTES = Attachment(name="notes.py", media_type="text/x-python", data="print('hi')")


def _request(fmt, *messages, **options):
    return StreamRequest.build(messages, "llava", fmt, **options)


def test_ndjson_payload_shape_with_images_and_options():
    req = _request(
        "ndjson",
        Message(role="system", content="be brief"),
        Message(role="user", content="what is this?", attachments=(IMAGE,)),
        temperature=0.1,
    )
    payload = build_ndjson_payload(req)
    assert payload["model"] == "llava" and payload["stream"] is True  # nosec B101
    assert payload["options"] == {"temperature": 0.1}  # nosec B101
    system, user = payload["messages"]
    assert system == {"role": "system", "content": "be brief"}  # nosec B101
    assert user["images"] == [base64.b64encode(PNG).decode("ascii")]  # nosec B101
    assert user["content"] == "what is this?"  # nosec B101


def test_ndjson_payload_omits_empty_options():
    payload = build_ndjson_payload(_request("ndjson", Message(role="user", content="x")))
    assert "options" not in payload  # nosec B101


def test_data_url_image_is_sent_as_bare_base64():
    img = Attachment(name="a.png", media_type="image/png", data="data:image/png;base64,QUJD")
    payload = build_ndjson_payload(_request("ndjson", Message(role="user", content="x", attachments=(img,))))
    assert payload["messages"][0]["images"] == ["QUJD"]  # nosec B101


def test_sse_payload_multipart_for_images_and_top_level_options():
    req = StreamRequest(
        messages=(Message(role="user", content="describe", attachments=(IMAGE,)),),
        model="llava",
        format="sse",
        options={"temperature": 0.3, "model": "must-not-win", "stream": False},
    )
    payload = build_sse_payload(req)
    assert payload["model"] == "llava" and payload["stream"] is True  # nosec B101
    assert payload["temperature"] == 0.3  # nosec B101
    (msg,) = payload["messages"]
    text_part, image_part = msg["content"]
    assert text_part == {"type": "text", "text": "describe"}  # nosec B101
    assert image_part["image_url"]["url"].startswith("data:image/png;base64,")  # nosec B101


def test_sse_plain_turns_keep_string_content():
    payload = build_sse_payload(_request("sse", Message(role="user", content="hello")))
    assert payload["messages"] == [{"role": "user", "content": "hello"}]  # nosec B101


def test_text_attachment_is_inlined_with_header_and_fence():
    msg = Message(role="user", content="review this", attachments=(NOTES,))
    content = content_with_documents(msg)
    assert content.startswith("review this\n\n--- FILE: notes.py ---")  # nosec B101
    assert "```python\nprint('hi')\n```" in content  # nosec B101
    payload = build_ndjson_payload(_request("ndjson", msg))
    assert "images" not in payload["messages"][0]  # nosec B101


def test_long_attachment_is_truncated_with_note():
    big = Attachment(name="big.txt", media_type="text/plain", data="x" * (MAX_ATTACHMENT_CHARS + 5))
    block = render_attachment(big)
    assert "x" * MAX_ATTACHMENT_CHARS in block  # nosec B101
    assert "x" * (MAX_ATTACHMENT_CHARS + 1) not in block  # nosec B101
    assert f"Original length: {MAX_ATTACHMENT_CHARS + 5} characters" in block  # nosec B101


def test_base64_data_url_text_attachment_is_decoded():
    att = Attachment(name="a.md", media_type="text/markdown", data="data:text/markdown;base64,IyBUaXRsZQ==")
    assert "# Title" in render_attachment(att)  # nosec B101


def test_fence_language_fallback():
    assert fence_language("script.sh") == "bash"  # nosec B101
    assert fence_language("README") == "text"  # nosec B101


def test_undecodable_base64_text_attachment_is_inlined_verbatim():
    broken = Attachment(name="a.txt", media_type="text/plain", data="data:text/plain;base64,abc")
    payload = build_ndjson_payload(_request("ndjson", Message(role="user", content="read", attachments=(broken,))))
    content = payload["messages"][0]["content"]
    assert "--- FILE: a.txt ---" in content  # nosec B101
    assert "data:text/plain;base64,abc" in content  # nosec B101


def test_valid_base64_text_attachment_is_decoded():
    encoded = base64.b64encode("héllo".encode("utf-8")).decode("ascii")
    note = Attachment(name="n.txt", media_type="text/plain", data=f"data:text/plain;base64,{encoded}")
    assert note.as_text() == "héllo"  # nosec B101
