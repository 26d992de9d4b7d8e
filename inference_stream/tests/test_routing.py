"""Tests for endpoint resolution and the default request factory."""
from __future__ import annotations

from inference_stream.backends import BackendRequestFactory, resolve_endpoint
from inference_stream.backends.routing import join_url, route_base_url
from inference_stream.base.models import Message, StreamRequest, WireFormat


def _req(model, fmt):
    return StreamRequest.build([Message(role="user", content="hi")], model, fmt)


def test_ndjson_endpoint_from_defaults():
    ep = resolve_endpoint(_req("llama3", WireFormat.NDJSON))
    assert ep.url == "http://localhost:11434/api/chat"  # nosec B101
    assert ep.headers["Accept"] == "application/x-ndjson"  # nosec B101


def test_sse_endpoint_appends_chat_completions():
    ep = resolve_endpoint(_req("ai/smollm2", WireFormat.SSE), {"base_url": "http://h:1/v1/"})
    assert ep.url == "http://h:1/v1/chat/completions"  # nosec B101
    assert ep.headers["Accept"] == "text/event-stream"  # nosec B101


def test_model_substring_routes_first_match_wins():
    cfg = {
        "base_url": "http://default",
        "routes": {"codellama": "http://code", "llama": "http://llama", "mistral": "http://mistral"},
    }
    assert route_base_url("codellama:7b", cfg) == "http://code"  # nosec B101
    assert route_base_url("Llama3:latest", cfg) == "http://llama"  # nosec B101
    assert route_base_url("phi3", cfg) == "http://default"  # nosec B101


def test_join_url_keeps_full_chat_url():
    assert join_url("http://h/api/chat", "/api/chat") == "http://h/api/chat"  # nosec B101


def test_factory_applies_overrides_and_builds_body(monkeypatch):
    monkeypatch.setenv("STREAM_NDJSON_BASE_URL", "http://env:11434")
    factory = BackendRequestFactory({"base_url": "http://cli:11434"})
    spec = factory(_req("llama3", WireFormat.NDJSON))
    assert spec.url == "http://cli:11434/api/chat"  # nosec B101
    assert spec.method == "POST"  # nosec B101
    assert spec.json["stream"] is True and spec.json["model"] == "llama3"  # nosec B101


def test_factory_uses_env_without_overrides(monkeypatch):
    monkeypatch.setenv("STREAM_SSE_BASE_URL", "http://env:8080/v1")
    spec = BackendRequestFactory()(_req("m", WireFormat.SSE))
    assert spec.url == "http://env:8080/v1/chat/completions"  # nosec B101
