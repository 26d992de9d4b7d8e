"""Shared harness for stream session tests.

Builds ``httpx.AsyncClient`` instances backed by ``httpx.MockTransport`` whose
response bodies are delivered chunk by chunk, exactly as given, so tests
control where network chunk boundaries fall.
"""
from __future__ import annotations

import asyncio
import json
from dataclasses import dataclass, field
from typing import Any, AsyncIterator, Callable, Iterable, List, Optional, Sequence

import httpx

from inference_stream.base.errors import StreamError
from inference_stream.base.http import HttpRequestSpec
from inference_stream.base.models import Message, StreamRequest, WireFormat
from inference_stream.base.streaming import InFlightGuard, StreamCallbacks, StreamSession

TEST_URL = "http://backend.test/api/chat"
WAIT_SECONDS = 5.0


def ndjson_body(*records: Any) -> bytes:
    return "".join(json.dumps(r, ensure_ascii=False) + "\n" for r in records).encode("utf-8")


def ndjson_tokens(*tokens: str, done: bool = True) -> bytes:
    records: List[Any] = [{"message": {"role": "assistant", "content": t}, "done": False} for t in tokens]
    if done:
        records.append({"message": {"role": "assistant", "content": ""}, "done": True})
    return ndjson_body(*records)


def sse_tokens(*tokens: str, done: bool = True) -> bytes:
    out = "".join(
        "data: " + json.dumps({"choices": [{"index": 0, "delta": {"content": t}}]}, ensure_ascii=False) + "\n\n" for t in tokens
    )
    if done:
        out += "data: [DONE]\n\n"
    return out.encode("utf-8")


async def _deliver(chunks: Sequence[bytes], hang: bool) -> AsyncIterator[bytes]:
    for chunk in chunks:
        await asyncio.sleep(0)
        yield chunk
    if hang:
        await asyncio.sleep(3600)


def streaming_client(
    chunks: Iterable[bytes],
    *,
    status: int = 200,
    hang: bool = False,
    requests: Optional[List[httpx.Request]] = None,
) -> httpx.AsyncClient:
    """Client whose every response streams ``chunks``; ``hang`` keeps the body open."""
    body = list(chunks)

    def handler(request: httpx.Request) -> httpx.Response:
        if requests is not None:
            requests.append(request)
        return httpx.Response(status, content=_deliver(body, hang))

    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def failing_client(exc_factory: Callable[[httpx.Request], Exception]) -> httpx.AsyncClient:
    def handler(request: httpx.Request) -> httpx.Response:
        raise exc_factory(request)

    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def stalled_client(started: Optional[List[httpx.Request]] = None) -> httpx.AsyncClient:
    """Client whose responses never arrive (headers never sent)."""

    async def handler(request: httpx.Request) -> httpx.Response:
        if started is not None:
            started.append(request)
        await asyncio.sleep(3600)
        return httpx.Response(200)

    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def fixed_factory(request: StreamRequest) -> HttpRequestSpec:
    return HttpRequestSpec(url=TEST_URL, json={"model": request.model, "stream": True})


def make_request(fmt: WireFormat = WireFormat.NDJSON, text: str = "hi") -> StreamRequest:
    return StreamRequest.build([Message(role="user", content=text)], "test-model", fmt)


@dataclass
class Recorder:
    """Collects callback invocations in order."""

    tokens: List[str] = field(default_factory=list)
    completes: int = 0
    errors: List[StreamError] = field(default_factory=list)
    malformed: List[str] = field(default_factory=list)
    order: List[str] = field(default_factory=list)
    on_first_token: Optional[Callable[[], None]] = None

    def on_token(self, text: str) -> None:
        self.tokens.append(text)
        self.order.append("token")
        if len(self.tokens) == 1 and self.on_first_token is not None:
            self.on_first_token()

    def on_complete(self) -> None:
        self.completes += 1
        self.order.append("complete")

    def on_error(self, error: StreamError) -> None:
        self.errors.append(error)
        self.order.append("error")

    def on_malformed(self, raw: str) -> None:
        self.malformed.append(raw)

    def callbacks(self) -> StreamCallbacks:
        return StreamCallbacks(
            on_token=self.on_token,
            on_complete=self.on_complete,
            on_error=self.on_error,
            on_malformed=self.on_malformed,
        )

    @property
    def text(self) -> str:
        return "".join(self.tokens)


async def drive(
    client: httpx.AsyncClient,
    request: StreamRequest,
    recorder: Optional[Recorder] = None,
    guard: Optional[InFlightGuard] = None,
) -> tuple[StreamSession, Recorder]:
    """Run one session to its end against ``client`` and close the client."""
    recorder = recorder or Recorder()
    async with client:
        session = StreamSession(guard or InFlightGuard(), request_factory=fixed_factory, client=client)
        task = session.start(request, recorder.callbacks())
        await asyncio.wait_for(task, WAIT_SECONDS)
    return session, recorder


def run_stream(
    chunks: Iterable[bytes],
    fmt: WireFormat = WireFormat.NDJSON,
    *,
    status: int = 200,
) -> tuple[StreamSession, Recorder]:
    """Synchronous wrapper: stream ``chunks`` through a fresh session."""
    return asyncio.run(drive(streaming_client(chunks, status=status), make_request(fmt)))
