"""Collect a stream into a single response, or consume it as async events.

``ResponseAccumulator`` is a ready-made callback bundle that concatenates
token text and remembers how the stream ended. ``stream_events`` offers the
same session as a lazy ``async for`` sequence: ``TokenEvent`` items in wire
order, then one ``DoneEvent``; a failure is raised as :class:`StreamError`.
"""
from __future__ import annotations

import asyncio
from typing import AsyncIterator, Callable, List, Optional, Union

import httpx

from ..cancellation import CancellationToken
from ..errors import StreamError
from ..http import RequestFactory
from ..models import StreamRequest
from .callbacks import StreamCallbacks
from .in_flight import InFlightGuard
from .stream_event import DONE, DoneEvent, StreamEvent, TokenEvent
from .stream_session import StreamSession


class ResponseAccumulator:
    """Callback sink that builds the accumulated response text.

    ``on_token`` may be given to observe tokens as they arrive (for example to
    echo them to a terminal) in addition to accumulating them.
    """

    def __init__(self, on_token: Optional[Callable[[str], None]] = None) -> None:
        self._parts: List[str] = []
        self._forward = on_token
        self.completed = False
        self.error: Optional[StreamError] = None

    @property
    def text(self) -> str:
        return "".join(self._parts)

    @property
    def finished(self) -> bool:
        return self.completed or self.error is not None

    def on_token(self, text: str) -> None:
        self._parts.append(text)
        if self._forward is not None:
            self._forward(text)

    def on_complete(self) -> None:
        self.completed = True

    def on_error(self, error: StreamError) -> None:
        self.error = error

    def callbacks(self, on_malformed: Optional[Callable[[str], None]] = None) -> StreamCallbacks:
        return StreamCallbacks(
            on_token=self.on_token,
            on_complete=self.on_complete,
            on_error=self.on_error,
            on_malformed=on_malformed,
        )


async def stream_events(
    request: StreamRequest,
    *,
    request_factory: RequestFactory,
    client: Optional[httpx.AsyncClient] = None,
    guard: Optional[InFlightGuard] = None,
    cancel_token: Optional[CancellationToken] = None,
) -> AsyncIterator[StreamEvent]:
    """Yield the events of one stream session.

    Leaving the ``async for`` early (``break`` or ``aclose``) cancels the
    session and waits for it to release its connection.

    Raises:
        SessionBusyError: ``guard`` is held by another session.
        StreamError: the stream failed; raised after any tokens already yielded.
    """
    queue: "asyncio.Queue[Union[StreamEvent, StreamError]]" = asyncio.Queue()
    session = StreamSession(guard or InFlightGuard(), request_factory=request_factory, client=client)
    callbacks = StreamCallbacks(
        on_token=lambda text: queue.put_nowait(TokenEvent(text)),
        on_complete=lambda: queue.put_nowait(DONE),
        on_error=queue.put_nowait,
    )
    task = session.start(request, callbacks, cancel_token)
    try:
        while True:
            item = await queue.get()
            if isinstance(item, StreamError):
                raise item
            yield item
            if isinstance(item, DoneEvent):
                return
    finally:
        if not session.state.terminal:
            session.cancel("consumer closed the event stream")
        await task


__all__ = ["ResponseAccumulator", "stream_events"]
