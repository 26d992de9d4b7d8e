"""Conversation: the owner of one chat thread's streaming state.

A conversation holds the in-memory turn history, its own single-in-flight
guard and the session currently streaming, if any. Sends on the same
conversation are mutually exclusive; separate conversations stream
independently.

History rules:
    - The user turn is recorded once its session has started.
    - The accumulated assistant turn is recorded on completion, and on
      cancellation when at least one token arrived.
    - A failed stream records no assistant turn.
"""
from __future__ import annotations

import asyncio
from typing import Any, Iterable, List, Mapping, Optional, Tuple

import httpx

from .backends import BackendRequestFactory
from .base.cancellation import CancellationToken
from .base.errors import StreamError
from .base.http import RequestFactory
from .base.logging import get_logger
from .base.models import Attachment, Message, StreamRequest, WireFormat
from .base.streaming import (
    InFlightGuard,
    ResponseAccumulator,
    SessionState,
    StreamCallbacks,
    StreamSession,
)


def _noop(*_args: Any) -> None:
    return None


_SILENT = StreamCallbacks(on_token=_noop, on_complete=_noop, on_error=_noop)


class Conversation:
    """Multi-turn chat against one model.

    Parameters:
        model: Backend model identifier.
        format: Wire format of the backend (``"ndjson"`` or ``"sse"``).
        client: Optional shared ``httpx.AsyncClient`` reused by every send.
        config: Config overrides for the default request factory
            (e.g. ``{"base_url": ...}``).
        request_factory: Replaces the default :class:`BackendRequestFactory`.
        system_prompt: Optional system turn placed first in the history.
        options: Backend sampling options sent with every request.
    """

    def __init__(
        self,
        model: str,
        format: WireFormat | str = WireFormat.NDJSON,
        *,
        client: Optional[httpx.AsyncClient] = None,
        config: Optional[Mapping[str, Any]] = None,
        request_factory: Optional[RequestFactory] = None,
        system_prompt: Optional[str] = None,
        options: Optional[Mapping[str, Any]] = None,
    ) -> None:
        self.model = model
        self.format = WireFormat(format)
        self._client = client
        self._factory = request_factory or BackendRequestFactory(config)
        self._options = dict(options or {})
        self._guard = InFlightGuard()
        self._session: Optional[StreamSession] = None
        self._history: List[Message] = []
        self._generation = 0
        if system_prompt:
            self._history.append(Message(role="system", content=system_prompt))
        self._logger = get_logger("conversation")

    @property
    def history(self) -> Tuple[Message, ...]:
        return tuple(self._history)

    @property
    def streaming(self) -> bool:
        """True while a send is in flight."""
        return self._guard.active

    @property
    def session(self) -> Optional[StreamSession]:
        """The most recently started session."""
        return self._session

    def send(
        self,
        content: str,
        attachments: Iterable[Attachment] = (),
        callbacks: Optional[StreamCallbacks] = None,
        cancel_token: Optional[CancellationToken] = None,
    ) -> asyncio.Task:
        """Append a user turn and stream the reply.

        Must be called from inside a running event loop. When ``cancel_token``
        is given the session runs on a child of it: cancelling the caller's
        token stops this send, while :meth:`stop` leaves the caller's token
        untouched.

        Raises:
            SessionBusyError: a previous send is still streaming; the history
                is left unchanged.
        """
        user_turn = Message(role="user", content=content, attachments=tuple(attachments))
        request = StreamRequest(
            messages=(*self._history, user_turn),
            model=self.model,
            format=self.format,
            options=self._options,
        )
        outer = callbacks or _SILENT
        accumulator = ResponseAccumulator(on_token=outer.on_token)
        generation = self._generation

        def on_complete() -> None:
            if accumulator.text and generation == self._generation:
                self._history.append(Message(role="assistant", content=accumulator.text))
            outer.on_complete()

        def on_error(error: StreamError) -> None:
            accumulator.on_error(error)
            outer.on_error(error)

        session = StreamSession(self._guard, request_factory=self._factory, client=self._client)
        task = session.start(
            request,
            StreamCallbacks(
                on_token=accumulator.on_token,
                on_complete=on_complete,
                on_error=on_error,
                on_malformed=outer.on_malformed,
            ),
            cancel_token.child() if cancel_token is not None else None,
        )
        self._session = session
        self._history.append(user_turn)
        return task

    async def ask(
        self,
        content: str,
        attachments: Iterable[Attachment] = (),
        cancel_token: Optional[CancellationToken] = None,
    ) -> str:
        """Send and wait for the full reply text.

        Returns the accumulated text, possibly partial if the stream was
        stopped. Raises :class:`StreamError` if the stream failed.
        """
        accumulator = ResponseAccumulator()
        await self.send(content, attachments, accumulator.callbacks(), cancel_token)
        if accumulator.error is not None:
            raise accumulator.error
        return accumulator.text

    def stop(self, reason: Optional[str] = None) -> bool:
        """Cancel the active stream; returns False when nothing was streaming."""
        session = self._session
        if session is None or session.state is not SessionState.ACTIVE:
            return False
        self._logger.debug("stopping session %s", session.session_id)
        session.cancel(reason or "stopped by user")
        return True

    def clear(self) -> None:
        """Drop every turn except the system prompt. Stops an active stream first."""
        self.stop("conversation cleared")
        self._generation += 1
        self._history = [m for m in self._history if m.role == "system"]


__all__ = ["Conversation"]
