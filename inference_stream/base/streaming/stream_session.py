"""Stream session: one request, one response body, one terminal callback.

Orchestrates ``ChunkDecoder -> LineReassembler -> RecordParser`` over the
lifetime of a single streaming request and enforces the lifecycle contract:

* ``start`` is synchronous. It rejects with :class:`SessionBusyError` when the
  conversation's :class:`InFlightGuard` is held by another session, without
  affecting that session. Otherwise the session is ``ACTIVE`` and the guard
  is held before any asynchronous work is scheduled.
* ``on_token`` fires once per token, in wire order.
* ``on_complete`` fires exactly once on an explicit done marker, on body
  exhaustion without one, or on cancellation.
* ``on_error`` fires exactly once on a transport failure, a non-2xx initial
  response (detail = the response body), or an internal fault, and never
  together with ``on_complete``.
* Malformed lines are logged and absorbed; they never change state.
* Terminal states are sinks. The guard is released by the terminal
  transition, before the terminal callback runs, on every exit path.

The read loop suspends only inside :class:`CancellationGate`: while waiting
for the response headers and while waiting for the next chunk.
"""
from __future__ import annotations

import asyncio
import logging
import time
import uuid
from typing import List, Optional

import httpx

from ..cancellation import CancellationToken, CancelledError
from ..constants import MALFORMED_LINE_LOG_LIMIT
from ..errors import ErrorCode, SessionBusyError, StreamError, classify_exception, status_error
from ..http import RequestFactory, owned_client
from ..logging import LogContext, get_logger, normalized_log_event
from ..models import StreamRequest
from .callbacks import StreamCallbacks
from .cancellation_gate import CancellationGate
from .chunk_decoder import ChunkDecoder
from .in_flight import InFlightGuard
from .line_reassembler import LineReassembler
from .record_parser import RecordParser
from .session_state import SessionState
from .stream_event import DoneEvent, MalformedEvent, TokenEvent
from .streaming_metrics import StreamMetrics


async def _close_response(response: httpx.Response) -> None:
    await response.aclose()


class StreamSession:
    """Single-use consumer of one streaming inference response.

    Parameters:
        guard: The owning conversation's single-in-flight guard.
        request_factory: Builds the HTTP request for a ``StreamRequest``
            (see :mod:`inference_stream.backends`).
        client: Optional shared ``httpx.AsyncClient``; when omitted the
            session opens and closes its own.
        logger: Optional logger; defaults to ``inference_stream.session``.
    """

    def __init__(
        self,
        guard: InFlightGuard,
        *,
        request_factory: RequestFactory,
        client: Optional[httpx.AsyncClient] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._guard = guard
        self._request_factory = request_factory
        self._client = client
        self._logger = logger or get_logger("session")
        self.session_id = uuid.uuid4().hex[:12]
        self._state = SessionState.IDLE
        self._token: Optional[CancellationToken] = None
        self._gate: Optional[CancellationGate] = None
        self._task: Optional[asyncio.Task] = None
        self._callbacks: Optional[StreamCallbacks] = None
        self._ctx = LogContext(session_id=self.session_id)
        self._t0 = 0.0
        self.metrics = StreamMetrics()

    # API -----------------------------------------------------------------
    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def task(self) -> Optional[asyncio.Task]:
        return self._task

    def start(
        self,
        request: StreamRequest,
        callbacks: StreamCallbacks,
        cancel_token: Optional[CancellationToken] = None,
    ) -> asyncio.Task:
        """Activate the session and schedule the read loop.

        Must be called from inside a running event loop. Returns the task
        running the read loop; awaiting it never raises for stream failures
        (those go to ``on_error``).

        Raises:
            SessionBusyError: another session of the conversation is active.
            StreamError: this session was already started (``CONFLICT``).
        """
        if self._state is not SessionState.IDLE:
            raise StreamError(
                code=ErrorCode.CONFLICT,
                message=f"stream session already {self._state.value}",
                model=request.model,
            )
        loop = asyncio.get_running_loop()
        self._ctx = LogContext(session_id=self.session_id, model=request.model, format=request.format.value)
        try:
            self._guard.acquire(self)
        except SessionBusyError as e:
            e.model = request.model
            normalized_log_event(
                self._logger,
                "stream.rejected",
                self._ctx,
                phase="start",
                error_code=e.code.value,
                level=logging.WARNING,
            )
            raise
        self._state = SessionState.ACTIVE
        self._callbacks = callbacks
        self._token = cancel_token if cancel_token is not None else CancellationToken()
        self._gate = CancellationGate(self._token)
        self._t0 = time.perf_counter()
        self._task = loop.create_task(self._run(request))
        return self._task

    async def run(
        self,
        request: StreamRequest,
        callbacks: StreamCallbacks,
        cancel_token: Optional[CancellationToken] = None,
    ) -> SessionState:
        """Start the session and wait for its terminal state."""
        await self.start(request, callbacks, cancel_token)
        return self._state

    def cancel(self, reason: Optional[str] = None) -> None:
        """Fire the session's cancellation token. No-op before start or after the end."""
        if self._token is not None:
            self._token.cancel(reason)

    # Read loop -----------------------------------------------------------
    async def _run(self, request: StreamRequest) -> None:
        gate = self._gate
        assert gate is not None  # nosec B101 - set by start()
        state = SessionState.COMPLETED
        error: Optional[StreamError] = None
        reason: Optional[str] = None
        try:
            gate.bind()
            spec = self._request_factory(request)
            self._ctx.endpoint = spec.url
            normalized_log_event(
                self._logger,
                "stream.start",
                self._ctx,
                phase="start",
                messages=len(request.messages),
            )
            async with owned_client(self._client) as client:
                outgoing = client.build_request(spec.method, spec.url, headers=spec.headers, json=spec.json)
                response = await gate.wait(client.send(outgoing, stream=True), discard=_close_response)
                try:
                    await self._read_response(response, request, gate)
                finally:
                    await response.aclose()
        except CancelledError as e:
            state, reason = SessionState.ABORTED, str(e)
        except asyncio.CancelledError:
            self._settle(SessionState.ABORTED, reason="task cancelled")
            raise
        except StreamError as e:
            state, error = SessionState.FAILED, e
        except httpx.HTTPError as e:
            state = SessionState.FAILED
            error = StreamError(
                code=classify_exception(e),
                message=str(e) or type(e).__name__,
                model=request.model,
                raw=e,
            )
        except Exception as e:
            self._logger.exception("stream session %s crashed", self.session_id)
            state = SessionState.FAILED
            error = StreamError(
                code=ErrorCode.INTERNAL,
                message=str(e) or type(e).__name__,
                model=request.model,
                raw=e,
            )
        except BaseException:
            self._abandon()
            raise
        self._settle(state, error=error, reason=reason)

    async def _read_response(self, response: httpx.Response, request: StreamRequest, gate: CancellationGate) -> None:
        if not response.is_success:
            body = await self._read_error_body(response, gate)
            raise status_error(response.status_code, body, model=request.model)
        if response.status_code == 204:
            raise StreamError(
                code=ErrorCode.EMPTY_RESPONSE,
                message="No response body",
                model=request.model,
                status_code=204,
            )
        await self._consume(response, RecordParser(request.format), gate)

    async def _consume(self, response: httpx.Response, parser: RecordParser, gate: CancellationGate) -> None:
        """Pump the body until done marker, exhaustion, or cancellation."""
        decoder = ChunkDecoder()
        reassembler = LineReassembler()
        chunks = response.aiter_bytes()
        while True:
            try:
                raw = await gate.next_chunk(chunks)
            except StopAsyncIteration:
                break
            self.metrics.bytes_received += len(raw)
            if self._dispatch(reassembler.push(decoder.decode(raw)), parser, gate):
                return
        lines = reassembler.push(decoder.decode(b"", final=True))
        tail = reassembler.flush()
        if tail is not None:
            lines.append(tail)
        self._dispatch(lines, parser, gate)

    def _dispatch(self, lines: List[str], parser: RecordParser, gate: CancellationGate) -> bool:
        """Deliver the events of ``lines``; return True once a done marker is seen."""
        callbacks = self._callbacks
        assert callbacks is not None  # nosec B101 - set by start()
        for line in lines:
            self.metrics.lines += 1
            for event in parser.parse(line):
                gate.check()
                if isinstance(event, TokenEvent):
                    if self.metrics.time_to_first_token_ms is None:
                        self.metrics.time_to_first_token_ms = (time.perf_counter() - self._t0) * 1000.0
                    self.metrics.emitted += 1
                    callbacks.on_token(event.text)
                elif isinstance(event, DoneEvent):
                    return True
                elif isinstance(event, MalformedEvent):
                    self._absorb_malformed(event)
        return False

    def _absorb_malformed(self, event: MalformedEvent) -> None:
        self.metrics.malformed += 1
        normalized_log_event(
            self._logger,
            "stream.malformed_record",
            self._ctx,
            phase="mid_stream",
            level=logging.WARNING,
            line=event.raw_line[:MALFORMED_LINE_LOG_LIMIT],
            error=event.error,
        )
        if self._callbacks is not None and self._callbacks.on_malformed is not None:
            self._callbacks.on_malformed(event.raw_line)

    @staticmethod
    async def _read_error_body(response: httpx.Response, gate: CancellationGate) -> str:
        """Read a non-2xx body fully as text; cancellation still applies."""
        decoder = ChunkDecoder()
        parts: List[str] = []
        chunks = response.aiter_bytes()
        while True:
            try:
                parts.append(decoder.decode(await gate.next_chunk(chunks)))
            except StopAsyncIteration:
                break
        parts.append(decoder.decode(b"", final=True))
        return "".join(parts)

    def _abandon(self) -> None:
        """Mark the session failed without callbacks; the loop is going down."""
        if self._state.terminal:
            return
        self._state = SessionState.FAILED
        if self._gate is not None:
            self._gate.release()
        self._guard.release(self)

    # Terminal transition -------------------------------------------------
    def _settle(
        self,
        state: SessionState,
        *,
        error: Optional[StreamError] = None,
        reason: Optional[str] = None,
    ) -> None:
        """Enter ``state`` and fire its callback, at most once per session."""
        if self._state.terminal:
            return
        self._state = state
        self.metrics.total_duration_ms = (time.perf_counter() - self._t0) * 1000.0
        if self._gate is not None:
            self._gate.release()
        self._guard.release(self)
        callbacks = self._callbacks
        assert callbacks is not None  # nosec B101 - set by start()
        if state is SessionState.FAILED:
            assert error is not None  # nosec B101 - FAILED always carries an error
            normalized_log_event(
                self._logger,
                "stream.error",
                self._ctx,
                phase="finalize",
                emitted=self.metrics.emitted,
                error_code=error.code.value,
                level=logging.ERROR,
                status_code=error.status_code,
                error=error.message,
                metrics=self.metrics.to_dict(),
            )
            callbacks.on_error(error)
            return
        normalized_log_event(
            self._logger,
            "stream.cancelled" if state is SessionState.ABORTED else "stream.end",
            self._ctx,
            phase="finalize",
            emitted=self.metrics.emitted,
            reason=reason,
            metrics=self.metrics.to_dict(),
        )
        callbacks.on_complete()


__all__ = ["StreamSession"]
