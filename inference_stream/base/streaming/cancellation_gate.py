"""Binding of a cancellation token to the read loop's suspension points.

The read loop waits in two places: for the response headers, and for the
next body chunk. ``CancellationGate.wait`` races such an awaitable against
the token so a stop request abandons the pending operation immediately
instead of at the next chunk boundary.

The token may be fired from another thread; the gate hops onto the loop with
``call_soon_threadsafe`` before touching asyncio state.
"""
from __future__ import annotations

import asyncio
from typing import AsyncIterator, Awaitable, Callable, Optional, TypeVar

from ..cancellation import CancellationToken, CancelledError

T = TypeVar("T")


async def _pull(chunks: AsyncIterator[T]) -> T:
    return await chunks.__anext__()


class CancellationGate:
    """Race transport operations against a :class:`CancellationToken`."""

    def __init__(self, token: CancellationToken) -> None:
        self._token = token
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._wakeup: Optional[asyncio.Event] = None
        self._handle: Optional[int] = None

    @property
    def token(self) -> CancellationToken:
        return self._token

    @property
    def tripped(self) -> bool:
        return self._token.cancelled

    def bind(self) -> None:
        """Attach to the running loop. Must be called from inside it."""
        if self._handle is not None:
            return
        self._loop = asyncio.get_running_loop()
        self._wakeup = asyncio.Event()
        self._handle = self._token.add_callback(self._on_cancel)

    def _on_cancel(self, _reason: Optional[str]) -> None:
        loop, wakeup = self._loop, self._wakeup
        if loop is None or wakeup is None or loop.is_closed():
            return
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None
        if running is loop:
            wakeup.set()
        else:
            loop.call_soon_threadsafe(wakeup.set)

    def check(self) -> None:
        """Raise :class:`CancelledError` if the token has fired."""
        self._token.raise_if_cancelled()

    async def wait(
        self,
        awaitable: Awaitable[T],
        *,
        discard: Optional[Callable[[T], Awaitable[None]]] = None,
    ) -> T:
        """Await ``awaitable`` unless the token fires first.

        On cancellation the pending operation is cancelled and awaited, then
        :class:`CancelledError` is raised. If the operation had already
        produced a value, ``discard(value)`` is awaited so resources such as
        an open response are released; the value itself is never returned.
        """
        if self._token.cancelled:
            if asyncio.iscoroutine(awaitable):
                awaitable.close()
            raise CancelledError(self._token.reason or "stream cancelled")
        if self._wakeup is None:
            self.bind()
        assert self._wakeup is not None  # nosec B101 - set by bind()
        op = asyncio.ensure_future(awaitable)
        waiter = asyncio.ensure_future(self._wakeup.wait())
        try:
            await asyncio.wait({op, waiter}, return_when=asyncio.FIRST_COMPLETED)
        except asyncio.CancelledError:
            op.cancel()
            waiter.cancel()
            raise
        waiter.cancel()
        if not self._token.cancelled:
            return op.result()
        if not op.done():
            op.cancel()
            await asyncio.wait({op})
        if not op.cancelled() and op.exception() is None and discard is not None:
            await discard(op.result())
        raise CancelledError(self._token.reason or "stream cancelled")

    async def next_chunk(self, chunks: AsyncIterator[T]) -> T:
        """Return the next item of ``chunks``; ``StopAsyncIteration`` at the end."""
        return await self.wait(_pull(chunks))

    def release(self) -> None:
        """Detach from the token. Safe to call repeatedly."""
        if self._handle is not None:
            self._token.remove_callback(self._handle)
            self._handle = None


__all__ = ["CancellationGate"]
