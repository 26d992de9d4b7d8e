"""Unit tests for racing awaitables against a cancellation token."""
from __future__ import annotations

import asyncio
import threading

import pytest

from inference_stream.base.cancellation import CancellationToken, CancelledError
from inference_stream.base.streaming import CancellationGate


async def _chunks(*items, hang=True):
    for item in items:
        yield item
    if hang:
        await asyncio.sleep(3600)


def test_next_chunk_returns_items_then_stop():
    async def main():
        gate = CancellationGate(CancellationToken())
        gate.bind()
        it = _chunks(b"a", b"b", hang=False)
        got = [await gate.next_chunk(it), await gate.next_chunk(it)]
        with pytest.raises(StopAsyncIteration):
            await gate.next_chunk(it)
        gate.release()
        return got

    assert asyncio.run(main()) == [b"a", b"b"]  # nosec B101


def test_cancel_interrupts_pending_read():
    async def main():
        token = CancellationToken()
        gate = CancellationGate(token)
        gate.bind()
        it = _chunks(b"first")
        assert await gate.next_chunk(it) == b"first"  # nosec B101
        asyncio.get_running_loop().call_later(0.01, token.cancel, "stop")
        with pytest.raises(CancelledError):
            await asyncio.wait_for(gate.next_chunk(it), 2)

    asyncio.run(main())


def test_cancel_from_foreign_thread_wakes_loop():
    async def main():
        token = CancellationToken()
        gate = CancellationGate(token)
        gate.bind()
        timer = threading.Timer(0.02, token.cancel, args=("thread",))
        timer.start()
        try:
            with pytest.raises(CancelledError) as info:
                await asyncio.wait_for(gate.next_chunk(_chunks()), 2)
        finally:
            timer.join()
        return str(info.value)

    assert asyncio.run(main()) == "thread"  # nosec B101


def test_already_cancelled_never_awaits():
    async def main():
        token = CancellationToken()
        token.cancel()
        gate = CancellationGate(token)
        started = []

        async def op():
            started.append(True)
            return 1

        with pytest.raises(CancelledError):
            await gate.wait(op())
        return started

    assert asyncio.run(main()) == []  # nosec B101


def test_value_produced_after_cancel_is_discarded():
    async def main():
        token = CancellationToken()
        gate = CancellationGate(token)
        gate.bind()
        discarded = []

        async def op():
            token.cancel("race")
            return "resource"

        async def discard(value):
            discarded.append(value)

        with pytest.raises(CancelledError):
            await gate.wait(op(), discard=discard)
        return discarded

    assert asyncio.run(main()) == ["resource"]  # nosec B101


def test_check_raises_only_after_cancel():
    token = CancellationToken()
    gate = CancellationGate(token)
    gate.check()
    token.cancel()
    assert gate.tripped  # nosec B101
    with pytest.raises(CancelledError):
        gate.check()
