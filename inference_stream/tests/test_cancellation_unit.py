"""Unit tests for cooperative cancellation primitives.

Covers idempotent cancel, cascade to children, late link of child after
parent cancel, callback registration, and raise_if_cancelled behavior.
"""
from __future__ import annotations

import threading

import pytest

from inference_stream.base.cancellation import (
    CancellationToken,
    CancelledError,
)


def test_cancel_cascades_to_children_and_is_idempotent():
    parent = CancellationToken()
    child1 = parent.child()
    child2 = parent.child()

    parent.cancel(reason="stop")
    parent.cancel(reason="ignored")

    assert parent.cancelled is True and parent.reason == "stop"  # nosec B101 - pytest assert in tests
    assert child1.cancelled is True and child1.reason == "stop"  # nosec B101 - pytest assert in tests
    assert child2.cancelled is True and child2.reason == "stop"  # nosec B101 - pytest assert in tests


def test_link_child_after_parent_cancel_immediately_cancels_child():
    parent = CancellationToken()
    parent.cancel("done")
    late_child = CancellationToken(parent=parent)
    assert late_child.cancelled is True and late_child.reason == "done"  # nosec B101 - pytest assert in tests


def test_raise_if_cancelled_raises_custom_error():
    token = CancellationToken()
    token.raise_if_cancelled()
    token.cancel("terminate")
    with pytest.raises(CancelledError):
        token.raise_if_cancelled()


def test_callbacks_fire_once_with_reason():
    token = CancellationToken()
    seen = []
    token.add_callback(seen.append)
    token.cancel("user")
    token.cancel("again")
    assert seen == ["user"]  # nosec B101


def test_removed_callback_does_not_fire():
    token = CancellationToken()
    seen = []
    handle = token.add_callback(seen.append)
    token.remove_callback(handle)
    token.remove_callback(handle)
    token.cancel()
    assert seen == []  # nosec B101


def test_callback_added_after_cancel_runs_immediately():
    token = CancellationToken()
    token.cancel("late")
    seen = []
    token.add_callback(seen.append)
    assert seen == ["late"]  # nosec B101


def test_cancel_from_other_thread():
    token = CancellationToken()
    fired = threading.Event()
    token.add_callback(lambda _reason: fired.set())
    t = threading.Thread(target=token.cancel, args=("bg",))
    t.start()
    t.join()
    assert fired.is_set() and token.reason == "bg"  # nosec B101
