"""Cooperative cancellation primitives (public API facade).

Purpose
-------
Expose the cancellation constructs via the canonical
``inference_stream.base.cancellation`` import path while the concrete
implementations live under ``cancellation_parts``.

Notes
-----
- ``CancellationToken`` is the caller-held stop signal (user pressing stop,
	component teardown). It may be fired from any thread.
- ``CancelledError`` is raised inside the read loop when the token fires and
	is never surfaced to callers as a failure.
"""

from .cancellation_parts.cancelled_error import CancelledError
from .cancellation_parts.cancellation_token import CancellationToken

__all__ = ["CancellationToken", "CancelledError"]
