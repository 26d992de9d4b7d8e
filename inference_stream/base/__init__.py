"""
Stream consumer base package.

Exports the backend-agnostic pieces of the consumer:
- Models: immutable request/turn value objects
- Errors: normalized taxonomy and the stream error type
- Cancellation: the caller-held stop signal
- Streaming: decoder, reassembler, parser, session lifecycle
"""

from .models import Attachment, Message, Role, StreamRequest, WireFormat
from .errors import ErrorCode, SessionBusyError, StreamError, classify_exception
from .cancellation import CancellationToken, CancelledError
from .timeouts import TimeoutConfig, get_timeout_config
from .http import HttpRequestSpec, RequestFactory, create_async_client
from .streaming import (
    InFlightGuard,
    ResponseAccumulator,
    SessionState,
    StreamCallbacks,
    StreamMetrics,
    StreamSession,
    stream_events,
)

__all__ = [
    # Models
    "Attachment",
    "Message",
    "Role",
    "StreamRequest",
    "WireFormat",
    # Errors
    "ErrorCode",
    "StreamError",
    "SessionBusyError",
    "classify_exception",
    # Cancellation
    "CancellationToken",
    "CancelledError",
    # Transport
    "TimeoutConfig",
    "get_timeout_config",
    "HttpRequestSpec",
    "RequestFactory",
    "create_async_client",
    # Streaming
    "InFlightGuard",
    "ResponseAccumulator",
    "SessionState",
    "StreamCallbacks",
    "StreamMetrics",
    "StreamSession",
    "stream_events",
]
