"""inference_stream package

Consume a live, chunked chat-completion response from a local model server
and deliver it as an ordered, cancellable sequence of text increments.

Public API (re-exported):
    - Version: ``__version__``
    - Conversation: :class:`Conversation` (history + single-in-flight send)
    - Sessions: :class:`StreamSession`, :class:`StreamCallbacks`,
      :class:`SessionState`, :func:`stream_events`, :class:`ResponseAccumulator`
    - Models: :class:`Message`, :class:`Attachment`, :class:`StreamRequest`,
      :class:`WireFormat`
    - Validation: :class:`StreamRequestDTO`, :func:`parse_stream_request`
    - Errors: :class:`StreamError`, :class:`SessionBusyError`, :class:`ErrorCode`
    - Cancellation: :class:`CancellationToken`
    - Backends: :class:`BackendRequestFactory`

Example::

    async def main():
        convo = Conversation("llama3", "ndjson")
        print(await convo.ask("Why is the sky blue?"))
"""

from .base.cancellation import CancellationToken
from .base.dto import StreamRequestDTO, parse_stream_request
from .base.errors import ErrorCode, SessionBusyError, StreamError
from .base.models import Attachment, Message, StreamRequest, WireFormat
from .base.streaming import (
    InFlightGuard,
    ResponseAccumulator,
    SessionState,
    StreamCallbacks,
    StreamSession,
    stream_events,
)
from .backends import BackendRequestFactory
from .conversation import Conversation

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Conversation
    "Conversation",
    # Sessions
    "InFlightGuard",
    "ResponseAccumulator",
    "SessionState",
    "StreamCallbacks",
    "StreamSession",
    "stream_events",
    # Models
    "Attachment",
    "Message",
    "StreamRequest",
    "WireFormat",
    # Validation
    "StreamRequestDTO",
    "parse_stream_request",
    # Errors
    "ErrorCode",
    "SessionBusyError",
    "StreamError",
    # Cancellation
    "CancellationToken",
    # Backends
    "BackendRequestFactory",
]
