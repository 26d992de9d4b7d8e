"""
Domain models public surface.

Re-exports the one-class-per-file implementations under
``inference_stream.base.models_parts``.
"""

from .models_parts.attachment import Attachment
from .models_parts.message import Message, Role
from .models_parts.wire_format import WireFormat
from .models_parts.stream_request import StreamRequest

__all__ = [
    "Attachment",
    "Message",
    "Role",
    "WireFormat",
    "StreamRequest",
]
