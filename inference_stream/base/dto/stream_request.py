"""
Pydantic DTOs and validators for inbound stream requests.

Purpose
-------
UI layers hand requests over as plain dicts (often decoded JSON). These DTOs
validate such payloads before they become a domain
:class:`~inference_stream.base.models.StreamRequest`: roles, format,
non-empty model, and a sane first turn.

External dependencies: Pydantic only (no network calls).

Failure semantics: validation either succeeds or raises
``pydantic.ValidationError``; callers report it like any other bad input.
"""

from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field, model_validator

from ..models import Attachment, Message, StreamRequest, WireFormat


class AttachmentDTO(BaseModel):
    """An attached file; ``data`` is text, a base64 string, or a data URL."""

    name: str = Field(..., min_length=1)
    media_type: str = Field(..., min_length=1)
    data: Union[bytes, str]

    def to_domain(self) -> Attachment:
        return Attachment(name=self.name, media_type=self.media_type, data=self.data)


class MessageDTO(BaseModel):
    """A prior turn.

    Rules:
        - ``role`` must be system, user or assistant.
        - user turns need visible text or at least one attachment.
    """

    role: Literal["system", "user", "assistant"]
    content: str = ""
    attachments: List[AttachmentDTO] = Field(default_factory=list)

    @model_validator(mode="after")
    def _validate_content(self) -> "MessageDTO":
        if self.role == "user" and not self.content.strip() and not self.attachments:
            raise ValueError("user message must include text or an attachment")
        return self

    def to_domain(self) -> Message:
        return Message(
            role=self.role,
            content=self.content,
            attachments=tuple(a.to_domain() for a in self.attachments),
        )


class StreamRequestDTO(BaseModel):
    """Validated stream request payload.

    Parameters:
        model: Target model identifier (non-empty).
        messages: Ordered turns (non-empty; first must be system or user).
        format: ``"sse"`` or ``"ndjson"``.
        options: Free-form backend options (e.g. temperature).
    """

    model: str = Field(..., min_length=1)
    messages: List[MessageDTO] = Field(..., min_length=1)
    format: WireFormat
    options: Dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _validate_sequence(self) -> "StreamRequestDTO":
        if self.messages[0].role == "assistant":
            raise ValueError("first message must be from 'system' or 'user'")
        return self

    def to_domain(self) -> StreamRequest:
        return StreamRequest(
            messages=tuple(m.to_domain() for m in self.messages),
            model=self.model,
            format=self.format,
            options=self.options,
        )


def parse_stream_request(payload: Dict[str, Any], *, default_format: Optional[WireFormat] = None) -> StreamRequest:
    """Validate a raw dict and return the domain request.

    ``default_format`` fills in ``format`` when the payload omits it.
    """
    data = dict(payload)
    if default_format is not None:
        data.setdefault("format", default_format)
    return StreamRequestDTO.model_validate(data).to_domain()


__all__ = [
    "AttachmentDTO",
    "MessageDTO",
    "StreamRequestDTO",
    "parse_stream_request",
]
