"""
Message DTO: one prior turn of the conversation.

Defines the immutable `Message` dataclass and the `Role` literal.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Tuple

from .attachment import Attachment


Role = Literal["system", "user", "assistant"]


@dataclass(frozen=True)
class Message:
    """A chat turn.

    Attributes:
        role: ``"system"``, ``"user"`` or ``"assistant"``.
        content: Plain text of the turn.
        attachments: Files attached to the turn, in order.
    """

    role: Role
    content: str
    attachments: Tuple[Attachment, ...] = ()

    def images(self) -> Tuple[Attachment, ...]:
        """Return only the image attachments."""
        return tuple(a for a in self.attachments if a.is_image)

    def documents(self) -> Tuple[Attachment, ...]:
        """Return the non-image attachments."""
        return tuple(a for a in self.attachments if not a.is_image)


__all__ = [
    "Message",
    "Role",
]
