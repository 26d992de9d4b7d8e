"""
Attachment part carried by a chat turn.

An attachment is either binary (``bytes``, typically an image) or text. The
payload builders decide how each backend receives it: images are sent as
base64, text is inlined into the turn's content.
"""
from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class Attachment:
    """A file attached to a message.

    Attributes:
        name: Display name (file name) used when inlining text content.
        media_type: MIME type, e.g. ``"image/png"`` or ``"text/x-python"``.
        data: Raw bytes, or already-decoded text. A ``data:`` URL string is
            accepted for images and kept as-is.
    """

    name: str
    media_type: str
    data: Union[bytes, str]

    @property
    def is_image(self) -> bool:
        return self.media_type.startswith("image/")

    def as_base64(self) -> str:
        """Return the payload as bare base64 (no ``data:`` prefix)."""
        if isinstance(self.data, bytes):
            return base64.b64encode(self.data).decode("ascii")
        if self.data.startswith("data:") and "," in self.data:
            return self.data.split(",", 1)[1]
        return base64.b64encode(self.data.encode("utf-8")).decode("ascii")

    def as_data_url(self) -> str:
        """Return the payload as a ``data:<media_type>;base64,...`` URL."""
        if isinstance(self.data, str) and self.data.startswith("data:"):
            return self.data
        return f"data:{self.media_type};base64,{self.as_base64()}"

    def as_text(self) -> str:
        """Return the payload decoded as UTF-8 text (undecodable bytes replaced).

        A base64 ``data:`` URL is decoded first; one that fails to decode, like
        any other string, is returned as-is.
        """
        if isinstance(self.data, bytes):
            return self.data.decode("utf-8", errors="replace")
        if self.data.startswith("data:") and ";base64," in self.data:
            try:
                raw = base64.b64decode(self.data.split(",", 1)[1], validate=False)
            except (binascii.Error, ValueError):
                return self.data
            return raw.decode("utf-8", errors="replace")
        return self.data


__all__ = ["Attachment"]
