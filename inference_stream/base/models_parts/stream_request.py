"""
StreamRequest: the immutable input of one stream session.

Created once per send action and owned by the session for its duration.
The wire format is explicit rather than inferred from the endpoint URL.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Tuple

from .message import Message
from .wire_format import WireFormat


def _frozen_mapping(value: Mapping[str, Any] | None) -> Mapping[str, Any]:
    return MappingProxyType(dict(value or {}))


@dataclass(frozen=True)
class StreamRequest:
    """Normalized streaming chat request.

    Attributes:
        messages: Ordered prior turns, oldest first.
        model: Backend model identifier.
        format: Wire format of the target endpoint.
        options: Backend sampling options (e.g. ``temperature``), forwarded
            verbatim; read-only.
    """

    messages: Tuple[Message, ...]
    model: str
    format: WireFormat
    options: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "messages", tuple(self.messages))
        object.__setattr__(self, "format", WireFormat(self.format))
        object.__setattr__(self, "options", _frozen_mapping(self.options))

    @classmethod
    def build(
        cls,
        messages: Iterable[Message],
        model: str,
        format: WireFormat | str,
        /,
        **options: Any,
    ) -> "StreamRequest":
        """Convenience constructor accepting any iterable and keyword options.

        The leading parameters are positional-only so an option may be named
        ``model`` or ``format``.
        """
        return cls(messages=tuple(messages), model=model, format=WireFormat(format), options=options)


__all__ = ["StreamRequest"]
