"""Pydantic DTOs validating untrusted request payloads."""

from .stream_request import AttachmentDTO, MessageDTO, StreamRequestDTO, parse_stream_request

__all__ = ["AttachmentDTO", "MessageDTO", "StreamRequestDTO", "parse_stream_request"]
