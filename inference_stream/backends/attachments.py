"""Inline rendering of text attachments.

Backends receive images natively, but text files are folded into the turn's
content so any chat model can read them. Each file becomes a block headed
``--- FILE: <name> ---`` with a fenced body truncated to
``MAX_ATTACHMENT_CHARS``.
"""
from __future__ import annotations

import os
from typing import Dict, List

from ..base.constants import MAX_ATTACHMENT_CHARS
from ..base.models import Attachment, Message

_FENCE_LANGUAGES: Dict[str, str] = {
    "js": "javascript",
    "jsx": "jsx",
    "ts": "typescript",
    "tsx": "tsx",
    "py": "python",
    "java": "java",
    "c": "c",
    "h": "c",
    "cpp": "cpp",
    "hpp": "cpp",
    "html": "html",
    "htm": "html",
    "css": "css",
    "json": "json",
    "xml": "xml",
    "md": "markdown",
    "txt": "text",
    "sh": "bash",
    "bash": "bash",
    "sql": "sql",
    "rb": "ruby",
    "go": "go",
    "rs": "rust",
    "kt": "kotlin",
    "yaml": "yaml",
    "yml": "yaml",
    "toml": "toml",
}


def fence_language(name: str) -> str:
    """Return the code-fence language for a file name (``text`` if unknown)."""
    ext = os.path.splitext(name)[1].lstrip(".").lower()
    return _FENCE_LANGUAGES.get(ext, "text")


def render_attachment(attachment: Attachment, limit: int = MAX_ATTACHMENT_CHARS) -> str:
    """Render one text attachment as an inline block."""
    body = attachment.as_text()
    lines: List[str] = [
        f"--- FILE: {attachment.name} ---",
        f"Type: {attachment.media_type}",
        "",
        f"```{fence_language(attachment.name)}",
    ]
    if len(body) > limit:
        lines.append(body[:limit])
        lines.append("")
        lines.append(f"[File truncated. Original length: {len(body)} characters]")
    else:
        lines.append(body)
    lines.append("```")
    return "\n".join(lines)


def content_with_documents(message: Message) -> str:
    """Return the message text followed by its inlined text attachments."""
    documents = message.documents()
    if not documents:
        return message.content
    blocks = "\n\n".join(render_attachment(doc) for doc in documents)
    if not message.content:
        return blocks
    return f"{message.content}\n\n{blocks}"


__all__ = ["fence_language", "render_attachment", "content_with_documents"]
