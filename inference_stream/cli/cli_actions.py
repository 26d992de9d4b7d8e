"""CLI action handlers.

Purpose
-------
Turn parsed arguments into a :class:`Conversation` send and mirror the
stream on stdout. This module has no top-level side effects and is safe to
import in tests.

Fallback & Error Semantics
--------------------------
- ``--dry-run`` performs no network I/O; it prints the resolved request.
- Stream failures are printed as JSON to stderr with exit code ``1``.
- Ctrl-C stops the stream; the partial reply counts as a normal end (``0``).
- Invalid input (no prompt, unreadable file) exits with ``2``.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import mimetypes
import os
import signal
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, TextIO

import httpx

from ..backends import BackendRequestFactory
from ..base.cancellation import CancellationToken
from ..base.errors import StreamError
from ..base.logging import LOG_LEVEL_ENV, LogContext, configure_logger, get_logger, normalized_log_event
from ..base.models import Attachment, Message, StreamRequest, WireFormat
from ..base.streaming import ResponseAccumulator, SessionState
from ..config import get_model
from ..conversation import Conversation


def load_attachment(path: str) -> Attachment:
    """Read a file into an :class:`Attachment`.

    Images keep their bytes; anything else is decoded as UTF-8 text.

    Raises
    ------
    OSError
        The file cannot be read.
    """
    p = Path(path)
    media_type = mimetypes.guess_type(p.name)[0] or "text/plain"
    raw = p.read_bytes()
    if media_type.startswith("image/"):
        return Attachment(name=p.name, media_type=media_type, data=raw)
    return Attachment(name=p.name, media_type=media_type, data=raw.decode("utf-8", errors="replace"))


def config_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    return {"base_url": args.base_url} if args.base_url else {}


def resolve_model(args: argparse.Namespace) -> Optional[str]:
    return args.model or get_model(args.format)


def plan_request(args: argparse.Namespace, prompt: str, attachments: List[Attachment]) -> Dict[str, Any]:
    """Build the JSON-serializable description of the request (no I/O)."""
    fmt = WireFormat(args.format)
    messages: List[Message] = []
    if args.system:
        messages.append(Message(role="system", content=args.system))
    messages.append(Message(role="user", content=prompt, attachments=tuple(attachments)))
    request = StreamRequest(
        messages=tuple(messages),
        model=resolve_model(args) or "",
        format=fmt,
        options=dict(args.options),
    )
    spec = BackendRequestFactory(config_overrides(args))(request)
    return {"method": spec.method, "url": spec.url, "headers": spec.headers, "json": spec.json}


def _install_interrupt(loop: asyncio.AbstractEventLoop, token: CancellationToken) -> bool:
    """Route SIGINT to ``token.cancel``; False where signals are unsupported."""
    try:
        loop.add_signal_handler(signal.SIGINT, token.cancel, "interrupted")
    except (NotImplementedError, RuntimeError):
        return False
    return True


async def stream_prompt(
    args: argparse.Namespace,
    prompt: str,
    attachments: List[Attachment],
    *,
    client: Optional[httpx.AsyncClient] = None,
    out: Optional[TextIO] = None,
    interrupt: Optional[CancellationToken] = None,
) -> int:
    """Stream one reply and mirror it to ``out`` (default: the current ``sys.stdout``).

    ``interrupt`` is the stop signal for the run; Ctrl-C fires it when the
    platform supports loop signal handlers.

    Returns
    -------
    int
        ``0`` on completion or interruption; ``1`` when the stream failed.
    """
    out = out if out is not None else sys.stdout
    interrupt = interrupt if interrupt is not None else CancellationToken()
    model = resolve_model(args)
    fmt = WireFormat(args.format)
    logger = get_logger("cli")
    ctx = LogContext(model=model, format=fmt.value)
    conversation = Conversation(
        model or "",
        fmt,
        client=client,
        config=config_overrides(args),
        system_prompt=args.system,
        options=dict(args.options),
    )

    def _echo(text: str) -> None:
        out.write(text)
        out.flush()

    accumulator = ResponseAccumulator(on_token=None if args.json else _echo)
    loop = asyncio.get_running_loop()
    installed = _install_interrupt(loop, interrupt)
    normalized_log_event(logger, "cli.start", ctx, phase="start", attempt=1)
    try:
        await conversation.send(prompt, attachments, accumulator.callbacks(), interrupt)
    finally:
        if installed:
            loop.remove_signal_handler(signal.SIGINT)

    session = conversation.session
    state = session.state if session is not None else SessionState.FAILED
    error: Optional[StreamError] = accumulator.error
    if args.json:
        summary: Dict[str, Any] = {"model": model, "format": fmt.value, "state": state.value, "text": accumulator.text}
        if session is not None:
            summary["metrics"] = session.metrics.to_dict()
        if error is not None:
            summary["error"] = error.describe()
        out.write(json.dumps(summary, ensure_ascii=False) + "\n")
    elif accumulator.text:
        out.write("\n")
    if error is not None:
        print(
            json.dumps({"error": error.message, "code": error.code.value, "status_code": error.status_code}),
            file=sys.stderr,
        )
        return 1
    normalized_log_event(
        logger, "cli.finalize", ctx, phase="finalize", emitted=bool(accumulator.text), state=state.value
    )
    return 0


def read_prompt(args: argparse.Namespace, stdin: Optional[TextIO] = None) -> Optional[str]:
    """Return the prompt from the positional argument or, when piped, stdin."""
    if args.prompt:
        return args.prompt
    stdin = stdin if stdin is not None else sys.stdin
    if stdin.isatty():
        return None
    text = stdin.read().strip()
    return text or None


def handle_run(args: argparse.Namespace) -> int:
    """Execute the CLI: configure logging, validate input, stream or plan.

    Returns
    -------
    int
        ``0`` on success, ``1`` on stream failure, ``2`` on invalid input.
    """
    configure_logger(level=args.log_level or os.getenv(LOG_LEVEL_ENV) or "WARNING", file_path=args.log_file)
    prompt = read_prompt(args)
    if prompt is None and not args.files:
        print(json.dumps({"error": "a prompt is required"}), file=sys.stderr)
        return 2
    try:
        attachments = [load_attachment(path) for path in args.files]
    except OSError as e:
        print(json.dumps({"error": f"cannot read attachment: {e}"}), file=sys.stderr)
        return 2
    if not resolve_model(args):
        print(json.dumps({"error": "no model configured; pass --model"}), file=sys.stderr)
        return 2
    if args.dry_run:
        print(json.dumps(plan_request(args, prompt or "", attachments), indent=2, ensure_ascii=False))
        return 0
    return asyncio.run(stream_prompt(args, prompt or "", attachments))


__all__ = [
    "load_attachment",
    "config_overrides",
    "resolve_model",
    "plan_request",
    "stream_prompt",
    "read_prompt",
    "handle_run",
]
