"""CLI parser construction for inference-stream.

This module wires argument shapes only. Handlers live in ``cli_actions`` to
keep the presentation layer thin and testable.
"""

from __future__ import annotations

import argparse
import json
from typing import Any, Tuple

from ..base.models import WireFormat
from ..config.defaults import CLI_DEFAULT_FORMAT


def parse_option(value: str) -> Tuple[str, Any]:
    """Parse ``KEY=VALUE``; the value is decoded as JSON when possible.

    >>> parse_option("temperature=0.2")
    ('temperature', 0.2)
    >>> parse_option("stop=end")
    ('stop', 'end')
    """
    if "=" not in value:
        raise argparse.ArgumentTypeError(f"expected KEY=VALUE, got {value!r}")
    key, raw = value.split("=", 1)
    key = key.strip()
    if not key:
        raise argparse.ArgumentTypeError(f"empty option name in {value!r}")
    try:
        return key, json.loads(raw)
    except ValueError:
        return key, raw


def build_parser() -> argparse.ArgumentParser:
    """Construct the CLI parser.

    Returns
    -------
    argparse.ArgumentParser
        Parser for a single streamed prompt. No I/O or network calls occur here.
    """
    p = argparse.ArgumentParser(
        prog="inference-stream",
        description="Stream one chat completion from a local model server to stdout",
    )
    p.add_argument("prompt", nargs="?", default=None, help="User prompt (reads stdin when omitted)")
    p.add_argument(
        "--format",
        choices=[f.value for f in WireFormat],
        default=CLI_DEFAULT_FORMAT,
        help="Wire format of the backend",
    )
    p.add_argument("--model", default=None, help="Model id (defaults to the configured model)")
    p.add_argument("--base-url", default=None, help="Override the configured base URL")
    p.add_argument("--system", default=None, help="System prompt placed before the user turn")
    p.add_argument(
        "--file",
        dest="files",
        action="append",
        default=[],
        metavar="PATH",
        help="Attach a file (images are sent natively, text is inlined); repeatable",
    )
    p.add_argument(
        "--option",
        dest="options",
        action="append",
        type=parse_option,
        default=[],
        metavar="KEY=VALUE",
        help="Backend option such as temperature=0.2; repeatable",
    )
    p.add_argument("--dry-run", action="store_true", help="Print the request that would be sent and exit")
    p.add_argument("--json", action="store_true", help="Print a JSON summary instead of live tokens")
    p.add_argument("--log-level", default=None, help="DEBUG, INFO, WARNING or ERROR")
    p.add_argument("--log-file", default=None, help="Also write JSON logs to this rotating file")
    return p


__all__ = ["build_parser", "parse_option"]
