"""inference-stream CLI (package entrypoint).

Wires argument parsing to the action handler kept in ``cli_actions``. It
performs no streaming logic directly.

Public API re-exports:
- ``main``: CLI entrypoint callable
- ``build_parser``: argument parser factory used by tests
"""

from __future__ import annotations

import sys
from typing import Optional

from .cli_actions import handle_run
from .cli_parser import build_parser


def main(argv: Optional[list[str]] = None) -> int:
    """CLI entrypoint.

    Parameters
    ----------
    argv: Optional[list[str]]
        Argument vector; when ``None`` uses ``sys.argv[1:]``.

    Returns
    -------
    int
        Process exit code (0 success, non-zero on error).
    """
    args = build_parser().parse_args(list(sys.argv[1:] if argv is None else argv))
    return handle_run(args)


__all__ = ["main", "build_parser"]


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
