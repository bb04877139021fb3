"""ollama-stream CLI (package entrypoint).

Wires argument parsing to the handlers in ``cli_actions``; performs no
stream logic directly.
"""

from __future__ import annotations

import sys
from typing import Optional

from ..base.logging import configure_logger
from .cli_actions import handle_ps, handle_query
from .cli_parser import build_parser


def main(argv: Optional[list[str]] = None, client_factory=None) -> int:
    """CLI entrypoint.

    Parameters
    ----------
    argv: Optional[list[str]]
        Argument vector; when ``None`` uses ``sys.argv[1:]``.
    client_factory:
        Optional callable ``(Dsn) -> client`` used instead of ``OllamaClient``.

    Returns
    -------
    int
        Process exit code (0 success, 1 stream failure, 2 usage error).
    """
    p = build_parser()
    args = p.parse_args(list(sys.argv[1:] if argv is None else argv))
    if args.log_level or args.log_file:
        configure_logger(level=args.log_level, file_path=args.log_file)

    if args.cmd == "query":
        return handle_query(args, client_factory=client_factory)
    if args.cmd == "ps":
        return handle_ps(args, client_factory=client_factory)
    p.print_help(sys.stderr)
    return 2


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
