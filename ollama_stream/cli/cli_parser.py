"""CLI parser construction for ollama-stream.

This module wires subparsers but contains no execution logic. Subcommand
handlers live in ``cli_actions``.
"""

from __future__ import annotations

import argparse


def build_parser() -> argparse.ArgumentParser:
    """Construct the top-level CLI parser with ``query`` and ``ps`` subcommands.

    No I/O or network calls occur here. ``--url`` and ``--token`` override the
    layered configuration (defaults, config file, environment).
    """
    p = argparse.ArgumentParser(
        prog="ollama-stream",
        description="Stream an Ollama generation and extract fenced code blocks",
    )
    p.add_argument("--url", default=None, help="Generate endpoint URL")
    p.add_argument("--token", default=None, help="Bearer token (Open WebUI)")
    p.add_argument("--log-level", default=None, help="DEBUG, INFO, WARNING, ...")
    p.add_argument("--log-file", default=None, help="Also write JSON logs to this file")
    sub = p.add_subparsers(dest="cmd")

    # query
    p_query = sub.add_parser("query", help="Send a prompt and print the streamed reply")
    p_query.add_argument("--prompt", required=True)
    p_query.add_argument("--model", default=None)
    p_query.add_argument("--system", default=None)
    p_query.add_argument("--temperature", type=float, default=None)
    p_query.add_argument("--blocks-dir", default=None, help="Write extracted code blocks here")
    p_query.add_argument("--json", action="store_true", help="Print the stream summary as JSON")

    # ps
    p_ps = sub.add_parser("ps", help="List models currently loaded in memory")
    p_ps.add_argument("--json", action="store_true")

    return p


__all__ = ["build_parser"]
