"""CLI action handlers.

Purpose
-------
Subcommand handlers for the ollama-stream CLI, keeping the entrypoint thin.
No top-level side effects; safe to import in tests.

Error Semantics
---------------
- Stream failures (:class:`StreamError`) are printed as one JSON object on
  stderr and return exit code ``1``.
- Configuration errors (unreadable config file, invalid options) return ``2``.

Both handlers accept ``client_factory`` so tests can inject a client bound to
an ``httpx.MockTransport``.
"""

from __future__ import annotations

import argparse
import json
import sys
from typing import Any, Callable, Dict, List, Optional

from pydantic import ValidationError

from ..base.errors import StreamError
from ..base.logging import LogContext, get_logger, normalized_log_event
from ..base.streaming import CodeBlock, StreamEvent
from ..ollama import Dsn, OllamaClient, RequestOptions, build_request
from ..utils.files import BlockFileWriter

ClientFactory = Callable[[Dsn], Any]

_logger = get_logger("ollama_stream.cli")


def error_payload(error: StreamError) -> Dict[str, Any]:
    """JSON-serializable view of a stream error for stderr output."""
    payload: Dict[str, Any] = {
        "error": error.message,
        "code": error.code.value,
        "phase": error.phase,
        "type": type(error).__name__,
    }
    status = getattr(error, "status_code", None)
    if status is not None:
        payload["status_code"] = status
    handler = getattr(error, "handler", None)
    if handler:
        payload["handler"] = handler
    return payload


def _print_error(payload: Dict[str, Any]) -> None:
    print(json.dumps(payload, default=str), file=sys.stderr)


def _resolve_dsn(args: argparse.Namespace) -> Dsn:
    return Dsn.from_config(url=getattr(args, "url", None), token=getattr(args, "token", None))


def _make_client(args: argparse.Namespace, client_factory: Optional[ClientFactory]):
    dsn = _resolve_dsn(args)
    return (client_factory or OllamaClient)(dsn)


class BlockCollector:
    """``on_blocks`` handler recording every block and optionally writing files."""

    def __init__(self, writer: Optional[BlockFileWriter] = None) -> None:
        self.writer = writer
        self.blocks: List[CodeBlock] = []

    def __call__(self, blocks: List[CodeBlock]):
        self.blocks.extend(blocks)
        if self.writer is not None:
            return self.writer(blocks)
        return None

    def summary(self) -> List[Dict[str, Any]]:
        written = self.writer.written if self.writer is not None else []
        out = []
        for i, block in enumerate(self.blocks):
            item: Dict[str, Any] = {"language": block.language, "chars": len(block.code)}
            if i < len(written):
                item["path"] = str(written[i])
            out.append(item)
        return out


def handle_query(args: argparse.Namespace, client_factory: Optional[ClientFactory] = None) -> int:
    """Execute the ``query`` subcommand.

    Fragments are printed to stdout as they arrive unless ``--json`` is set,
    in which case stdout carries only the final JSON document
    (``summary`` and ``blocks``).

    Returns
    -------
    int
        ``0`` on success, ``1`` on a stream failure, ``2`` on invalid input.
    """
    try:
        client = _make_client(args, client_factory)
        options = RequestOptions(temperature=args.temperature) if args.temperature is not None else None
        request = build_request(args.prompt, model=args.model, system=args.system, options=options)
    except (ValueError, ValidationError) as e:
        _print_error({"error": str(e), "code": "validation"})
        return 2

    collector = BlockCollector(BlockFileWriter(args.blocks_dir) if args.blocks_dir else None)

    def _on_event(event: StreamEvent) -> None:
        if not args.json and event.fragment:
            sys.stdout.write(event.fragment)
            sys.stdout.flush()

    ctx = LogContext(model=request.model or None)
    try:
        summary = client.query(request, on_event=_on_event, on_blocks=collector)
    except StreamError as e:
        if not args.json:
            sys.stdout.write("\n")
        _print_error(error_payload(e))
        return 1

    blocks = collector.summary()
    if args.json:
        print(json.dumps({"summary": summary.to_dict(), "blocks": blocks}, default=str))
    else:
        sys.stdout.write("\n")
        print(f"-- {len(blocks)} code block(s)")
        for item in blocks:
            where = f" -> {item['path']}" if "path" in item else ""
            print(f"   [{item['language'] or 'text'}] {item['chars']} chars{where}")
    normalized_log_event(
        _logger,
        "cli.finalize",
        ctx,
        phase="finalize",
        emitted=summary.events,
        tokens=summary.tokens(),
    )
    return 0


def handle_ps(args: argparse.Namespace, client_factory: Optional[ClientFactory] = None) -> int:
    """Execute the ``ps`` subcommand; prints a table or, with ``--json``, the raw model."""
    try:
        client = _make_client(args, client_factory)
    except ValueError as e:
        _print_error({"error": str(e), "code": "validation"})
        return 2
    try:
        status = client.ps()
    except StreamError as e:
        _print_error(error_payload(e))
        return 1
    if args.json:
        print(status.model_dump_json())
        return 0
    if not status.models:
        print("no models loaded")
        return 0
    for m in status.models:
        expires = m.expires_at.isoformat() if m.expires_at else "-"
        print(
            f"{m.name or m.model}\t{m.details.parameter_size or '-'}\t"
            f"{m.details.quantization_level or '-'}\t{m.size_vram}\t{expires}"
        )
    return 0


__all__ = ["BlockCollector", "error_payload", "handle_query", "handle_ps"]
