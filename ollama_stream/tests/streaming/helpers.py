"""Builders for NDJSON test streams."""
from __future__ import annotations

import json
from typing import Iterable, Iterator, List


def ndjson(*objects: dict) -> bytes:
    """Encode objects as one NDJSON document with a trailing newline."""
    return b"".join(json.dumps(o).encode("utf-8") + b"\n" for o in objects)


def fragment_stream(fragments: Iterable[str], *, model: str = "llama3.2:3b") -> bytes:
    """NDJSON for a generation emitting ``fragments`` then a terminal event."""
    events = [{"model": model, "response": f, "done": False} for f in fragments]
    events.append({"model": model, "response": "", "done": True, "done_reason": "stop"})
    return ndjson(*events)


def chunked(data: bytes, size: int) -> Iterator[bytes]:
    for i in range(0, len(data), size):
        yield data[i : i + size]


def split_points(data: bytes, *cuts: int) -> List[bytes]:
    """Split ``data`` at the given offsets."""
    out, prev = [], 0
    for c in sorted(cuts):
        out.append(data[prev:c])
        prev = c
    out.append(data[prev:])
    return out


class FailingReader:
    """File-like source that returns ``chunks`` then raises ``error``."""

    def __init__(self, chunks: List[bytes], error: BaseException) -> None:
        self._chunks = list(chunks)
        self._error = error
        self.reads = 0

    def read(self, n: int) -> bytes:
        self.reads += 1
        if self._chunks:
            return self._chunks.pop(0)
        raise self._error


async def aiter_chunks(chunks: Iterable[bytes]):
    for c in chunks:
        yield c
