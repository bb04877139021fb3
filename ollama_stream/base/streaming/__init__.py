"""Streaming package: NDJSON scanning, event decoding, fence extraction.

Exposes the stream core under a single namespace. Layers, leaves first:
scanner -> decoder -> fences -> coordinator.
"""

from .scanner import AsyncSplitScanner, SplitCursor, SplitScanner, split_at
from .events import StreamEvent
from .decoder import decode_event
from .fences import CODE_FENCE_PATTERN, CodeBlock, FenceExtractor, find_code_blocks
from .outcome import Outcome
from .streaming_metrics import StreamSummary
from .coordinator import NDJSON_SEPARATOR, StreamCoordinator, run_stream, run_stream_async

__all__ = [
    "SplitCursor",
    "SplitScanner",
    "AsyncSplitScanner",
    "split_at",
    "StreamEvent",
    "decode_event",
    "CODE_FENCE_PATTERN",
    "CodeBlock",
    "FenceExtractor",
    "find_code_blocks",
    "Outcome",
    "StreamSummary",
    "NDJSON_SEPARATOR",
    "StreamCoordinator",
    "run_stream",
    "run_stream_async",
]
