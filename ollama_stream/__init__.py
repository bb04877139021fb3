"""ollama-stream: incremental NDJSON stream processing for Ollama generations.

Scans a live byte stream into newline-delimited JSON events, hands each
event to a caller handler, and extracts fenced code blocks from the
accumulated response text as soon as each fence closes.
"""

from .base.errors import DecodeError, ErrorCode, HandlerError, StreamError, TransportError
from .base.streaming import (
    AsyncSplitScanner,
    CodeBlock,
    FenceExtractor,
    Outcome,
    SplitScanner,
    StreamEvent,
    StreamSummary,
    decode_event,
    find_code_blocks,
    run_stream,
    run_stream_async,
    split_at,
)
from .ollama import AsyncOllamaClient, Dsn, GenerateRequest, OllamaClient, RequestOptions
from .utils import BlockFileWriter, open_file_descriptor

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "ErrorCode",
    "StreamError",
    "TransportError",
    "DecodeError",
    "HandlerError",
    "SplitScanner",
    "AsyncSplitScanner",
    "split_at",
    "StreamEvent",
    "decode_event",
    "CodeBlock",
    "FenceExtractor",
    "find_code_blocks",
    "Outcome",
    "StreamSummary",
    "run_stream",
    "run_stream_async",
    "Dsn",
    "OllamaClient",
    "AsyncOllamaClient",
    "GenerateRequest",
    "RequestOptions",
    "BlockFileWriter",
    "open_file_descriptor",
]
