"""
Stream base package.

Transport-agnostic building blocks shared by the Ollama client and the CLI:
- Errors: normalized taxonomy (transport / decode / handler)
- Logging: structured JSON logging helpers
- Streaming: scanner, event decoder, fence extractor, coordinator
- HTTP: pooled httpx clients and timeout configuration
"""

from .errors import DecodeError, ErrorCode, HandlerError, StreamError, TransportError
from .streaming import (
    CodeBlock,
    FenceExtractor,
    Outcome,
    StreamEvent,
    StreamSummary,
    run_stream,
    run_stream_async,
)

__all__ = [
    "ErrorCode",
    "StreamError",
    "TransportError",
    "DecodeError",
    "HandlerError",
    "CodeBlock",
    "FenceExtractor",
    "Outcome",
    "StreamEvent",
    "StreamSummary",
    "run_stream",
    "run_stream_async",
]
