"""Errors parts package public surface.

Re-exports individual error taxonomy components for optional direct imports.
Prefer importing from `ollama_stream.base.errors` for the stable surface.
"""

from .error_code import ErrorCode
from .stream_error import DecodeError, HandlerError, StreamError, TransportError
from .classification import classify_exception, status_to_code

__all__ = [
    "ErrorCode",
    "StreamError",
    "TransportError",
    "DecodeError",
    "HandlerError",
    "classify_exception",
    "status_to_code",
]
