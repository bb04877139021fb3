"""Unified stream error taxonomy public surface.

This module re-exports the one-class-per-file implementations under
``ollama_stream.base.errors_parts`` to keep a stable import path.
"""

from .errors_parts.error_code import ErrorCode
from .errors_parts.stream_error import DecodeError, HandlerError, StreamError, TransportError
from .errors_parts.classification import classify_exception, status_to_code

__all__ = [
    "ErrorCode",
    "StreamError",
    "TransportError",
    "DecodeError",
    "HandlerError",
    "classify_exception",
    "status_to_code",
]
