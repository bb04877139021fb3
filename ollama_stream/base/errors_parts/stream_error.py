"""
Structured stream error exception types.

Every failure of a stream reaches the caller as a subclass of
:class:`StreamError`, so callers can tell the three failure kinds apart:

* :class:`TransportError` - reading the underlying byte stream failed, or the
  HTTP exchange was rejected before any body was streamed.
* :class:`DecodeError` - one NDJSON line was not a valid event object.
* :class:`HandlerError` - a caller-supplied callback reported failure. The
  original failure is kept verbatim on ``cause``.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from .error_code import ErrorCode


@dataclass
class StreamError(Exception):
    """Base error for a failed stream.

    Attributes:
        code: Normalized :class:`ErrorCode` classification for the failure.
        message: Human-readable error message suitable for logging.
        phase: Stream phase that failed (``"request"``, ``"scan"``,
            ``"decode"``, ``"dispatch"``).
        raw: Optional original exception for diagnostics.
    """

    code: ErrorCode
    message: str
    phase: str = "stream"
    raw: Optional[BaseException] = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"{self.phase} {self.code.value}: {self.message}"


@dataclass
class TransportError(StreamError):
    """I/O or HTTP failure while obtaining or reading the response body."""

    status_code: Optional[int] = None
    body: Optional[str] = None


@dataclass
class DecodeError(StreamError):
    """A scanned token could not be decoded into a stream event."""

    line: Optional[bytes] = None


@dataclass
class HandlerError(StreamError):
    """A caller-supplied handler reported failure.

    ``cause`` is the exact object the handler failed with, so callers can
    match on their own error types.
    """

    handler: str = ""
    cause: Any = None


__all__ = ["StreamError", "TransportError", "DecodeError", "HandlerError"]
