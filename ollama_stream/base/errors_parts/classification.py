"""
Error classification helpers mapping exceptions to normalized ErrorCode values.

Implements HTTP status extraction and status-to-code mapping for transport
failures, with timeout detection ahead of the status lookup.
"""
from __future__ import annotations

import asyncio
from typing import Dict, Optional

import httpx

from .error_code import ErrorCode
from .stream_error import StreamError


def _extract_status(exc: BaseException) -> Optional[int]:
    """Attempt to extract an HTTP status code from an exception.

    Supported attribute shapes (checked in order):
    - ``exc.status_code``
    - ``exc.response.status_code``
    Returns ``None`` if no valid status can be found.
    """
    val = getattr(exc, "status_code", None)
    if isinstance(val, int) and 100 <= val < 600:
        return val
    resp = getattr(exc, "response", None)
    if resp is not None:
        sc = getattr(resp, "status_code", None)
        if isinstance(sc, int) and 100 <= sc < 600:
            return sc
    return None


_HTTP_STATUS_MAP: Dict[int, ErrorCode] = {
    400: ErrorCode.VALIDATION,
    401: ErrorCode.AUTH,
    403: ErrorCode.AUTH,
    404: ErrorCode.NOT_FOUND,
    408: ErrorCode.TIMEOUT,
    422: ErrorCode.VALIDATION,
    500: ErrorCode.SERVER_ERROR,
    502: ErrorCode.UNAVAILABLE,
    503: ErrorCode.UNAVAILABLE,
    504: ErrorCode.TIMEOUT,
}


def status_to_code(status: int) -> ErrorCode:
    """Map an HTTP status code to an :class:`ErrorCode` (``transport`` fallback)."""
    return _HTTP_STATUS_MAP.get(status, ErrorCode.TRANSPORT)


def classify_exception(exc: BaseException) -> ErrorCode:
    """Classify an exception into a normalized :class:`ErrorCode`.

    Precedence:
        1. StreamError passthrough.
        2. Timeout exceptions (sync/async/httpx).
        3. HTTP status mapping.
        4. I/O and httpx transport failures map to ``transport``.
        5. ``UNKNOWN`` fallback.
    """
    if isinstance(exc, StreamError):
        return exc.code
    if isinstance(exc, (TimeoutError, asyncio.TimeoutError, httpx.TimeoutException)):
        return ErrorCode.TIMEOUT
    status = _extract_status(exc)
    if status is not None:
        return status_to_code(status)
    if isinstance(exc, (OSError, httpx.TransportError, httpx.StreamError)):
        return ErrorCode.TRANSPORT
    return ErrorCode.UNKNOWN


__all__ = [
    "classify_exception",
    "status_to_code",
    "_extract_status",
    "_HTTP_STATUS_MAP",
]
