"""
Normalized stream error codes (taxonomy).

Defines the `ErrorCode` enumeration used by the stream core, the HTTP client
and the CLI. Values are lowercase snake_case and are considered a stable
public contract for logging.
"""
from __future__ import annotations

from enum import Enum


class ErrorCode(str, Enum):
    """Enumerated normalized error codes representing failure categories."""

    TRANSPORT = "transport"
    DECODE = "decode"
    HANDLER = "handler"
    TIMEOUT = "timeout"
    AUTH = "auth"
    NOT_FOUND = "not_found"
    VALIDATION = "validation"
    SERVER_ERROR = "server_error"
    UNAVAILABLE = "unavailable"
    UNKNOWN = "unknown"


__all__ = ["ErrorCode"]
