"""Timeout configuration for HTTP transport.

Centralizes the timeout values used by the pooled ``httpx`` clients so no
call site introduces ad-hoc numeric literals.

Supported environment variables (all optional, positive floats):
    OLLAMA_STREAM_TIMEOUT_CONNECT_SECONDS
    OLLAMA_STREAM_TIMEOUT_READ_SECONDS
    OLLAMA_STREAM_TIMEOUT_WRITE_SECONDS

The read timeout bounds the idle gap between two body chunks, not the whole
generation. It is unbounded by default because local models can pause for a
long time before the first token.
"""
from __future__ import annotations

from dataclasses import dataclass
import os

import httpx


@dataclass(frozen=True)
class TimeoutConfig:
    """Container for normalized timeout values (seconds).

    Attributes:
        connect_timeout_seconds: Time allowed to establish the connection.
        read_timeout_seconds: Idle time allowed between two received chunks;
            ``None`` disables the limit.
        write_timeout_seconds: Time allowed to send the request body.
    """

    connect_timeout_seconds: float = 10.0
    read_timeout_seconds: float | None = None
    write_timeout_seconds: float = 30.0

    def to_httpx(self) -> httpx.Timeout:
        """Return the equivalent :class:`httpx.Timeout`."""
        return httpx.Timeout(
            connect=self.connect_timeout_seconds,
            read=self.read_timeout_seconds,
            write=self.write_timeout_seconds,
            pool=self.connect_timeout_seconds,
        )


_CACHED: TimeoutConfig | None = None
_ENV_GUARD: str | None = None

_ENV_NAMES = (
    "OLLAMA_STREAM_TIMEOUT_CONNECT_SECONDS",
    "OLLAMA_STREAM_TIMEOUT_READ_SECONDS",
    "OLLAMA_STREAM_TIMEOUT_WRITE_SECONDS",
)


def _parse_env_float(name: str, default: float | None) -> float | None:
    """Parse an environment variable as a positive float, else ``default``."""
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        val = float(raw)
    except ValueError:
        return default
    return val if val > 0 else default


def get_timeout_config() -> TimeoutConfig:
    """Return the process-cached :class:`TimeoutConfig`.

    The cache is refreshed when any of the supported env variables changes,
    which lets tests adjust timeouts with ``monkeypatch.setenv``.
    """
    global _CACHED, _ENV_GUARD  # noqa: PLW0603 - documented module cache
    guard = "/".join(os.getenv(name, "") for name in _ENV_NAMES)
    if _CACHED is not None and _ENV_GUARD == guard:
        return _CACHED

    defaults = TimeoutConfig()
    _CACHED = TimeoutConfig(
        connect_timeout_seconds=float(_parse_env_float(_ENV_NAMES[0], defaults.connect_timeout_seconds)),
        read_timeout_seconds=_parse_env_float(_ENV_NAMES[1], defaults.read_timeout_seconds),
        write_timeout_seconds=float(_parse_env_float(_ENV_NAMES[2], defaults.write_timeout_seconds)),
    )
    _ENV_GUARD = guard
    return _CACHED


__all__ = ["TimeoutConfig", "get_timeout_config"]
