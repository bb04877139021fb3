"""Ollama helpers module.

Purpose:
- Small, side-effect-free utilities for the Ollama client (headers, endpoint
  derivation, status handling) to keep `client.py` focused on the call flow.

Failure semantics:
- Non-200 responses become :class:`TransportError` carrying the status code
  and the response body text.
- Errors raised by httpx before any body is streamed are classified and
  wrapped in :class:`TransportError` with phase ``request``.
"""

from __future__ import annotations

from typing import Dict

import httpx

from ..base.errors import ErrorCode, TransportError, classify_exception, status_to_code


def build_headers(token: str, *, json_body: bool) -> Dict[str, str]:
    """Return request headers; ``Authorization`` is sent only with a token."""
    headers = {"Accept": "application/json"}
    if json_body:
        headers["Content-Type"] = "application/json"
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return headers


def derive_ps_url(generate_url: str) -> str:
    """Replace the last path segment of ``generate_url`` with ``ps``.

    ``http://host/ollama/api/generate`` -> ``http://host/ollama/api/ps``
    """
    url = httpx.URL(generate_url.rstrip("/"))
    path = url.path
    head, sep, _ = path.rpartition("/")
    return str(url.copy_with(path=f"{head}{sep}ps" if sep else "/ps"))


def status_error(action: str, status_code: int, body: str) -> TransportError:
    """Build the error raised for a non-200 response."""
    return TransportError(
        code=status_to_code(status_code),
        message=f"{action} failed, status code: {status_code}, body: {body}",
        phase="request",
        status_code=status_code,
        body=body,
    )


def request_error(action: str, exc: httpx.HTTPError) -> TransportError:
    """Wrap an httpx failure raised before the body was streamed."""
    code = classify_exception(exc)
    return TransportError(
        code=ErrorCode.TRANSPORT if code is ErrorCode.UNKNOWN else code,
        message=f"failed to send {action}: {exc}",
        phase="request",
        raw=exc,
    )


__all__ = ["build_headers", "derive_ps_url", "status_error", "request_error"]
