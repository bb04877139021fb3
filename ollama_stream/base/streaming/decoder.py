"""Decode scanner tokens into :class:`StreamEvent` objects.

A malformed line is a hard stop for the whole stream: there is no
skip-and-resync policy, the caller receives a :class:`DecodeError`.
"""
from __future__ import annotations

from typing import Union

from pydantic import ValidationError

from ..errors import DecodeError, ErrorCode
from .events import StreamEvent


def decode_event(token: Union[bytes, str]) -> StreamEvent:
    """Parse one NDJSON token as a single JSON object.

    Raises:
        DecodeError: when the token is not well-formed JSON, is not an
            object, or a recognized field has the wrong type.
    """
    line = token.encode("utf-8") if isinstance(token, str) else bytes(token)
    try:
        return StreamEvent.model_validate_json(line)
    except ValueError as e:
        # ValidationError is a ValueError; bad UTF-8 surfaces as a plain one
        detail = e.errors()[0].get("msg", str(e)) if isinstance(e, ValidationError) and e.errors() else str(e)
        raise DecodeError(
            code=ErrorCode.DECODE,
            message=f"invalid stream event: {detail}",
            phase="decode",
            raw=e,
            line=line,
        ) from e


__all__ = ["decode_event"]
