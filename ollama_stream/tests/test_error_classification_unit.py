"""Unit tests for error classification and the stream error taxonomy."""
from __future__ import annotations

import asyncio

import httpx
import pytest

from ollama_stream.base.errors import (
    DecodeError,
    ErrorCode,
    HandlerError,
    StreamError,
    TransportError,
    classify_exception,
    status_to_code,
)


class _WithStatus(Exception):
    def __init__(self, status_code):
        super().__init__("status")
        self.status_code = status_code


class _WithResponse(Exception):
    def __init__(self, status_code):
        super().__init__("resp")
        self.response = type("R", (), {"status_code": status_code})()


@pytest.mark.parametrize(
    "status,code",
    [
        (400, ErrorCode.VALIDATION),
        (401, ErrorCode.AUTH),
        (403, ErrorCode.AUTH),
        (404, ErrorCode.NOT_FOUND),
        (500, ErrorCode.SERVER_ERROR),
        (503, ErrorCode.UNAVAILABLE),
        (504, ErrorCode.TIMEOUT),
        (418, ErrorCode.TRANSPORT),
    ],
)
def test_status_mapping(status, code):
    assert status_to_code(status) is code  # nosec B101
    assert classify_exception(_WithStatus(status)) is code  # nosec B101
    assert classify_exception(_WithResponse(status)) is code  # nosec B101


def test_timeouts_take_precedence():
    assert classify_exception(TimeoutError()) is ErrorCode.TIMEOUT  # nosec B101
    assert classify_exception(asyncio.TimeoutError()) is ErrorCode.TIMEOUT  # nosec B101
    assert classify_exception(httpx.ReadTimeout("slow")) is ErrorCode.TIMEOUT  # nosec B101


def test_io_failures_are_transport():
    assert classify_exception(ConnectionResetError()) is ErrorCode.TRANSPORT  # nosec B101
    assert classify_exception(httpx.RemoteProtocolError("eof")) is ErrorCode.TRANSPORT  # nosec B101


def test_unknown_fallback_and_passthrough():
    assert classify_exception(RuntimeError("?")) is ErrorCode.UNKNOWN  # nosec B101
    err = DecodeError(code=ErrorCode.DECODE, message="bad")
    assert classify_exception(err) is ErrorCode.DECODE  # nosec B101


def test_error_types_share_a_base_and_render():
    t = TransportError(code=ErrorCode.SERVER_ERROR, message="boom", phase="request", status_code=500, body="x")
    h = HandlerError(code=ErrorCode.HANDLER, message="stop", phase="dispatch", handler="on_event", cause="why")
    assert isinstance(t, StreamError) and isinstance(h, StreamError)  # nosec B101
    assert str(t) == "request server_error: boom"  # nosec B101
    assert h.cause == "why"  # nosec B101
    with pytest.raises(StreamError):
        raise t
