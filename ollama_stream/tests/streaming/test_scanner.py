"""Unit tests for the delimiter scanner.

Covers:
- Token sequence is invariant under arbitrary chunking.
- Multi-byte separators straddling a chunk boundary are still found.
- Final unterminated token, empty input, empty tokens.
- Read failures propagate; scanners are single-pass.
- split_at split function and the async scanner.
"""
from __future__ import annotations

import asyncio
import io
import random

import pytest

from ollama_stream.base.streaming import AsyncSplitScanner, SplitCursor, SplitScanner, split_at

from .helpers import FailingReader, aiter_chunks, chunked, split_points

DATA = b'{"response":"a"}\n{"response":"b\xc3\xa9"}\n\n{"response":"c"}\n{"done":true}'
EXPECTED = [b'{"response":"a"}', b'{"response":"b\xc3\xa9"}', b"", b'{"response":"c"}', b'{"done":true}']


def test_single_chunk_tokens():
    assert list(SplitScanner([DATA])) == EXPECTED  # nosec B101


@pytest.mark.parametrize("size", [1, 2, 3, 5, 7, 16, 64, 4096])
def test_tokens_invariant_under_fixed_chunking(size):
    assert list(SplitScanner(chunked(DATA, size))) == EXPECTED  # nosec B101


def test_tokens_invariant_under_random_chunking():
    rng = random.Random(1234)
    for _ in range(200):
        cuts = rng.sample(range(1, len(DATA)), k=rng.randint(1, 12))
        assert list(SplitScanner(split_points(DATA, *cuts))) == EXPECTED  # nosec B101


def test_file_like_source_with_small_reads():
    assert list(SplitScanner(io.BytesIO(DATA), chunk_size=3)) == EXPECTED  # nosec B101


@pytest.mark.parametrize("sep", [b"\r\n", b"<SEP>", "§§"])
def test_multibyte_separator_straddling_chunks(sep):
    raw_sep = sep.encode("utf-8") if isinstance(sep, str) else sep
    data = raw_sep.join([b"alpha", b"beta", b"gamma"])
    # every possible single cut, including cuts inside the separator
    for cut in range(1, len(data)):
        tokens = list(SplitScanner(split_points(data, cut), separator=sep))
        assert tokens == [b"alpha", b"beta", b"gamma"], cut  # nosec B101
    assert list(SplitScanner(chunked(data, 1), separator=sep)) == [b"alpha", b"beta", b"gamma"]  # nosec B101


def test_partial_separator_prefix_is_not_a_split():
    data = b"a<SE" + b"b<SEP>c"
    assert list(SplitScanner(chunked(data, 2), separator=b"<SEP>")) == [b"a<SEb", b"c"]  # nosec B101


def test_trailing_separator_yields_no_empty_final_token():
    assert list(SplitScanner([b"x\ny\n"])) == [b"x", b"y"]  # nosec B101


def test_unterminated_final_token_is_emitted():
    assert list(SplitScanner([b"x\n", b"tail"])) == [b"x", b"tail"]  # nosec B101


def test_empty_source_yields_nothing():
    assert list(SplitScanner([])) == []  # nosec B101
    assert list(SplitScanner(io.BytesIO(b""))) == []  # nosec B101


def test_empty_separator_rejected():
    with pytest.raises(ValueError):
        SplitScanner([b"x"], separator=b"")


def test_read_error_propagates_after_complete_tokens():
    reader = FailingReader([b"one\ntw"], OSError("connection reset"))
    it = iter(SplitScanner(reader))
    assert next(it) == b"one"  # nosec B101
    with pytest.raises(OSError, match="connection reset"):
        next(it)


def test_scanner_is_single_pass():
    scanner = SplitScanner([b"a\n"])
    assert list(scanner) == [b"a"]  # nosec B101
    with pytest.raises(RuntimeError):
        iter(scanner)


def test_split_at_function():
    split = split_at("\n")
    assert split(b"ab\ncd", False) == (3, b"ab")  # nosec B101
    assert split(b"abcd", False) == (0, None)  # nosec B101
    assert split(b"abcd", True) == (4, b"abcd")  # nosec B101
    assert split(b"", True) == (0, None)  # nosec B101


def test_cursor_reports_pending_bytes():
    cursor = SplitCursor(b"\r\n")
    cursor.feed(b"abc\r")
    assert cursor.next_token() is None  # nosec B101
    assert cursor.pending == 4  # nosec B101
    cursor.feed(b"\ndef")
    assert cursor.next_token() == b"abc"  # nosec B101
    assert cursor.next_token() is None  # nosec B101
    assert cursor.finish() == b"def"  # nosec B101
    with pytest.raises(RuntimeError):
        cursor.feed(b"more")


def test_async_scanner_matches_sync_tokens():
    async def collect(size):
        return [t async for t in AsyncSplitScanner(aiter_chunks(chunked(DATA, size)))]

    for size in (1, 4, 1024):
        assert asyncio.run(collect(size)) == EXPECTED  # nosec B101


def test_async_scanner_reads_from_stream_reader():
    async def scenario():
        reader = asyncio.StreamReader()
        reader.feed_data(DATA)
        reader.feed_eof()
        return [t async for t in AsyncSplitScanner(reader, chunk_size=5)]

    assert asyncio.run(scenario()) == EXPECTED  # nosec B101
