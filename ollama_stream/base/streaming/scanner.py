"""Delimiter scanner: split a live byte stream into separator-delimited tokens.

The splitting state lives in :class:`SplitCursor`, a pure object with no I/O.
:class:`SplitScanner` (blocking reads) and :class:`AsyncSplitScanner`
(awaited reads) only differ in how they obtain the next chunk, so both give
identical tokens for identical bytes regardless of how the bytes are chunked.

Token rules, matching standard buffered-reader split semantics:

* bytes before the first separator occurrence form a token and the cursor
  advances past the separator;
* with no separator in the buffer, more input is requested;
* at end of stream, non-empty leftover bytes form one final unterminated
  token; an empty leftover yields nothing.
"""
from __future__ import annotations

from typing import AsyncIterable, AsyncIterator, Iterable, Iterator, Optional, Union

DEFAULT_CHUNK_SIZE = 64 * 1024

Separator = Union[str, bytes]


def _encode_separator(separator: Separator) -> bytes:
    sep = separator.encode("utf-8") if isinstance(separator, str) else bytes(separator)
    if not sep:
        raise ValueError("separator must not be empty")
    return sep


def split_at(separator: Separator):
    """Return a split function ``(data, at_eof) -> (advance, token)``.

    ``advance`` is the number of bytes consumed and ``token`` is ``None`` when
    more data is needed. Useful when driving the split from an external
    buffer instead of a :class:`SplitCursor`.
    """
    sep = _encode_separator(separator)

    def _split(data: bytes, at_eof: bool) -> tuple[int, Optional[bytes]]:
        if at_eof and not data:
            return 0, None
        i = data.find(sep)
        if i >= 0:
            return i + len(sep), bytes(data[:i])
        if at_eof:
            return len(data), bytes(data)
        return 0, None

    return _split


class SplitCursor:
    """Byte window over the not-yet-tokenized remainder of a stream.

    ``_searched`` remembers how far the buffer was already searched so each
    byte is inspected a bounded number of times; the search restarts
    ``len(separator) - 1`` bytes early so a separator split across two
    ``feed`` calls is still found.
    """

    def __init__(self, separator: Separator = "\n") -> None:
        self.separator = _encode_separator(separator)
        self._buf = bytearray()
        self._searched = 0
        self._finished = False

    def feed(self, data: bytes) -> None:
        if self._finished:
            raise RuntimeError("cannot feed a finished cursor")
        self._buf.extend(data)

    def next_token(self) -> Optional[bytes]:
        """Return the next complete token, or ``None`` when more input is needed."""
        start = max(0, self._searched - len(self.separator) + 1)
        i = self._buf.find(self.separator, start)
        if i < 0:
            self._searched = len(self._buf)
            return None
        token = bytes(self._buf[:i])
        del self._buf[: i + len(self.separator)]
        self._searched = 0
        return token

    def finish(self) -> Optional[bytes]:
        """Mark end of stream and return the unterminated remainder, if any."""
        self._finished = True
        if not self._buf:
            return None
        token = bytes(self._buf)
        self._buf.clear()
        self._searched = 0
        return token

    @property
    def pending(self) -> int:
        """Number of buffered bytes not yet emitted as a token."""
        return len(self._buf)


def _iter_chunks(source, chunk_size: int) -> Iterator[bytes]:
    read = getattr(source, "read", None)
    if callable(read):
        while True:
            chunk = read(chunk_size)
            if not chunk:
                return
            yield chunk
    else:
        for chunk in source:
            if chunk:
                yield chunk


async def _aiter_chunks(source, chunk_size: int) -> AsyncIterator[bytes]:
    read = getattr(source, "read", None)
    if callable(read):
        while True:
            chunk = await read(chunk_size)
            if not chunk:
                return
            yield chunk
    else:
        async for chunk in source:
            if chunk:
                yield chunk


class SplitScanner:
    """Iterate separator-delimited tokens from a blocking byte source.

    Parameters:
        source: A file-like object exposing ``read(n)`` or any iterable of
            ``bytes`` chunks (e.g. ``httpx.Response.iter_bytes()``).
        separator: Non-empty ``str`` (UTF-8 encoded) or ``bytes`` pattern.
        chunk_size: Read size used for file-like sources.

    The scanner is single-pass: iterating it a second time raises
    ``RuntimeError``. Exceptions raised by the source propagate from the
    iteration step that hit them and end the iteration.
    """

    def __init__(
        self,
        source: Union[Iterable[bytes], object],
        separator: Separator = "\n",
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> None:
        self._source = source
        self._cursor = SplitCursor(separator)
        self._chunk_size = chunk_size
        self._started = False

    def __iter__(self) -> Iterator[bytes]:
        if self._started:
            raise RuntimeError("SplitScanner is single-pass and was already iterated")
        self._started = True
        return self._scan()

    def _scan(self) -> Iterator[bytes]:
        cursor = self._cursor
        for chunk in _iter_chunks(self._source, self._chunk_size):
            cursor.feed(chunk)
            while (token := cursor.next_token()) is not None:
                yield token
        tail = cursor.finish()
        if tail is not None:
            yield tail


class AsyncSplitScanner:
    """Async counterpart of :class:`SplitScanner`.

    ``source`` is an async iterable of ``bytes`` chunks (e.g.
    ``httpx.Response.aiter_bytes()``) or an object whose ``read(n)`` is a
    coroutine (e.g. ``asyncio.StreamReader``).
    """

    def __init__(
        self,
        source: Union[AsyncIterable[bytes], object],
        separator: Separator = "\n",
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> None:
        self._source = source
        self._cursor = SplitCursor(separator)
        self._chunk_size = chunk_size
        self._started = False

    def __aiter__(self) -> AsyncIterator[bytes]:
        if self._started:
            raise RuntimeError("AsyncSplitScanner is single-pass and was already iterated")
        self._started = True
        return self._scan()

    async def _scan(self) -> AsyncIterator[bytes]:
        cursor = self._cursor
        async for chunk in _aiter_chunks(self._source, self._chunk_size):
            cursor.feed(chunk)
            while (token := cursor.next_token()) is not None:
                yield token
        tail = cursor.finish()
        if tail is not None:
            yield tail


__all__ = [
    "DEFAULT_CHUNK_SIZE",
    "SplitCursor",
    "SplitScanner",
    "AsyncSplitScanner",
    "split_at",
]
