"""Stream coordinator: drive one NDJSON stream end to end.

Purpose:
    Scan tokens from a byte source, decode each into a :class:`StreamEvent`,
    hand events to the caller's ``on_event`` handler and, when an
    ``on_blocks`` handler is registered, feed fragment text to a
    :class:`FenceExtractor` and hand every non-empty batch of closed code
    blocks to ``on_blocks``.

Failure semantics (single pass, fail fast, no retries):
    - source read failures raise :class:`TransportError` (phase ``scan``);
    - malformed lines, blank ones included, raise :class:`DecodeError`
      (phase ``decode``);
    - a handler returning ``Outcome.failure(err)`` or raising raises
      :class:`HandlerError` with ``cause`` set to the handler's own error.
    No token is scanned after the first failure.

Concurrency:
    Every :class:`StreamCoordinator` owns its scan cursor and accumulation
    buffer. Independent streams never share mutable state, so concurrent
    streams need no locking.
"""
from __future__ import annotations

import dataclasses
import inspect
import logging
import time
import uuid
from contextlib import aclosing, closing
from typing import Any, Awaitable, Callable, List, Optional, Union

from ..errors import ErrorCode, HandlerError, StreamError, TransportError, classify_exception
from ..logging import LogContext, get_logger, normalized_log_event
from .decoder import decode_event
from .events import StreamEvent
from .fences import CodeBlock, FenceExtractor
from .outcome import Outcome, as_outcome
from .scanner import DEFAULT_CHUNK_SIZE, AsyncSplitScanner, Separator, SplitScanner
from .streaming_metrics import StreamSummary

EventHandler = Callable[[StreamEvent], Optional[Outcome]]
BlocksHandler = Callable[[List[CodeBlock]], Optional[Outcome]]
AsyncEventHandler = Callable[[StreamEvent], Union[Optional[Outcome], Awaitable[Optional[Outcome]]]]
AsyncBlocksHandler = Callable[[List[CodeBlock]], Union[Optional[Outcome], Awaitable[Optional[Outcome]]]]

NDJSON_SEPARATOR = "\n"

_logger = get_logger("ollama_stream.stream")


class StreamCoordinator:
    """Per-stream state and dispatch loop.

    One instance drives exactly one stream; create a new one per response.
    """

    def __init__(
        self,
        *,
        on_event: Optional[Callable[..., Any]] = None,
        on_blocks: Optional[Callable[..., Any]] = None,
        separator: Separator = NDJSON_SEPARATOR,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        context: Optional[LogContext] = None,
        logger=None,
        extractor: Optional[FenceExtractor] = None,
    ) -> None:
        self.on_event = on_event
        self.on_blocks = on_blocks
        self.separator = separator
        self.chunk_size = chunk_size
        self.extractor = extractor or FenceExtractor()
        self.summary = StreamSummary()
        # Copied so a shared context never carries another stream's id
        self.ctx = dataclasses.replace(context, extra=dict(context.extra)) if context else LogContext()
        if self.ctx.stream_id is None:
            self.ctx.stream_id = uuid.uuid4().hex[:12]
        self._logger = logger or _logger
        self._t0 = 0.0
        self._used = False

    # ---- lifecycle -------------------------------------------------------
    def _begin(self) -> None:
        if self._used:
            raise RuntimeError("StreamCoordinator drives a single stream; create a new one")
        self._used = True
        self._t0 = time.perf_counter()
        normalized_log_event(
            self._logger,
            "stream.start",
            self.ctx,
            phase="start",
            emitted=None,
            has_event_handler=self.on_event is not None,
            has_blocks_handler=self.on_blocks is not None,
        )

    def _elapsed_ms(self) -> float:
        return (time.perf_counter() - self._t0) * 1000.0

    def _finish(self) -> StreamSummary:
        self.summary.total_duration_ms = self._elapsed_ms()
        if self.on_blocks is not None and self.extractor.pending:
            # Unterminated trailing fence: dropped by policy, not an error
            normalized_log_event(
                self._logger,
                "stream.unclosed_fence",
                self.ctx,
                phase="finalize",
                emitted=False,
                level=logging.DEBUG,
                buffered_chars=len(self.extractor.buffer),
            )
        normalized_log_event(
            self._logger,
            "stream.end",
            self.ctx,
            phase="finalize",
            emitted=self.summary.events,
            tokens=self.summary.tokens(),
            done=self.summary.done,
            blocks=self.summary.blocks,
            metrics={
                "time_to_first_fragment_ms": self.summary.time_to_first_fragment_ms,
                "total_duration_ms": self.summary.total_duration_ms,
                "tokens_per_second": self.summary.tokens_per_second,
            },
        )
        return self.summary

    def _fail(self, error: StreamError) -> None:
        self.summary.total_duration_ms = self._elapsed_ms()
        normalized_log_event(
            self._logger,
            "stream.error",
            self.ctx,
            phase=error.phase,
            emitted=self.summary.events,
            error_code=error.code.value,
            error=error.message,
            level=logging.ERROR,
        )

    # ---- per-token steps -------------------------------------------------
    def _transport_error(self, exc: Exception) -> TransportError:
        code = classify_exception(exc)
        return TransportError(
            code=ErrorCode.TRANSPORT if code is ErrorCode.UNKNOWN else code,
            message=f"failed to read stream: {exc}",
            phase="scan",
            raw=exc,
        )

    @staticmethod
    def _handler_error(name: str, cause: Any) -> HandlerError:
        return HandlerError(
            code=ErrorCode.HANDLER,
            message=f"{name} handler failed: {cause}",
            phase="dispatch",
            raw=cause if isinstance(cause, BaseException) else None,
            handler=name,
            cause=cause,
        )

    def _check(self, name: str, result: Any) -> None:
        try:
            outcome = as_outcome(result)
        except TypeError as e:
            raise self._handler_error(name, e) from e
        if not outcome.ok:
            raise self._handler_error(name, outcome.error)

    def _decode(self, token: bytes) -> StreamEvent:
        event = decode_event(token)
        self.summary.observe(event, self._elapsed_ms())
        return event

    def _extract(self, event: StreamEvent) -> List[CodeBlock]:
        blocks = self.extractor.feed(event.fragment)
        if blocks:
            self.summary.blocks += len(blocks)
            self.summary.batches += 1
            normalized_log_event(
                self._logger,
                "stream.blocks",
                self.ctx,
                phase="mid_stream",
                emitted=len(blocks),
                level=logging.DEBUG,
                languages=[b.language for b in blocks],
            )
        return blocks

    # ---- sync ------------------------------------------------------------
    def _call(self, name: str, handler: Callable[..., Any], arg: Any) -> None:
        try:
            result = handler(arg)
        except Exception as e:
            raise self._handler_error(name, e) from e
        self._check(name, result)

    def _process(self, token: bytes) -> None:
        event = self._decode(token)
        if self.on_event is not None:
            self._call("on_event", self.on_event, event)
        if self.on_blocks is not None:
            blocks = self._extract(event)
            if blocks:
                self._call("on_blocks", self.on_blocks, blocks)

    def run(self, source) -> StreamSummary:
        """Consume ``source`` to the end (or first failure) and return the summary."""
        self._begin()
        scanner = SplitScanner(source, self.separator, self.chunk_size)
        try:
            with closing(iter(scanner)) as tokens:
                while True:
                    try:
                        token = next(tokens)
                    except StopIteration:
                        break
                    except StreamError:
                        raise
                    except Exception as e:
                        raise self._transport_error(e) from e
                    self._process(token)
        except StreamError as e:
            self._fail(e)
            raise
        return self._finish()

    # ---- async -----------------------------------------------------------
    async def _acall(self, name: str, handler: Callable[..., Any], arg: Any) -> None:
        try:
            result = handler(arg)
            if inspect.isawaitable(result):
                result = await result
        except Exception as e:
            raise self._handler_error(name, e) from e
        self._check(name, result)

    async def _aprocess(self, token: bytes) -> None:
        event = self._decode(token)
        if self.on_event is not None:
            await self._acall("on_event", self.on_event, event)
        if self.on_blocks is not None:
            blocks = self._extract(event)
            if blocks:
                await self._acall("on_blocks", self.on_blocks, blocks)

    async def arun(self, source) -> StreamSummary:
        """Async counterpart of :meth:`run`; handlers may be coroutine functions."""
        self._begin()
        scanner = AsyncSplitScanner(source, self.separator, self.chunk_size)
        try:
            async with aclosing(scanner.__aiter__()) as tokens:
                while True:
                    try:
                        token = await tokens.__anext__()
                    except StopAsyncIteration:
                        break
                    except StreamError:
                        raise
                    except Exception as e:
                        raise self._transport_error(e) from e
                    await self._aprocess(token)
        except StreamError as e:
            self._fail(e)
            raise
        return self._finish()


def run_stream(
    source,
    *,
    on_event: Optional[EventHandler] = None,
    on_blocks: Optional[BlocksHandler] = None,
    separator: Separator = NDJSON_SEPARATOR,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    context: Optional[LogContext] = None,
    logger=None,
) -> StreamSummary:
    """Process one NDJSON stream from a blocking byte source.

    Parameters:
        source: File-like object with ``read(n)`` or an iterable of ``bytes``.
        on_event: Called with every decoded event, in arrival order.
        on_blocks: Called with each non-empty batch of closed code blocks.
        separator: Token separator; a single newline for NDJSON.

    Returns:
        :class:`StreamSummary` for the completed stream.

    Raises:
        TransportError, DecodeError, HandlerError: the first failure.
    """
    coordinator = StreamCoordinator(
        on_event=on_event,
        on_blocks=on_blocks,
        separator=separator,
        chunk_size=chunk_size,
        context=context,
        logger=logger,
    )
    return coordinator.run(source)


async def run_stream_async(
    source,
    *,
    on_event: Optional[AsyncEventHandler] = None,
    on_blocks: Optional[AsyncBlocksHandler] = None,
    separator: Separator = NDJSON_SEPARATOR,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    context: Optional[LogContext] = None,
    logger=None,
) -> StreamSummary:
    """Async variant of :func:`run_stream` over an async byte source."""
    coordinator = StreamCoordinator(
        on_event=on_event,
        on_blocks=on_blocks,
        separator=separator,
        chunk_size=chunk_size,
        context=context,
        logger=logger,
    )
    return await coordinator.arun(source)


__all__ = [
    "NDJSON_SEPARATOR",
    "StreamCoordinator",
    "run_stream",
    "run_stream_async",
]
