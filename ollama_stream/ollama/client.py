"""Ollama client.

Purpose:
    Send a generate request to an Ollama (or Open WebUI proxied Ollama)
    endpoint and stream the NDJSON response through :func:`run_stream`, and
    list the models currently loaded via the ``ps`` endpoint.

External dependencies:
    - ``httpx`` only. The default client comes from the shared pool in
      ``base.http``; callers (and tests) may pass their own ``httpx.Client``.

Failure semantics:
    - Connection failures and non-200 responses raise :class:`TransportError`
      (phase ``request``) before any handler runs.
    - Failures while streaming surface exactly as from :func:`run_stream`.
    - No retries; every error reaches the caller.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx
from pydantic import ValidationError

from ..base.errors import DecodeError, ErrorCode
from ..base.http import get_httpx_client
from ..base.logging import LogContext, get_logger, normalized_log_event
from ..base.streaming import StreamSummary, run_stream, run_stream_async
from ..base.streaming.coordinator import AsyncBlocksHandler, AsyncEventHandler, BlocksHandler, EventHandler
from ..base.timeouts import get_timeout_config
from ..config import get_client_config
from .helpers import build_headers, derive_ps_url, request_error, status_error
from .models import GenerateRequest, ProcessStatus


@dataclass(frozen=True)
class Dsn:
    """Endpoint and credentials: the full generate URL and a bearer token."""

    url: str
    token: str = ""

    @classmethod
    def from_config(cls, **overrides: Any) -> "Dsn":
        """Resolve the DSN from defaults, config file, env and ``overrides``."""
        cfg = get_client_config(overrides)
        return cls(url=str(cfg["url"]), token=str(cfg.get("token") or ""))


class OllamaClient:
    """Blocking client bound to one :class:`Dsn`."""

    def __init__(self, dsn: Dsn, http_client: Optional[httpx.Client] = None) -> None:
        self.dsn = dsn
        self._http = http_client
        self._logger = get_logger("ollama_stream.client")

    def _client(self, purpose: str) -> httpx.Client:
        return self._http if self._http is not None else get_httpx_client(None, purpose)

    def query(
        self,
        request: GenerateRequest,
        on_event: Optional[EventHandler] = None,
        on_blocks: Optional[BlocksHandler] = None,
    ) -> StreamSummary:
        """Send ``request`` and drive the streamed response to completion.

        Returns:
            :class:`StreamSummary` of the processed stream.

        Raises:
            TransportError: connection failure, non-200 status or read failure.
            DecodeError: a response line is not a valid stream event.
            HandlerError: a handler reported failure or raised.
        """
        prepared = request.prepared()
        ctx = LogContext(url=self.dsn.url, model=prepared.model or None)
        client = self._client("ollama.generate")
        headers = build_headers(self.dsn.token, json_body=True)
        # Read failures inside run_stream already arrive as TransportError
        try:
            with client.stream("POST", self.dsn.url, content=prepared.to_json(), headers=headers) as response:
                if response.status_code != httpx.codes.OK:
                    response.read()
                    raise status_error("ollama request", response.status_code, response.text)
                return run_stream(
                    response.iter_bytes(),
                    on_event=on_event,
                    on_blocks=on_blocks,
                    context=ctx,
                )
        except httpx.HTTPError as e:
            raise request_error("ollama request", e) from e

    def ps(self) -> ProcessStatus:
        """Return the models currently loaded by the daemon."""
        url = derive_ps_url(self.dsn.url)
        client = self._client("ollama.ps")
        try:
            response = client.get(url, headers=build_headers(self.dsn.token, json_body=False))
        except httpx.HTTPError as e:
            raise request_error("ollama ps request", e) from e
        if response.status_code != httpx.codes.OK:
            raise status_error("ollama ps request", response.status_code, response.text)
        status = _decode_ps(response.content)
        normalized_log_event(
            self._logger,
            "ps.end",
            LogContext(url=url),
            phase="finalize",
            emitted=len(status.models),
        )
        return status


class AsyncOllamaClient:
    """Async counterpart of :class:`OllamaClient` over ``httpx.AsyncClient``.

    The async client is owned by the caller; without one, a client is created
    and closed per call.
    """

    def __init__(self, dsn: Dsn, http_client: Optional[httpx.AsyncClient] = None) -> None:
        self.dsn = dsn
        self._http = http_client

    async def query(
        self,
        request: GenerateRequest,
        on_event: Optional[AsyncEventHandler] = None,
        on_blocks: Optional[AsyncBlocksHandler] = None,
    ) -> StreamSummary:
        """Async :meth:`OllamaClient.query`; handlers may be coroutine functions."""
        if self._http is not None:
            return await self._query(self._http, request, on_event, on_blocks)
        async with httpx.AsyncClient(timeout=get_timeout_config().to_httpx()) as client:
            return await self._query(client, request, on_event, on_blocks)

    async def _query(self, client, request, on_event, on_blocks) -> StreamSummary:
        prepared = request.prepared()
        ctx = LogContext(url=self.dsn.url, model=prepared.model or None)
        headers = build_headers(self.dsn.token, json_body=True)
        try:
            async with client.stream("POST", self.dsn.url, content=prepared.to_json(), headers=headers) as response:
                if response.status_code != httpx.codes.OK:
                    await response.aread()
                    raise status_error("ollama request", response.status_code, response.text)
                return await run_stream_async(
                    response.aiter_bytes(),
                    on_event=on_event,
                    on_blocks=on_blocks,
                    context=ctx,
                )
        except httpx.HTTPError as e:
            raise request_error("ollama request", e) from e


def _decode_ps(content: bytes) -> ProcessStatus:
    try:
        return ProcessStatus.model_validate_json(content)
    except ValidationError as e:
        raise DecodeError(
            code=ErrorCode.DECODE,
            message=f"invalid ps response: {e}",
            phase="decode",
            raw=e,
            line=content,
        ) from e


def build_request(prompt: str, *, model: Optional[str] = None, **fields: Any) -> GenerateRequest:
    """Build a :class:`GenerateRequest` with the configured default model."""
    cfg: Dict[str, Any] = get_client_config({"model": model})
    return GenerateRequest(model=str(cfg.get("model") or ""), prompt=prompt, **fields)


__all__ = ["Dsn", "OllamaClient", "AsyncOllamaClient", "build_request"]
