"""Pytest configuration for the ollama_stream test suite.

Every test starts from a clean configuration: no config file, no endpoint
env vars, fresh caches and no pooled HTTP clients.
"""

from __future__ import annotations

import logging
from typing import Iterator, List

import pytest

from ollama_stream.base.http import close_all_clients
from ollama_stream.base.logging import BASE_LOGGER_NAME, get_logger
from ollama_stream.config import CONFIG_FILE_ENV, ENV_FIELD_MAP, reset_config_cache

_ENV_VARS = (
    CONFIG_FILE_ENV,
    "OLLAMA_STREAM_LOG_LEVEL",
    "OLLAMA_STREAM_TIMEOUT_CONNECT_SECONDS",
    "OLLAMA_STREAM_TIMEOUT_READ_SECONDS",
    "OLLAMA_STREAM_TIMEOUT_WRITE_SECONDS",
    *ENV_FIELD_MAP.values(),
)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    reset_config_cache()
    yield
    reset_config_cache()
    close_all_clients()


class ListHandler(logging.Handler):
    """Capture log records into a list for assertions."""

    def __init__(self) -> None:
        super().__init__(level=logging.DEBUG)
        self.records: List[logging.LogRecord] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.records.append(record)


@pytest.fixture()
def log_records() -> Iterator[List[logging.LogRecord]]:
    """Collect every record emitted under the ``ollama_stream`` logger at DEBUG."""
    base = get_logger(BASE_LOGGER_NAME)
    handler = ListHandler()
    previous = base.level
    base.addHandler(handler)
    base.setLevel(logging.DEBUG)
    for h in base.handlers:
        if h is not handler:
            h.setLevel(logging.WARNING)
    try:
        yield handler.records
    finally:
        base.removeHandler(handler)
        base.setLevel(previous)
