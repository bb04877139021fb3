"""Ollama endpoint client: request DTOs, ``query`` streaming and ``ps``."""

from .client import AsyncOllamaClient, Dsn, OllamaClient, build_request
from .models import (
    GenerateRequest,
    ProcessModel,
    ProcessModelDetails,
    ProcessStatus,
    RequestFormat,
    RequestOptions,
)

__all__ = [
    "Dsn",
    "OllamaClient",
    "AsyncOllamaClient",
    "build_request",
    "GenerateRequest",
    "RequestFormat",
    "RequestOptions",
    "ProcessModel",
    "ProcessModelDetails",
    "ProcessStatus",
]
