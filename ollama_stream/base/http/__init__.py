"""HTTP utilities shared by the Ollama client.

Exposes a pooled ``httpx`` client factory to reuse connections across calls.
"""

from .client import get_httpx_client, close_all_clients

__all__ = ["get_httpx_client", "close_all_clients"]
