"""Unified configuration layer for the Ollama client.

Sources are merged in a predictable order (later wins):
    1. Built-in defaults (``config.defaults``)
    2. Optional external config file (JSON or YAML) pointed to by
       ``OLLAMA_STREAM_CONFIG_FILE``
    3. Environment variables
    4. In-code overrides passed to :func:`get_client_config` (``None`` ignored)

Environment Variable Conventions
--------------------------------
``OPEN_WEB_API_GENERATE_URL``  generate endpoint URL
``OPEN_WEB_API_TOKEN``         bearer token (Open WebUI)
``OLLAMA_STREAM_MODEL``        default model name

External Config File
--------------------
JSON is tried first, then YAML::

    url: https://ai.example.org/ollama/api/generate
    token: sk-...
    model: llama3.2:3b

A file that cannot be parsed raises ``ValueError``; a missing file is
ignored.

Public API
----------
* get_client_config(overrides: dict | None = None) -> dict
* reset_config_cache() -> None
"""
from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .defaults import OLLAMA_DEFAULT_MODEL, OLLAMA_DEFAULT_URL

CONFIG_FILE_ENV = "OLLAMA_STREAM_CONFIG_FILE"

DEFAULTS: Dict[str, Any] = {
    "url": OLLAMA_DEFAULT_URL,
    "token": "",
    "model": OLLAMA_DEFAULT_MODEL,
}

ENV_FIELD_MAP = {
    "url": "OPEN_WEB_API_GENERATE_URL",
    "token": "OPEN_WEB_API_TOKEN",  # pragma: allowlist secret - env var name, not a secret
    "model": "OLLAMA_STREAM_MODEL",
}

_FILE_CACHE: Optional[Dict[str, Any]] = None
_FILE_CACHE_PATH: Optional[str] = None


def _load_external_config() -> Dict[str, Any]:
    global _FILE_CACHE, _FILE_CACHE_PATH
    path = os.getenv(CONFIG_FILE_ENV)
    if _FILE_CACHE is not None and _FILE_CACHE_PATH == path:
        return _FILE_CACHE
    data: Dict[str, Any] = {}
    if path and Path(path).is_file():
        text = Path(path).read_text(encoding="utf-8")
        try:
            data = json.loads(text)
        except json.JSONDecodeError:
            try:
                data = yaml.safe_load(text) or {}
            except yaml.YAMLError as e:
                raise ValueError(f"cannot parse config file {path}: {e}") from e
        if not isinstance(data, dict):
            raise ValueError(f"config file {path} must contain a mapping")
    _FILE_CACHE = data
    _FILE_CACHE_PATH = path
    return data


def _env_overrides() -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for field, name in ENV_FIELD_MAP.items():
        val = os.getenv(name)
        if val:
            out[field] = val
    return out


def get_client_config(overrides: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Return the merged client configuration.

    Merge order (later wins): defaults -> external config -> env vars -> overrides
    """
    cfg: Dict[str, Any] = dict(DEFAULTS)
    file_cfg = _load_external_config()
    cfg |= {k: v for k, v in file_cfg.items() if v is not None}
    cfg |= _env_overrides()
    if overrides:
        cfg |= {k: v for k, v in overrides.items() if v is not None}
    return cfg


def reset_config_cache() -> None:
    """Drop the cached config file contents (tests, long-lived shells)."""
    global _FILE_CACHE, _FILE_CACHE_PATH
    _FILE_CACHE = None
    _FILE_CACHE_PATH = None


__all__ = [
    "CONFIG_FILE_ENV",
    "DEFAULTS",
    "ENV_FIELD_MAP",
    "get_client_config",
    "reset_config_cache",
]
