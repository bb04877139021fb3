"""Configuration layering tests: defaults -> file -> env -> overrides."""
from __future__ import annotations

import json

import pytest

from ollama_stream.config import CONFIG_FILE_ENV, get_client_config, reset_config_cache
from ollama_stream.config.defaults import OLLAMA_DEFAULT_MODEL, OLLAMA_DEFAULT_URL


def test_defaults_without_file_or_env():
    cfg = get_client_config()
    assert cfg["url"] == OLLAMA_DEFAULT_URL  # nosec B101
    assert cfg["model"] == OLLAMA_DEFAULT_MODEL  # nosec B101
    assert cfg["token"] == ""  # nosec B101


def test_json_file_then_env_then_overrides(tmp_path, monkeypatch):
    path = tmp_path / "cfg.json"
    path.write_text(json.dumps({"url": "http://file/api/generate", "model": "file-model", "token": "file-token"}))
    monkeypatch.setenv(CONFIG_FILE_ENV, str(path))
    cfg = get_client_config()
    assert cfg["url"] == "http://file/api/generate" and cfg["model"] == "file-model"  # nosec B101

    monkeypatch.setenv("OLLAMA_STREAM_MODEL", "env-model")
    cfg = get_client_config()
    assert cfg["model"] == "env-model" and cfg["token"] == "file-token"  # nosec B101

    cfg = get_client_config({"model": "override", "url": None})
    assert cfg["model"] == "override"  # nosec B101
    assert cfg["url"] == "http://file/api/generate"  # nosec B101


def test_yaml_file(tmp_path, monkeypatch):
    path = tmp_path / "cfg.yaml"
    path.write_text("url: https://ai.example.org/ollama/api/generate\ntoken: sk-yaml\n")
    monkeypatch.setenv(CONFIG_FILE_ENV, str(path))
    cfg = get_client_config()
    assert cfg["url"] == "https://ai.example.org/ollama/api/generate"  # nosec B101
    assert cfg["token"] == "sk-yaml"  # nosec B101


def test_missing_file_is_ignored(tmp_path, monkeypatch):
    monkeypatch.setenv(CONFIG_FILE_ENV, str(tmp_path / "absent.yaml"))
    assert get_client_config()["url"] == OLLAMA_DEFAULT_URL  # nosec B101


def test_non_mapping_file_rejected(tmp_path, monkeypatch):
    path = tmp_path / "cfg.yaml"
    path.write_text("- just\n- a list\n")
    monkeypatch.setenv(CONFIG_FILE_ENV, str(path))
    with pytest.raises(ValueError):
        get_client_config()


def test_unparseable_file_rejected(tmp_path, monkeypatch):
    path = tmp_path / "cfg.yaml"
    path.write_text("url: [unclosed\n")
    monkeypatch.setenv(CONFIG_FILE_ENV, str(path))
    with pytest.raises(ValueError):
        get_client_config()


def test_file_contents_cached_until_reset(tmp_path, monkeypatch):
    path = tmp_path / "cfg.json"
    path.write_text(json.dumps({"model": "first"}))
    monkeypatch.setenv(CONFIG_FILE_ENV, str(path))
    assert get_client_config()["model"] == "first"  # nosec B101
    path.write_text(json.dumps({"model": "second"}))
    assert get_client_config()["model"] == "first"  # nosec B101
    reset_config_cache()
    assert get_client_config()["model"] == "second"  # nosec B101
