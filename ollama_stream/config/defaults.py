"""ollama_stream.config.defaults
============================

Small, stable default values used across the package. They can be
overridden via environment variables or an external config file, but give
sensible fallbacks for local development and tests.

Only plain constants live here (no I/O, no package imports).
"""

from __future__ import annotations

# ---- Endpoint ----
# Full generate endpoint; the ps endpoint is derived by swapping the last segment.
OLLAMA_DEFAULT_URL = "http://localhost:11434/api/generate"
OLLAMA_DEFAULT_MODEL = "llama3.2:3b"
# Model used for image prompts when the request leaves the model empty.
OLLAMA_DEFAULT_VISION_MODEL = "x/llama3.2-vision"

# ---- Stream ----
STREAM_DEFAULT_SEPARATOR = "\n"
STREAM_DEFAULT_CHUNK_SIZE = 64 * 1024

# ---- CLI ----
CLI_DEFAULT_BLOCK_STEM = "block"
# Language tag -> file extension for written code blocks; unknown tags use the tag itself.
CLI_BLOCK_EXTENSIONS = {
    "": "txt",
    "text": "txt",
    "python": "py",
    "py": "py",
    "bash": "sh",
    "sh": "sh",
    "shell": "sh",
    "go": "go",
    "golang": "go",
    "javascript": "js",
    "js": "js",
    "typescript": "ts",
    "ts": "ts",
    "rust": "rs",
    "ruby": "rb",
    "markdown": "md",
    "yaml": "yml",
}


__all__ = [
    "OLLAMA_DEFAULT_URL",
    "OLLAMA_DEFAULT_MODEL",
    "OLLAMA_DEFAULT_VISION_MODEL",
    "STREAM_DEFAULT_SEPARATOR",
    "STREAM_DEFAULT_CHUNK_SIZE",
    "CLI_DEFAULT_BLOCK_STEM",
    "CLI_BLOCK_EXTENSIONS",
]
