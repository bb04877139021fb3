"""File helpers for persisting extracted code blocks.

Purpose
-------
:func:`open_file_descriptor` opens a writable text file at a path that may
be relative to the current working directory, creating parent directories.
:class:`BlockFileWriter` is an ``on_blocks`` handler that writes every code
block of a batch to ``<directory>/<stem>_<n>.<ext>``.

Contract
--------
Blocks are numbered from 1 in the order they are handed over, across
batches. An ``OSError`` while writing is returned as
``Outcome.failure(err)`` so the stream stops with a ``HandlerError``.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import IO, List, Mapping, Optional, Union

from ..base.logging import LogContext, get_logger, normalized_log_event
from ..base.streaming import CodeBlock, Outcome
from ..config.defaults import CLI_BLOCK_EXTENSIONS, CLI_DEFAULT_BLOCK_STEM

_logger = get_logger("ollama_stream.files")


def open_file_descriptor(path: Union[str, os.PathLike], *, encoding: str = "utf-8") -> IO[str]:
    """Open ``path`` for writing, truncating any existing content.

    Relative paths resolve against the current working directory and missing
    parent directories are created.
    """
    target = Path(path)
    if not target.is_absolute():
        target = Path.cwd() / target
    target.parent.mkdir(parents=True, exist_ok=True)
    return target.open("w", encoding=encoding)


def block_extension(language: str, extensions: Optional[Mapping[str, str]] = None) -> str:
    """Map a fence language tag to a file extension; unknown tags map to themselves."""
    table = CLI_BLOCK_EXTENSIONS if extensions is None else extensions
    tag = language.strip().lower()
    if tag in table:
        return table[tag]
    safe = "".join(ch for ch in tag if ch.isalnum())
    return safe or "txt"


class BlockFileWriter:
    """Code-block batch handler writing one file per block.

    Parameters
    ----------
    directory:
        Target directory; relative paths resolve against the working directory.
    stem:
        File name prefix, ``block`` by default.
    """

    def __init__(self, directory: Union[str, os.PathLike], stem: str = CLI_DEFAULT_BLOCK_STEM) -> None:
        self.directory = Path(directory)
        self.stem = stem
        self.written: List[Path] = []

    def path_for(self, block: CodeBlock) -> Path:
        n = len(self.written) + 1
        return self.directory / f"{self.stem}_{n}.{block_extension(block.language)}"

    def __call__(self, blocks: List[CodeBlock]) -> Outcome:
        for block in blocks:
            path = self.path_for(block)
            try:
                with open_file_descriptor(path) as fh:
                    fh.write(block.code)
            except OSError as e:
                return Outcome.failure(e)
            self.written.append(path)
        normalized_log_event(
            _logger,
            "files.blocks_written",
            LogContext(extra={"directory": str(self.directory)}),
            phase="mid_stream",
            emitted=len(blocks),
            total=len(self.written),
        )
        return Outcome.success()


__all__ = ["open_file_descriptor", "block_extension", "BlockFileWriter"]
