"""Utilities that sit outside the stream core (file output)."""

from .files import BlockFileWriter, block_extension, open_file_descriptor

__all__ = ["BlockFileWriter", "block_extension", "open_file_descriptor"]
