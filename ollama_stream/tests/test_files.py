"""Tests for the file helpers and the code block writer."""
from __future__ import annotations

import pytest

from ollama_stream.base.errors import HandlerError
from ollama_stream.base.streaming import CodeBlock, run_stream
from ollama_stream.utils.files import BlockFileWriter, block_extension, open_file_descriptor

from .streaming.helpers import fragment_stream


def test_open_file_descriptor_creates_parents_relative_to_cwd(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    with open_file_descriptor("a/b/out.txt") as fh:
        fh.write("hello")
    assert (tmp_path / "a" / "b" / "out.txt").read_text(encoding="utf-8") == "hello"  # nosec B101


def test_open_file_descriptor_truncates(tmp_path):
    target = tmp_path / "f.txt"
    target.write_text("a much longer previous content")
    with open_file_descriptor(target) as fh:
        fh.write("short")
    assert target.read_text() == "short"  # nosec B101


@pytest.mark.parametrize(
    "language,ext",
    [("go", "go"), ("Python", "py"), ("", "txt"), ("bash", "sh"), ("c++", "c"), ("zig", "zig"), ("+++", "txt")],
)
def test_block_extension(language, ext):
    assert block_extension(language) == ext  # nosec B101


def test_writer_numbers_blocks_across_batches(tmp_path):
    writer = BlockFileWriter(tmp_path / "blocks")
    assert writer([CodeBlock("go", "package main\n")]).ok  # nosec B101
    assert writer([CodeBlock("python", "print(1)\n"), CodeBlock("", "plain")]).ok  # nosec B101
    names = [p.name for p in writer.written]
    assert names == ["block_1.go", "block_2.py", "block_3.txt"]  # nosec B101
    assert (tmp_path / "blocks" / "block_2.py").read_text(encoding="utf-8") == "print(1)\n"  # nosec B101


def test_writer_as_stream_handler(tmp_path):
    writer = BlockFileWriter(tmp_path, stem="answer")
    run_stream([fragment_stream(["```rust\nfn main() {}\n```"])], on_blocks=writer)
    assert (tmp_path / "answer_1.rs").read_text(encoding="utf-8") == "fn main() {}\n"  # nosec B101


def test_writer_failure_stops_stream(tmp_path):
    blocker = tmp_path / "not_a_dir"
    blocker.write_text("file in the way")
    writer = BlockFileWriter(blocker)
    with pytest.raises(HandlerError) as ei:
        run_stream([fragment_stream(["```go\nx\n```", "never"])], on_blocks=writer)
    assert isinstance(ei.value.cause, OSError)  # nosec B101
    assert writer.written == []  # nosec B101
