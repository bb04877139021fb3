"""Unit tests for fenced code block extraction.

Covers the content boundary convention: exactly one line terminator after
the language tag is dropped, everything else up to the closing backticks is
kept verbatim.
"""
from __future__ import annotations

from ollama_stream.base.streaming import CODE_FENCE_PATTERN, CodeBlock, FenceExtractor, find_code_blocks


def test_single_block():
    text = 'intro\n```go\nfmt.Println("hi")\n```\noutro'
    blocks = find_code_blocks(text)
    assert [(b.language, b.code) for b in blocks] == [("go", 'fmt.Println("hi")\n')]  # nosec B101
    start, end = blocks[0].span
    assert text[start:end].startswith("```go") and text[start:end].endswith("```")  # nosec B101


def test_multiple_blocks_in_source_order():
    text = "```python\nprint(1)\n```\ntext\n```bash\necho hi\n```"
    blocks = find_code_blocks(text)
    assert [b.language for b in blocks] == ["python", "bash"]  # nosec B101
    assert [b.code for b in blocks] == ["print(1)\n", "echo hi\n"]  # nosec B101


def test_empty_language_tag():
    assert find_code_blocks("```\nplain\n```") == [CodeBlock("", "plain\n", (0, 13))]  # nosec B101


def test_only_one_terminator_after_tag_is_dropped():
    assert find_code_blocks("```py\n\n  x\n```")[0].code == "\n  x\n"  # nosec B101
    assert find_code_blocks("```py\r\nx\r\n```")[0].code == "x\r\n"  # nosec B101
    assert find_code_blocks("```py x```")[0].code == " x"  # nosec B101


def test_longer_fence_markers():
    blocks = find_code_blocks("````rust\nfn main() {}\n````")
    assert blocks[0].language == "rust"  # nosec B101
    assert blocks[0].code == "fn main() {}\n"  # nosec B101


def test_unterminated_fence_not_matched():
    assert find_code_blocks("```go\nfunc main() {") == []  # nosec B101
    assert find_code_blocks("```go\nx\n``") == []  # nosec B101


def test_pattern_is_non_greedy():
    m = CODE_FENCE_PATTERN.search("```a\n1\n``` mid ```b\n2\n```")
    assert m is not None and m.group(1) == "a"  # nosec B101


def test_extractor_block_split_across_fragments():
    ex = FenceExtractor()
    assert ex.feed("```go\n") == []  # nosec B101
    assert ex.feed('fmt.Println("hi")\n') == []  # nosec B101
    blocks = ex.feed("```\n")
    assert [(b.language, b.code) for b in blocks] == [("go", 'fmt.Println("hi")\n')]  # nosec B101
    assert ex.buffer == ""  # nosec B101


def test_extractor_fence_markers_split_mid_token():
    ex = FenceExtractor()
    for frag in ["`", "``py", "thon\nx = 1\n`", "`"]:
        assert ex.feed(frag) == []  # nosec B101
    blocks = ex.feed("`")
    assert [(b.language, b.code) for b in blocks] == [("python", "x = 1\n")]  # nosec B101


def test_extractor_two_blocks_in_one_fragment_form_one_batch():
    ex = FenceExtractor()
    blocks = ex.feed("```python\nprint(1)\n```\n```bash\nls\n```\n")
    assert [b.language for b in blocks] == ["python", "bash"]  # nosec B101


def test_unterminated_fence_stays_pending():
    ex = FenceExtractor()
    assert ex.feed("```go\nfunc main() {\n") == []  # nosec B101
    assert ex.pending  # nosec B101


def test_buffer_cleared_after_batch_drops_tail():
    ex = FenceExtractor()
    ex.feed("```a\n1\n```\nand then ```b\n2")
    assert ex.buffer == ""  # nosec B101
    # the half-open second fence was discarded along with the rest of the buffer
    assert ex.feed("\n```") == []  # nosec B101


def test_retain_tail_keeps_text_after_last_block():
    ex = FenceExtractor(retain_tail=True)
    first = ex.feed("```a\n1\n```\nand then ```b\n2")
    assert [b.language for b in first] == ["a"]  # nosec B101
    assert ex.buffer == "\nand then ```b\n2"  # nosec B101
    second = ex.feed("\n```")
    assert [(b.language, b.code) for b in second] == [("b", "2\n")]  # nosec B101


def test_rescan_of_cleared_buffer_yields_nothing():
    ex = FenceExtractor()
    assert len(ex.feed("```x\ny\n```")) == 1  # nosec B101
    assert ex.scan() == []  # nosec B101
    assert ex.feed("") == []  # nosec B101


def test_reset_discards_buffer():
    ex = FenceExtractor()
    ex.feed("```go\npartial")
    ex.reset()
    assert not ex.pending  # nosec B101
    assert ex.feed("\n```") == []  # nosec B101
