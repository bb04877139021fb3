"""Incremental extraction of Markdown fenced code blocks.

Two pieces:

``find_code_blocks(text)``
    The matcher: text in, ordered list of :class:`CodeBlock` out. It is the
    only place that knows the fence syntax, so it can be replaced by a
    hand-written scanner without touching the coordinator.

``FenceExtractor``
    Owns one stream's accumulation buffer. Each fragment is appended and the
    whole buffer is rescanned, so fence markers or language tags split across
    fragments need no cross-call state. When a scan finds closed fences they
    are returned as one batch and the buffer is cleared; otherwise the buffer
    is left as is. An unterminated fence is never emitted.

Content boundary: the language tag is read up to the first whitespace and
the code starts right after it, minus exactly one line terminator directly
following the tag. Everything else up to the closing backticks is kept
verbatim, including the newline before the closing fence::

    "```go\\nfmt.Println(1)\\n```"  ->  CodeBlock("go", "fmt.Println(1)\\n")
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Tuple

CODE_FENCE_PATTERN = re.compile(r"`{3,}([^\s`]*)(.*?)`{3,}", re.DOTALL)


@dataclass(frozen=True)
class CodeBlock:
    """A closed fenced region.

    Attributes:
        language: Tag following the opening backticks; may be empty.
        code: Fence body (see module docstring for the exact boundary).
        span: ``(start, end)`` offsets of the whole fence in the scanned text.
    """

    language: str
    code: str
    span: Tuple[int, int] = (0, 0)


def _strip_tag_terminator(body: str) -> str:
    if body.startswith("\r\n"):
        return body[2:]
    if body.startswith("\n"):
        return body[1:]
    return body


def find_code_blocks(text: str) -> List[CodeBlock]:
    """Return all closed, non-overlapping fences in ``text``, left to right."""
    return [
        CodeBlock(
            language=m.group(1),
            code=_strip_tag_terminator(m.group(2)),
            span=m.span(),
        )
        for m in CODE_FENCE_PATTERN.finditer(text)
    ]


class FenceExtractor:
    """Accumulation buffer plus rescan policy for one stream.

    Parameters:
        retain_tail: When true, text after the last closed fence is kept for
            the next scan instead of being cleared with the rest of the
            buffer. Off by default, so a successful batch always leaves the
            buffer empty.
    """

    def __init__(self, *, retain_tail: bool = False) -> None:
        self._parts: List[str] = []
        self._retain_tail = retain_tail

    @property
    def buffer(self) -> str:
        """Fragment text accumulated since the last extracted batch."""
        if len(self._parts) > 1:
            self._parts = ["".join(self._parts)]
        return self._parts[0] if self._parts else ""

    @property
    def pending(self) -> bool:
        """True when the buffer holds text not yet emitted in a block."""
        return bool(self.buffer)

    def feed(self, fragment: str) -> List[CodeBlock]:
        """Append ``fragment`` and return the batch of newly closed blocks."""
        if fragment:
            self._parts.append(fragment)
        return self.scan()

    def scan(self) -> List[CodeBlock]:
        """Rescan the current buffer without appending anything."""
        text = self.buffer
        if not text:
            return []
        blocks = find_code_blocks(text)
        if blocks:
            tail = text[blocks[-1].span[1]:] if self._retain_tail else ""
            self._parts = [tail] if tail else []
        return blocks

    def reset(self) -> None:
        self._parts = []


__all__ = ["CODE_FENCE_PATTERN", "CodeBlock", "FenceExtractor", "find_code_blocks"]
