"""Forward scanner that locates fenced code blocks in markdown text.

The scanner moves through four states::

    outside -> info_string -> body -> closed -> outside

A fence opens on a line that starts with three backticks followed directly
by an optional word-character language tag and a newline. The body is
non-greedy: it ends at the first later run of three backticks, wherever it
sits, and scanning resumes right after those backticks. A fence that never
closes produces no block.
"""

from __future__ import annotations

import string
from enum import Enum

from markdoc.blocks.models import CodeBlock

FENCE = "```"

_WORD_CHARS = frozenset(string.ascii_letters + string.digits + "_")


class _State(str, Enum):
    outside = "outside"
    info_string = "info_string"
    body = "body"
    closed = "closed"


def _read_info_string(text: str, begin: int, line_end: int) -> str | None:
    """Return the language tag of an opening fence line, or None if invalid."""
    if line_end == -1:
        return None
    tag = text[begin:line_end]
    if tag.endswith("\r"):
        tag = tag[:-1]
    if all(ch in _WORD_CHARS for ch in tag):
        return tag
    return None


def _at_line_start(text: str, pos: int) -> bool:
    return pos == 0 or text[pos - 1] == "\n"


def extract_code_blocks(markdown: str) -> list[CodeBlock]:
    """Extract every terminated fenced code block from *markdown*, in source order."""
    blocks: list[CodeBlock] = []
    state = _State.outside
    start = body_start = 0
    language = ""
    pos = 0
    length = len(markdown)

    while pos < length:
        if state is _State.closed:
            state = _State.outside

        if state is _State.outside:
            line_end = markdown.find("\n", pos)
            next_line = length if line_end == -1 else line_end + 1
            if not (_at_line_start(markdown, pos) and markdown.startswith(FENCE, pos)):
                pos = next_line
                continue
            state = _State.info_string
            start = pos

        if state is _State.info_string:
            tag = _read_info_string(markdown, pos + len(FENCE), line_end)
            if tag is None:
                state = _State.outside
                pos = next_line
                continue
            language = tag.strip().lower()
            body_start = pos = next_line
            state = _State.body

        if state is _State.body:
            close = markdown.find(FENCE, body_start)
            if close == -1:
                break
            end = close + len(FENCE)
            blocks.append(
                CodeBlock(
                    language=language,
                    code=markdown[body_start:close].strip(),
                    start_index=start,
                    end_index=end,
                    raw_match=markdown[start:end],
                )
            )
            state = _State.closed
            pos = end

    return blocks


def line_of(source: str, index: int) -> int:
    """Convert a character offset into a 1-based line number."""
    return source.count("\n", 0, index) + 1
