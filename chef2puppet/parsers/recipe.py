"""Chef recipe line scanning."""

import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from chef2puppet.core.constants import (
    REGEX_BLANK_LINE,
    REGEX_BLOCK_TERMINATOR,
    REGEX_COMMENT_LINE,
)

_BLANK_RE = re.compile(REGEX_BLANK_LINE)
_COMMENT_RE = re.compile(REGEX_COMMENT_LINE)
_TERMINATOR_RE = re.compile(REGEX_BLOCK_TERMINATOR)


@dataclass(frozen=True)
class CommentLine:
    """A full-line comment, passed through to the manifest."""

    text: str
    line: int


@dataclass(frozen=True)
class BlockText:
    """Statement lines accumulated up to a block terminator."""

    text: str
    line_numbers: tuple[int, ...]
    terminated: bool = True


RecipeEvent = CommentLine | BlockText


def scan_recipe(lines: Iterable[str]) -> Iterator[RecipeEvent]:
    """
    Group recipe lines into comments and statement blocks.

    Blank lines are skipped. Lines starting with ``#`` are yielded as
    comments as soon as they are seen, even in the middle of a block. All
    other lines accumulate until a line starting with ``end`` closes the
    block. Lines left over at the end are yielded as an unterminated block.

    Args:
        lines: Recipe file lines, with or without line endings.

    Yields:
        CommentLine and BlockText events in file order.

    """
    buffer: list[str] = []
    numbers: list[int] = []

    for number, raw_line in enumerate(lines, 1):
        line = raw_line.rstrip("\r\n")
        if _BLANK_RE.match(line):
            continue
        if _COMMENT_RE.match(line):
            yield CommentLine(text=line, line=number)
            continue

        buffer.append(line + "\n")
        numbers.append(number)

        if _TERMINATOR_RE.match(line):
            yield BlockText(text="".join(buffer), line_numbers=tuple(numbers))
            buffer = []
            numbers = []

    if buffer:
        yield BlockText(
            text="".join(buffer), line_numbers=tuple(numbers), terminated=False
        )
