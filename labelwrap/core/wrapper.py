"""Greedy column wrapping for receipt and label printers.

Text is folded one logical line at a time. Each line is filled with as many
code points as fit the column budget; on overflow the wrapper breaks at the
most recent whitespace, provided it lies within a short look-back window of
the end of the line. Otherwise the word is split and the line gets a hyphen.
"""

from __future__ import annotations

from enum import Enum
from typing import List, Sequence
import logging

from .width import rune_width

logger = logging.getLogger(__name__)

# How many trailing code points are searched for a word boundary on overflow
LOOK_BACK_WINDOW = 10

HYPHEN = "-"


class WrapState(Enum):
    SKIP_LEADING_SPACE = "skip_leading_space"
    NORMAL = "normal"


def find_break(buffer: Sequence[str], window: int = LOOK_BACK_WINDOW) -> int:
    """Return the index of the last whitespace within the final ``window``
    code points of ``buffer``, or -1 when there is none."""
    start = max(0, len(buffer) - window)
    for index in range(len(buffer) - 1, start - 1, -1):
        if buffer[index].isspace():
            return index
    return -1


def _joined(buffer: Sequence[str]) -> str:
    return "".join(buffer).strip()


class LineWrapper:
    """Wraps text to ``width`` printer columns.

    ``width <= 0`` disables wrapping. ``look_back`` bounds how far back from
    the end of an overflowing line a word boundary may be; beyond that the
    word is hyphenated instead.
    """

    def __init__(self, width: int, look_back: int = LOOK_BACK_WINDOW) -> None:
        self.width = width
        self.look_back = look_back

    def wrap(self, text: str) -> List[str]:
        """Wrap every line of ``text``, keeping blank lines as empty strings."""
        if self.width <= 0:
            return [text]

        lines: List[str] = []
        for raw_line in text.split("\n"):
            line = raw_line.strip()
            if not line:
                lines.append("")
                continue
            lines.extend(self.wrap_line(line))

        return lines or [""]

    def wrap_line(self, line: str) -> List[str]:
        """Fold a single line (no line breaks) into physical print lines."""
        if self.width <= 0:
            return [line]

        lines: List[str] = []
        buffer: List[str] = []
        current_width = 0
        state = WrapState.SKIP_LEADING_SPACE

        for ch in line:
            if state is WrapState.SKIP_LEADING_SPACE:
                if ch.isspace():
                    continue
                # First visible code point of a line is handled as NORMAL
                state = WrapState.NORMAL

            char_width = rune_width(ch)
            if not buffer or current_width + char_width <= self.width:
                buffer.append(ch)
                current_width += char_width
                continue

            if ch.isspace():
                lines.append(_joined(buffer))
                buffer = []
                current_width = 0
                state = WrapState.SKIP_LEADING_SPACE
                continue

            index = find_break(buffer, self.look_back)
            if index >= 0:
                lines.append(_joined(buffer[:index]))
                buffer = buffer[index + 1:]
            else:
                logger.debug("No break within %d code points, hyphenating at column %d",
                             self.look_back, current_width)
                lines.append(_joined(buffer[:-1]) + HYPHEN)
                buffer = buffer[-1:]
            buffer.append(ch)
            current_width = sum(rune_width(c) for c in buffer)

        if buffer:
            lines.append(_joined(buffer))

        return lines or [""]


def wrap_single_line(line: str, max_width: int, look_back: int = LOOK_BACK_WINDOW) -> List[str]:
    return LineWrapper(max_width, look_back=look_back).wrap_line(line)


def wrap(text: str, max_width: int, look_back: int = LOOK_BACK_WINDOW) -> List[str]:
    """Wrap ``text`` to ``max_width`` columns.

    Returns the printable lines in order; never an empty list. With
    ``max_width <= 0`` the text is returned untouched as a single line.
    """
    return LineWrapper(max_width, look_back=look_back).wrap(text)
