"""Display width of code points on column-based printers."""

import unicodedata

TAB_WIDTH = 4


def rune_width(ch: str) -> int:
    """Return the number of printer columns a single code point occupies.

    Tabs take 4 columns, newlines and other control characters take none,
    East-Asian wide glyphs take 2 and everything else takes 1.
    """
    if ch == "\t":
        return TAB_WIDTH
    if ch == "\n":
        return 0
    if unicodedata.category(ch) == "Cc":
        return 0
    if unicodedata.east_asian_width(ch) == "W":
        return 2
    return 1


def text_width(text: str) -> int:
    return sum(rune_width(ch) for ch in text)
