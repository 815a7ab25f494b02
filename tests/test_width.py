import pytest

from labelwrap.core.width import rune_width, text_width


@pytest.mark.parametrize("ch, expected", [
    ("\t", 4),
    ("\n", 0),
    ("\r", 0),
    ("\x00", 0),
    ("\x7f", 0),
    ("A", 1),
    (" ", 1),
    ("1", 1),
    (".", 1),
    ("é", 1),
    ("世", 2),
    ("界", 2),
    ("한", 2),
])
def test_rune_width(ch, expected):
    assert rune_width(ch) == expected


def test_fullwidth_forms_are_not_wide():
    # Only the East-Asian "Wide" class counts double
    assert rune_width("Ａ") == 1


def test_text_width_sums_code_points():
    assert text_width("") == 0
    assert text_width("Hello") == 5
    assert text_width("Hello世界") == 9
    assert text_width("a\tb\n") == 6


def test_rune_width_is_stable():
    assert [rune_width(c) for c in "A世\t\n 1."] == [rune_width(c) for c in "A世\t\n 1."]
