"""Column wrapping core and label models."""

from .models import LabelJob
from .width import rune_width, text_width
from .wrapper import LOOK_BACK_WINDOW, LineWrapper, WrapState, find_break, wrap, wrap_single_line

__all__ = [
    "LabelJob",
    "rune_width",
    "text_width",
    "LOOK_BACK_WINDOW",
    "LineWrapper",
    "WrapState",
    "find_break",
    "wrap",
    "wrap_single_line",
]
