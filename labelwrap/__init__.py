"""labelwrap - Wrap free text to the columns of a thermal label printer."""

__version__ = "0.6.0"
__author__ = "labelwrap contributors"

from .core.models import LabelJob
from .core.width import rune_width, text_width
from .core.wrapper import LOOK_BACK_WINDOW, LineWrapper, wrap, wrap_single_line

__all__ = ["LabelJob", "rune_width", "text_width", "LOOK_BACK_WINDOW", "LineWrapper", "wrap", "wrap_single_line"]
