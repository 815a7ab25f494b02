"""Printer utilities and label output."""

from .printer_utils import (
    select_printer_target,
    select_printer_target_noninteractive,
    open_printer_from_target,
    close_printer,
    get_printer_columns,
)
from .label_printer import DEFAULT_LABEL_COLUMNS, print_label, print_message_lines, preview_label
from .console_preview import render_lines_to_console

__all__ = [
    "select_printer_target",
    "select_printer_target_noninteractive",
    "open_printer_from_target",
    "close_printer",
    "get_printer_columns",
    "DEFAULT_LABEL_COLUMNS",
    "print_label",
    "print_message_lines",
    "preview_label",
    "render_lines_to_console",
]
