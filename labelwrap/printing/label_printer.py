from __future__ import annotations

from typing import List, Optional, Union
import logging

from ..core.models import DEFAULT_BARCODE, DEFAULT_LABEL_COLUMNS, LabelJob
from ..core.wrapper import LOOK_BACK_WINDOW, LineWrapper
from .printer_utils import _reset_text_style, _try_smooth

logger = logging.getLogger(__name__)


def print_message_lines(printer, message: str, width: int = DEFAULT_LABEL_COLUMNS,
                        look_back: int = LOOK_BACK_WINDOW) -> List[str]:
    """Wrap ``message`` and send it to the printer one line at a time.

    Blank lines in the message are printed as empty lines. Returns the lines
    that were sent; nothing is printed for an empty message.
    """
    message = (message or "").strip()
    if not message:
        return []

    lines = LineWrapper(width, look_back=look_back).wrap(message)
    for line in lines:
        printer.text(line + "\n")
    return lines


def print_label(printer, job: Union[LabelJob, str], barcode: int = DEFAULT_BARCODE,
                width: int = DEFAULT_LABEL_COLUMNS, header: Optional[str] = None,
                look_back: int = LOOK_BACK_WINDOW) -> List[str]:
    """Print a single label: optional header, the wrapped message and a
    CODE39 barcode of the job number, then cut.

    ``job`` may be a LabelJob or a bare message, in which case ``barcode``
    and ``header`` apply.
    """
    if printer is None:
        raise RuntimeError("printer not initialized")

    if not isinstance(job, LabelJob):
        job = LabelJob(message=str(job or ""), barcode=barcode, header=header)

    message = job.message.strip()
    if not message:
        raise ValueError("message cannot be empty")

    printer.hw("INIT")
    _try_smooth(printer, True)

    if job.header:
        printer.set(align="center", normal_textsize=True)
        printer.text(job.header.strip() + "\n")

    printer.set(align="left", font="b", custom_size=True, width=2, height=2)
    lines = print_message_lines(printer, message, width=width, look_back=look_back)

    printer.set(align="center")
    printer.barcode(str(job.barcode), "CODE39")
    _reset_text_style(printer)

    printer.cut()
    logger.info(f"Printed label #{job.barcode} ({len(lines)} lines)")
    return lines


def preview_label(job: LabelJob, width: int = DEFAULT_LABEL_COLUMNS,
                  look_back: int = LOOK_BACK_WINDOW) -> List[str]:
    """Lines ``print_label`` would send for ``job``, without a printer."""
    message = job.message.strip()
    if not message:
        raise ValueError("message cannot be empty")
    return LineWrapper(width, look_back=look_back).wrap(message)
