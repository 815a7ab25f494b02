from __future__ import annotations

from typing import Iterable, Optional

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from ..core.width import text_width


def render_lines_to_console(lines: Iterable[str], width: int, title: str = "Label Preview",
                            console: Optional[Console] = None) -> None:
    """Show wrapped lines inside a panel sized to the printer's columns.

    Lines wider than ``width`` are highlighted so overflow is visible.
    """
    console = console or Console()
    body = Text()
    for idx, line in enumerate(lines):
        if idx:
            body.append("\n")
        used = text_width(line)
        if width > 0 and used > width:
            body.append(line, style="bold red")
        else:
            body.append(line)
            if width > 0:
                body.append(" " * (width - used))
    panel = Panel(body, title=Text(title), subtitle=f"{width} cols" if width > 0 else "no wrap", expand=False)
    console.print(panel)
