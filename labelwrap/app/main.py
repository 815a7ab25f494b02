from typing import List, Optional
import argparse
import logging
import sys

from ..core.models import LabelJob
from ..printing import (
    close_printer,
    get_printer_columns,
    open_printer_from_target,
    preview_label,
    print_label,
    render_lines_to_console,
    select_printer_target,
    select_printer_target_noninteractive,
)
from ..version import get_version_info
from .config import load_config

logger = logging.getLogger(__name__)


def _prompt_input(prompt: str) -> str:
    try:
        return input(prompt)
    except EOFError:
        return ""


def _read_message(args: argparse.Namespace) -> Optional[str]:
    if args.text is not None:
        return args.text
    if args.file:
        try:
            with open(args.file, "r", encoding="utf-8") as fh:
                return fh.read()
        except OSError as e:
            raise SystemExit(f"Cannot read {args.file}: {e}")
    if not sys.stdin.isatty():
        return sys.stdin.read()
    text = _prompt_input("Enter label text (blank to quit): ")
    # Blank prompt input means the user backed out
    return text if text.strip() else None


def build_parser(cfg: dict) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="labelwrap",
        description="Wrap text to the columns of a thermal label printer and print it.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s "Fragile - this side up"           Print a label on the first printer found
  %(prog)s --preview --width 20 "Hello world"  Show the wrapped label in the terminal
  %(prog)s --lines -w 32 < notes.txt           Write wrapped lines to stdout
  %(prog)s --file note.txt --barcode 42        Print a file with barcode 42
        """,
    )
    parser.add_argument("text", nargs="?", help="Label text (default: --file, stdin, or prompt)")
    parser.add_argument("-f", "--file", metavar="PATH", help="Read label text from a file")
    parser.add_argument(
        "-w", "--width",
        type=int,
        default=cfg["LABELWRAP_WIDTH"],
        metavar="COLS",
        help=f"Columns per line; 0 disables wrapping (default: {cfg['LABELWRAP_WIDTH']})",
    )
    parser.add_argument(
        "--auto-width",
        action="store_true",
        help="Take the column count from the printer's capability profile",
    )
    parser.add_argument(
        "--look-back",
        type=int,
        default=cfg["LABELWRAP_LOOK_BACK"],
        metavar="N",
        help=f"Code points searched back for a word break (default: {cfg['LABELWRAP_LOOK_BACK']})",
    )
    parser.add_argument(
        "--barcode",
        type=int,
        default=cfg["LABELWRAP_BARCODE"],
        metavar="NUM",
        help=f"Number printed as a CODE39 barcode (default: {cfg['LABELWRAP_BARCODE']})",
    )
    parser.add_argument(
        "--header",
        default=cfg["LABELWRAP_HEADER"],
        help="Centered line printed above the message",
    )
    parser.add_argument("--preview", action="store_true", help="Render the label in the terminal instead of printing")
    parser.add_argument("--lines", action="store_true", help="Write the wrapped lines to stdout instead of printing")
    parser.add_argument("--interactive", action="store_true", help="Prompt for the printer to use")
    parser.add_argument("--version", action="store_true", help="Show version information and exit")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def run(argv: Optional[List[str]] = None) -> None:
    """Main entry point for labelwrap."""
    cfg = load_config()
    args = build_parser(cfg).parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.version:
        print(get_version_info())
        return

    message = _read_message(args)
    if message is None:
        return
    job = LabelJob.from_dict({"message": message, "barcode": args.barcode, "header": args.header})

    try:
        if args.lines or args.preview:
            lines = preview_label(job, width=args.width, look_back=args.look_back)
            if args.lines:
                for line in lines:
                    print(line)
            else:
                render_lines_to_console(lines, args.width, title=job.header or "Label Preview")
            return

        target = select_printer_target() if args.interactive else select_printer_target_noninteractive()
        logger.debug(f"Printer target: {target}")
        print("Printing...")
        printer = open_printer_from_target(target)
        try:
            width = args.width
            if args.auto_width:
                # Labels print font B at double width
                width = get_printer_columns(printer, font="b", default=width * 2) // 2
            lines = print_label(printer, job, width=width, look_back=args.look_back)
        finally:
            close_printer(printer)
        print(f"Label printed successfully! ({len(lines)} lines)")
    except (ValueError, RuntimeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        raise SystemExit(1)


if __name__ == "__main__":
    run()
