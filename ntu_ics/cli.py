"""
CLI (Command Line Interface).

Turns an exported timetable file into an .ics calendar:

    ntu-ics timetable.txt 2024-01-15
    ntu-ics timetable.txt 2024-01-15 --offset 480 --recess-week 8 -o out/cal.ics

Note:
- All parsing and expansion lives in parse.py / expand.py; this module only
  validates arguments, sets up logging and reports errors
"""

from __future__ import annotations

import argparse
import logging
from datetime import date, datetime
from pathlib import Path
from typing import List

from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from ntu_ics.errors import TimetableError
from ntu_ics.expand import generate_events
from ntu_ics.export_ics import export_events_to_ics
from ntu_ics.model import Course, EventRecord
from ntu_ics.parse import parse_from_table


logger = logging.getLogger(__name__)

console = Console()
err_console = Console(stderr=True)

DEFAULT_OFFSET_MINUTES = 8 * 60
DEFAULT_RECESS_WEEK = 8
DEFAULT_OUT = "./cal.ics"


# ---------------------------------------------------------------------------
# Argument types
# ---------------------------------------------------------------------------


def _valid_date(text: str) -> date:
    try:
        return datetime.strptime(text, "%Y-%m-%d").date()
    except ValueError:
        raise argparse.ArgumentTypeError(f"{text} is not a valid date with format: Y-m-d") from None


def _valid_offset(text: str) -> int:
    try:
        minutes = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"{text} is not a whole number of minutes") from None
    # Same bound as datetime.timezone
    if not -24 * 60 < minutes < 24 * 60:
        raise argparse.ArgumentTypeError(f"offset {minutes} must lie strictly between -1440 and 1440 minutes")
    return minutes


def _positive_int(text: str) -> int:
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"{text} is not an integer") from None
    if value < 1:
        raise argparse.ArgumentTypeError(f"{value} must be a positive integer")
    return value


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _print_summary(courses: List[Course], events: List[EventRecord], out_path: str) -> None:
    """
    Print one table row per course plus the output location.
    """
    table = Table(title="Parsed courses", box=box.SIMPLE)
    table.add_column("Code")
    table.add_column("Title")
    table.add_column("Classes", justify="right")
    table.add_column("Events", justify="right")
    table.add_column("Exam")

    for course in courses:
        n_events = sum(len(c.weeks) for c in course.classes) + (1 if course.exam else 0)
        exam = course.exam.date.isoformat() if course.exam else "-"
        table.add_row(course.code, course.title, str(len(course.classes)), str(n_events), exam)

    console.print(table)
    console.print(f"Exported {len(events)} events to: {out_path}")


# ---------------------------------------------------------------------------
# Command
# ---------------------------------------------------------------------------


def run(args: argparse.Namespace) -> int:
    """
    Read, parse, expand and export. Returns the process exit code.
    """
    path = Path(args.file)
    try:
        table = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        err_console.print(f"[red]Failed to read timetable file {path}:[/red] {exc}")
        return 1

    logger.debug("Read %d characters from %s", len(table), path)

    try:
        courses = parse_from_table(table, args.recess_week)
        events = generate_events(courses, args.semester_start_date, args.offset)
    except TimetableError as exc:
        err_console.print(f"[red]{exc}[/red]")
        logger.debug("Conversion failed", exc_info=True)
        return 1

    if not events:
        logger.warning("No classes or exams found in %s", path)

    try:
        export_events_to_ics(events, args.out)
    except OSError as exc:
        err_console.print(f"[red]Failed to write calendar {args.out}:[/red] {exc}")
        return 1

    _print_summary(courses, events, args.out)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="ntu-ics", description="Convert an exported class timetable into an .ics calendar")
    parser.add_argument("file", type=str, help="Input timetable file (tab separated)")
    parser.add_argument(
        "semester_start_date",
        type=_valid_date,
        help="Any date in the first teaching week (YYYY-MM-DD)",
    )
    parser.add_argument(
        "--offset",
        type=_valid_offset,
        default=DEFAULT_OFFSET_MINUTES,
        help=f"UTC offset of the timetable in minutes (default: {DEFAULT_OFFSET_MINUTES})",
    )
    parser.add_argument(
        "--recess-week",
        type=_positive_int,
        default=DEFAULT_RECESS_WEEK,
        help=f"Calendar week of the recess week (default: {DEFAULT_RECESS_WEEK})",
    )
    parser.add_argument("-o", "--out", type=str, default=DEFAULT_OUT, help=f"Output .ics path (default: {DEFAULT_OUT})")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def main(argv: list[str] | None = None) -> None:
    """
    CLI entry point. Parses args, runs the conversion
    and exits via SystemExit with a return code.
    """
    args = build_parser().parse_args(argv)
    _setup_logging(args.verbose)
    raise SystemExit(run(args))
