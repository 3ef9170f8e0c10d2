"""
Field parsers (single timetable cell -> typed value).

Each parser takes one already-trimmed token and either returns the parsed
value or raises FieldFormatError naming the field, the token and the reason.
The grammars live in the module-level constants below.
"""

from __future__ import annotations

import logging
import re
from datetime import date, time
from typing import Dict, List

from ntu_ics.errors import FieldFormatError
from ntu_ics.model import Exam, Period, Weekday


logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Grammars
# ---------------------------------------------------------------------------

WEEKDAY_TOKENS: Dict[str, Weekday] = {
    "Sun": Weekday.SUN,
    "Mon": Weekday.MON,
    "Tue": Weekday.TUE,
    "Wed": Weekday.WED,
    "Thu": Weekday.THU,
    "Fri": Weekday.FRI,
    "Sat": Weekday.SAT,
}

# e.g. "0830to1020"
PERIOD_RE = re.compile(r"(?P<sh>\d{2})(?P<sm>\d{2})to(?P<eh>\d{2})(?P<em>\d{2})")

# e.g. "Teaching Wk1-6,8,10-13"
WEEKS_MARKER_RE = re.compile(r"Teaching Wk(?P<weeks>.*)")
WEEK_RANGE_RE = re.compile(r"(?P<start>\d+)-(?P<end>\d+)")
WEEK_SINGLE_RE = re.compile(r"\d+")

# Teaching weeks as printed, before the recess shift
MAX_WEEK = 53

# e.g. "01-Dec-2023 0900to1100"
EXAM_RE = re.compile(r"(?P<day>[^-\s]*)-(?P<month>[^-\s]*)-(?P<year>[^-\s]*)\s+(?P<time>\S+)")
EXAM_DAY_RE = re.compile(r"\d{2}")
EXAM_MONTH_RE = re.compile(r"[A-Z][a-z]{2}")
EXAM_YEAR_RE = re.compile(r"\d{4}")

MONTHS: Dict[str, int] = {
    "Jan": 1,
    "Feb": 2,
    "Mar": 3,
    "Apr": 4,
    "May": 5,
    "Jun": 6,
    "Jul": 7,
    "Aug": 8,
    "Sep": 9,
    "Oct": 10,
    "Nov": 11,
    "Dec": 12,
}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _hhmm(token: str, hour: str, minute: str) -> time:
    """
    Build a time-of-day from two-digit hour/minute strings.
    """
    h = int(hour)
    m = int(minute)
    if not (0 <= h <= 23 and 0 <= m <= 59):
        raise FieldFormatError("period", token, f"invalid time of day {hour}{minute}")
    return time(h, m)


# ---------------------------------------------------------------------------
# Parsers
# ---------------------------------------------------------------------------


def parse_weekday(token: str) -> Weekday:
    try:
        return WEEKDAY_TOKENS[token]
    except KeyError:
        accepted = ", ".join(WEEKDAY_TOKENS)
        raise FieldFormatError("weekday", token, f"expected one of {accepted}") from None


def parse_period(token: str) -> Period:
    """
    Parse 'HHMMtoHHMM' into a Period.

    The end is not required to come after the start; such periods are only
    logged.
    """
    match = PERIOD_RE.fullmatch(token)
    if not match:
        raise FieldFormatError("period", token, "expected HHMMtoHHMM")

    start = _hhmm(token, match["sh"], match["sm"])
    end = _hhmm(token, match["eh"], match["em"])

    if end <= start:
        logger.warning("Period %r ends before it starts", token)

    return Period(start=start, end=end)


def parse_weeks(token: str, recess_week: int) -> List[int]:
    """
    Parse a 'Teaching Wk...' list into calendar week numbers.

    Source week numbers skip the recess week, so every week at or after
    `recess_week` is moved one week later.
    """
    marker = WEEKS_MARKER_RE.search(token)
    if not marker:
        raise FieldFormatError("weeks", token, "missing 'Teaching Wk' marker")

    weeks: List[int] = []
    for entry in marker["weeks"].split(","):
        entry = entry.strip()

        # Inclusive range "a-b"
        range_match = WEEK_RANGE_RE.fullmatch(entry)
        if range_match:
            start = int(range_match["start"])
            end = int(range_match["end"])
            if start > end:
                raise FieldFormatError("weeks", token, f"descending week range {entry!r}")
            if end > MAX_WEEK:
                raise FieldFormatError("weeks", token, f"week {end} is beyond week {MAX_WEEK}")
            weeks.extend(range(start, end + 1))
            continue

        # Single week
        if WEEK_SINGLE_RE.fullmatch(entry):
            week = int(entry)
            if week > MAX_WEEK:
                raise FieldFormatError("weeks", token, f"week {week} is beyond week {MAX_WEEK}")
            weeks.append(week)
            continue

        raise FieldFormatError("weeks", token, f"invalid week entry {entry!r}")

    if 0 in weeks:
        raise FieldFormatError("weeks", token, "week numbers start at 1")

    shifted = {w if w < recess_week else w + 1 for w in weeks}
    return sorted(shifted)


def parse_exam(token: str) -> Exam:
    """
    Parse 'DD-Mon-YYYY HHMMtoHHMM' into an Exam.
    """
    match = EXAM_RE.fullmatch(token)
    if not match:
        raise FieldFormatError("exam", token, "expected DD-Mon-YYYY HHMMtoHHMM")

    day = match["day"]
    if not EXAM_DAY_RE.fullmatch(day):
        raise FieldFormatError("exam", token, f"failed to parse day {day!r}")

    month = match["month"]
    if not EXAM_MONTH_RE.fullmatch(month) or month not in MONTHS:
        raise FieldFormatError("exam", token, f"failed to parse month {month!r}")

    year = match["year"]
    if not EXAM_YEAR_RE.fullmatch(year):
        raise FieldFormatError("exam", token, f"failed to parse year {year!r}")

    try:
        exam_date = date(int(year), MONTHS[month], int(day))
    except ValueError as exc:
        raise FieldFormatError("exam", token, f"invalid date: {exc}") from None

    try:
        period = parse_period(match["time"])
    except FieldFormatError as exc:
        raise FieldFormatError("exam", token, f"failed to parse time: {exc.reason}") from None

    return Exam(date=exam_date, period=period)
