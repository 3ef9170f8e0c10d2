"""
Error types raised while turning a timetable into calendar events.

Every error carries the values needed to point at the offending row or field,
so the CLI can report it without re-parsing anything.
"""

from __future__ import annotations

from datetime import date
from typing import Any, Optional


class TimetableError(Exception):
    """
    Base class of all errors raised by the parser and the event expander.
    """


class TableStructureError(TimetableError):
    """
    The token stream does not split into full records.
    """

    def __init__(self, row: int, expected: int, actual: int) -> None:
        self.row = row
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Missing columns from table in row {row}: expected {expected}, found {actual}"
        )


class UnknownCourseError(TimetableError):
    """
    A class or exam row appeared before any course header.
    """

    def __init__(self, row: int, record: Any) -> None:
        self.row = row
        self.record = record
        super().__init__(f"Unknown course for record in row {row}: {record!r}")


class FieldFormatError(TimetableError):
    """
    A single token does not match its expected format or value range.
    """

    def __init__(self, field: str, token: str, reason: str, row: Optional[int] = None) -> None:
        self.field = field
        self.token = token
        self.reason = reason
        self.row = row
        where = f" in row {row}" if row is not None else ""
        super().__init__(f"Failed to parse {field} {token!r}{where}: {reason}")

    def at_row(self, row: int) -> "FieldFormatError":
        """
        Return a copy of this error attributed to a table row.
        """
        return FieldFormatError(self.field, self.token, self.reason, row=row)


class DateResolutionError(TimetableError):
    """
    An ISO (year, week, weekday) triple does not name a calendar date.
    """

    def __init__(self, year: int, week: int, weekday: int) -> None:
        self.year = year
        self.week = week
        self.weekday = weekday
        super().__init__(
            f"Failed to create date from ISO year: {year}, week: {week}, weekday: {weekday}"
        )


class DateRangeError(TimetableError):
    """
    An event date or instant falls outside the range `datetime` can represent.
    """

    def __init__(self, day: date, reason: str) -> None:
        self.day = day
        self.reason = reason
        super().__init__(f"Event date out of range near {day.isoformat()}: {reason}")
