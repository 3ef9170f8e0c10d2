"""
Central data model definitions used across the project.

This module defines the canonical structure of the parsed timetable
(Course, Class, Exam, Period) and of the calendar events generated from it,
so that:
- the table parser, the event expander and the ICS encoder share the same field names
- parsed records stay immutable once the parser hands them out
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field, replace
from datetime import date, datetime, time, timezone
from typing import Optional, Tuple


class Weekday(enum.IntEnum):
    """
    Day of the week, numbered like ISO 8601 (Monday = 1 ... Sunday = 7).
    """

    MON = 1
    TUE = 2
    WED = 3
    THU = 4
    FRI = 5
    SAT = 6
    SUN = 7


@dataclass(frozen=True)
class Period:
    """
    Start/end time-of-day of a class or exam slot.
    """

    start: time
    end: time


@dataclass(frozen=True)
class Class:
    """
    One weekly recurring class as listed in one timetable row.

    `weeks` holds calendar week numbers (sorted, recess week already skipped).
    """

    weekday: Weekday
    period: Period
    venue: str
    group: str
    weeks: Tuple[int, ...]
    class_type: str


@dataclass(frozen=True)
class Exam:
    date: date
    period: Period


# Header columns that must all be filled for a row to start a new course
HEADER_FIELDS = ("code", "title", "au", "course_type", "index", "status")


@dataclass(frozen=True)
class Course:
    """
    Represents one course of the timetable with its classes and optional exam.
    """

    code: str
    title: str
    au: str
    course_type: str
    index: str
    status: str
    classes: Tuple[Class, ...] = ()
    exam: Optional[Exam] = None

    def __post_init__(self) -> None:
        missing = [name for name in HEADER_FIELDS if not getattr(self, name)]
        if missing:
            raise ValueError(f"Course header fields must not be empty: {', '.join(missing)}")


@dataclass(frozen=True)
class CourseBuilder:
    """
    A course still being assembled by the table parser.

    Every `with_*` call returns a new builder; the builder itself is never mutated.
    """

    course: Course

    def with_class(self, cls: Class) -> "CourseBuilder":
        return CourseBuilder(replace(self.course, classes=self.course.classes + (cls,)))

    def with_exam(self, exam: Exam) -> "CourseBuilder":
        return CourseBuilder(replace(self.course, exam=exam))

    def build(self) -> Course:
        return self.course


@dataclass(frozen=True)
class EventRecord:
    """
    One concrete calendar event (single date & time slot), ready for encoding.

    All instants are timezone-aware and in UTC.
    """

    uid: str
    created: datetime
    summary: str
    start: datetime
    end: datetime
    category: str
    location: Optional[str] = field(default=None)


def to_utc_stamp(dt: datetime) -> str:
    """
    Format an aware datetime as the basic UTC form 'YYYYMMDDTHHMMSSZ'.
    """
    return dt.astimezone(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
