"""
Event expansion (Course records -> concrete calendar events).

Every class week and every exam becomes exactly ONE EventRecord.
No recurrence / RRULE logic.
"""

from __future__ import annotations

import logging
import uuid
from datetime import date, datetime, time, timedelta, timezone
from typing import Callable, List, Optional, Sequence

from ntu_ics.errors import DateRangeError, DateResolutionError
from ntu_ics.model import Class, Course, EventRecord, Exam, Weekday


logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]

EXAM_CATEGORY = "Exam"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _new_uid(course_code: str) -> str:
    return f"{course_code}-{uuid.uuid4()}"


def _to_utc(day: date, wall_clock: time, utc_offset: int) -> datetime:
    """
    Interpret date + time as local time at `utc_offset` minutes and convert to UTC.
    """
    local_tz = timezone(timedelta(minutes=utc_offset))
    try:
        return datetime.combine(day, wall_clock, tzinfo=local_tz).astimezone(timezone.utc)
    except OverflowError:
        reason = f"{wall_clock.isoformat('minutes')} at offset {utc_offset} min is not representable in UTC"
        raise DateRangeError(day, reason) from None


def resolve_first_occurrence(semester_start_date: date, weekday: Weekday) -> date:
    """
    Date of `weekday` in the ISO week that contains `semester_start_date`.
    """
    iso_year, iso_week, _ = semester_start_date.isocalendar()
    try:
        return date.fromisocalendar(iso_year, iso_week, int(weekday))
    except ValueError:
        raise DateResolutionError(iso_year, iso_week, int(weekday)) from None


def generate_class_events(
    course_code: str,
    course_title: str,
    cls: Class,
    semester_start_date: date,
    utc_offset: int,
    now: Clock = _utc_now,
) -> List[EventRecord]:
    """
    One event per week the class takes place in, in ascending week order.
    """
    first = resolve_first_occurrence(semester_start_date, cls.weekday)
    summary = f"{course_code} - {course_title} {cls.class_type}"

    events: List[EventRecord] = []
    for week in sorted(cls.weeks):
        try:
            day = first + timedelta(days=7 * (week - 1))
        except OverflowError:
            raise DateRangeError(first, f"week {week} lies beyond the last representable date") from None
        events.append(
            EventRecord(
                uid=_new_uid(course_code),
                created=now(),
                summary=summary,
                start=_to_utc(day, cls.period.start, utc_offset),
                end=_to_utc(day, cls.period.end, utc_offset),
                category=cls.class_type,
                location=cls.venue,
            )
        )
    return events


def generate_exam_event(
    course_code: str,
    course_title: str,
    exam: Exam,
    utc_offset: int,
    now: Clock = _utc_now,
) -> EventRecord:
    return EventRecord(
        uid=_new_uid(course_code),
        created=now(),
        summary=f"{course_code} - {course_title} Exam",
        start=_to_utc(exam.date, exam.period.start, utc_offset),
        end=_to_utc(exam.date, exam.period.end, utc_offset),
        category=EXAM_CATEGORY,
    )


def generate_events(
    courses: Sequence[Course],
    semester_start_date: date,
    utc_offset: int,
    now: Optional[Clock] = None,
) -> List[EventRecord]:
    """
    Expand parsed courses into calendar events.

    Order: course order, then class order and week order, then the course's exam.
    """
    clock = now or _utc_now

    events: List[EventRecord] = []
    for course in courses:
        for cls in course.classes:
            events.extend(
                generate_class_events(course.code, course.title, cls, semester_start_date, utc_offset, clock)
            )
        if course.exam is not None:
            events.append(generate_exam_event(course.code, course.title, course.exam, utc_offset, clock))

        logger.debug("Course %s: %d events so far", course.code, len(events))

    return events
