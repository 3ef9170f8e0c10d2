"""
Tests for expanding parsed courses into concrete calendar events.

Rules checked here:
- one event per class week, one per exam, exam last within its course
- wall-clock times are interpreted at the given UTC offset and stored in UTC
- the first week is the ISO week containing the semester start date
"""

import unittest
from datetime import date, datetime, time, timedelta, timezone

from ntu_ics.errors import DateRangeError, DateResolutionError
from ntu_ics.expand import generate_events, resolve_first_occurrence
from ntu_ics.model import Class, Course, Exam, Period, Weekday


FIXED_NOW = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


def _clock() -> datetime:
    return FIXED_NOW


def _class(weekday: Weekday = Weekday.MON, weeks=(1,), class_type: str = "LEC") -> Class:
    return Class(
        weekday=weekday,
        period=Period(time(9, 0), time(10, 30)),
        venue="LT1A",
        group="LE",
        weeks=tuple(weeks),
        class_type=class_type,
    )


def _course(code: str = "SC1005", classes=(), exam=None) -> Course:
    return Course(
        code=code,
        title="DIGITAL LOGIC",
        au="3",
        course_type="Core",
        index="10234",
        status="Registered",
        classes=tuple(classes),
        exam=exam,
    )


class TestResolveFirstOccurrence(unittest.TestCase):
    def test_same_iso_week(self) -> None:
        # 2024-01-17 is a Wednesday
        start = date(2024, 1, 17)
        self.assertEqual(resolve_first_occurrence(start, Weekday.MON), date(2024, 1, 15))
        self.assertEqual(resolve_first_occurrence(start, Weekday.SUN), date(2024, 1, 21))

    def test_iso_year_differs_from_calendar_year(self) -> None:
        # 2024-12-30 belongs to ISO week 1 of 2025
        self.assertEqual(resolve_first_occurrence(date(2024, 12, 30), Weekday.FRI), date(2025, 1, 3))

    def test_unresolvable_date(self) -> None:
        # The Sunday of the last ISO week of 9999 lies beyond date.max
        with self.assertRaises(DateResolutionError) as ctx:
            resolve_first_occurrence(date(9999, 12, 31), Weekday.SUN)
        self.assertEqual(ctx.exception.year, 9999)
        self.assertEqual(ctx.exception.weekday, 7)


class TestGenerateEvents(unittest.TestCase):
    def test_weeks_are_fourteen_days_apart(self) -> None:
        course = _course(classes=[_class(weeks=(1, 3))])
        events = generate_events([course], date(2024, 1, 15), 0, now=_clock)

        self.assertEqual(len(events), 2)
        self.assertEqual(events[1].start - events[0].start, timedelta(days=14))
        self.assertEqual(events[0].start, datetime(2024, 1, 15, 9, 0, tzinfo=timezone.utc))
        self.assertEqual(events[0].end, datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc))

    def test_offset_converted_to_utc(self) -> None:
        course = _course(classes=[_class()])

        plus_eight = generate_events([course], date(2024, 1, 15), 480, now=_clock)
        self.assertEqual(plus_eight[0].start, datetime(2024, 1, 15, 1, 0, tzinfo=timezone.utc))

        minus_five = generate_events([course], date(2024, 1, 15), -300, now=_clock)
        self.assertEqual(minus_five[0].start, datetime(2024, 1, 15, 14, 0, tzinfo=timezone.utc))

    def test_class_event_fields(self) -> None:
        course = _course(classes=[_class(class_type="TUT")])
        ev = generate_events([course], date(2024, 1, 15), 0, now=_clock)[0]

        self.assertEqual(ev.summary, "SC1005 - DIGITAL LOGIC TUT")
        self.assertEqual(ev.category, "TUT")
        self.assertEqual(ev.location, "LT1A")
        self.assertEqual(ev.created, FIXED_NOW)
        self.assertTrue(ev.uid.startswith("SC1005-"))

    def test_exam_event_fields(self) -> None:
        exam = Exam(date(2024, 4, 30), Period(time(13, 0), time(15, 0)))
        course = _course(exam=exam)
        events = generate_events([course], date(2024, 1, 15), 480, now=_clock)

        self.assertEqual(len(events), 1)
        ev = events[0]
        self.assertEqual(ev.summary, "SC1005 - DIGITAL LOGIC Exam")
        self.assertEqual(ev.category, "Exam")
        self.assertIsNone(ev.location)
        self.assertEqual(ev.start, datetime(2024, 4, 30, 5, 0, tzinfo=timezone.utc))

    def test_order_and_count(self) -> None:
        exam = Exam(date(2024, 4, 30), Period(time(13, 0), time(15, 0)))
        first = _course(
            "SC1005",
            classes=[_class(Weekday.WED, (2, 1), "LEC"), _class(Weekday.MON, (1,), "TUT")],
            exam=exam,
        )
        second = _course("SC1007", classes=[_class(weeks=(1, 2, 3))])

        events = generate_events([first, second], date(2024, 1, 15), 0, now=_clock)

        # 3 + 3 class weeks, 1 exam
        self.assertEqual(len(events), 7)
        self.assertEqual(
            [ev.category for ev in events],
            ["LEC", "LEC", "TUT", "Exam", "LEC", "LEC", "LEC"],
        )
        self.assertLess(events[0].start, events[1].start)
        self.assertEqual(events[3].summary, "SC1005 - DIGITAL LOGIC Exam")

    def test_week_past_last_date(self) -> None:
        course = _course(classes=[_class(weeks=(53,))])
        with self.assertRaises(DateRangeError):
            generate_events([course], date(9999, 6, 1), 0, now=_clock)

    def test_exam_before_first_utc_instant(self) -> None:
        # 0001-01-01 00:00 at UTC+8 lies before datetime.min in UTC
        exam = Exam(date(1, 1, 1), Period(time(0, 0), time(1, 0)))
        with self.assertRaises(DateRangeError) as ctx:
            generate_events([_course(exam=exam)], date(2024, 1, 15), 480, now=_clock)
        self.assertEqual(ctx.exception.day, date(1, 1, 1))

    def test_uids_are_unique(self) -> None:
        course = _course(classes=[_class(weeks=range(1, 14))])
        events = generate_events([course], date(2024, 1, 15), 0)
        self.assertEqual(len({ev.uid for ev in events}), len(events))

    def test_no_courses(self) -> None:
        self.assertEqual(generate_events([], date(2024, 1, 15), 0), [])


if __name__ == "__main__":
    unittest.main()
