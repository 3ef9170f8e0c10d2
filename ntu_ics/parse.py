"""
Parsing (timetable text -> Course records).

- Removes all line breaks (cells may wrap over several physical lines)
- Splits the rest on TAB and frames the tokens into records of NUM_COLUMNS
- Folds the records into courses, each with its classes and optional exam

Important rules:
- A row with a complete course header starts a new course
- A row with an incomplete header continues the current course
- Any error aborts the whole parse; no partial result is returned
"""

from __future__ import annotations

import logging
from typing import List, NamedTuple, Optional, Sequence, Tuple

from ntu_ics.errors import FieldFormatError, TableStructureError, UnknownCourseError
from ntu_ics.fields import parse_exam, parse_period, parse_weekday, parse_weeks
from ntu_ics.model import Class, Course, CourseBuilder


logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Table layout
# ---------------------------------------------------------------------------

NUM_COLUMNS = 16

COL_CODE = 0
COL_TITLE = 1
COL_AU = 2
COL_COURSE_TYPE = 3
COL_INDEX = 6
COL_STATUS = 7
COL_CLASS_TYPE = 9
COL_GROUP = 10
COL_WEEKDAY = 11
COL_PERIOD = 12
COL_VENUE = 13
COL_WEEKS = 14
COL_EXAM = 15

HEADER_COLUMNS = (COL_CODE, COL_TITLE, COL_AU, COL_COURSE_TYPE, COL_INDEX, COL_STATUS)

NO_EXAM = "Not Applicable"


# ---------------------------------------------------------------------------
# Record framing
# ---------------------------------------------------------------------------


def split_records(text: str) -> List[List[str]]:
    """
    Frame the raw table text into records of exactly NUM_COLUMNS trimmed tokens.

    Raises TableStructureError if the last record is incomplete.
    """
    # Line breaks carry no meaning, only TAB separates cells
    flat = text.replace("\r", "").replace("\n", "")
    if "\t" not in flat and not flat.strip():
        return []

    tokens = [t.strip() for t in flat.split("\t")]

    records: List[List[str]] = []
    for row, offset in enumerate(range(0, len(tokens), NUM_COLUMNS)):
        record = tokens[offset : offset + NUM_COLUMNS]
        if len(record) != NUM_COLUMNS:
            raise TableStructureError(row, NUM_COLUMNS, len(record))
        records.append(record)

    return records


# ---------------------------------------------------------------------------
# Record folding (CORE LOGIC)
# ---------------------------------------------------------------------------


class _Accumulator(NamedTuple):
    finished: Tuple[Course, ...] = ()
    current: Optional[CourseBuilder] = None

    def start(self, builder: CourseBuilder) -> "_Accumulator":
        return _Accumulator(self.finish(), builder)

    def update(self, builder: CourseBuilder) -> "_Accumulator":
        return self._replace(current=builder)

    def finish(self) -> Tuple[Course, ...]:
        if self.current is None:
            return self.finished
        return self.finished + (self.current.build(),)


def _header_complete(record: Sequence[str]) -> bool:
    """
    A row only opens a new course when every header column is filled.

    Rows with a partial header are continuation rows of the current course,
    not errors.
    """
    return all(record[col] for col in HEADER_COLUMNS)


def _parse_class(record: Sequence[str], recess_week: int) -> Class:
    return Class(
        weekday=parse_weekday(record[COL_WEEKDAY]),
        period=parse_period(record[COL_PERIOD]),
        venue=record[COL_VENUE],
        group=record[COL_GROUP],
        weeks=tuple(parse_weeks(record[COL_WEEKS], recess_week)),
        class_type=record[COL_CLASS_TYPE],
    )


def _fold_record(acc: _Accumulator, row: int, record: Sequence[str], recess_week: int) -> _Accumulator:
    """
    Apply one table record to the accumulator and return the new accumulator.
    """
    # 1) New course header
    if _header_complete(record):
        course = Course(
            code=record[COL_CODE],
            title=record[COL_TITLE],
            au=record[COL_AU],
            course_type=record[COL_COURSE_TYPE],
            index=record[COL_INDEX],
            status=record[COL_STATUS],
        )
        logger.debug("Row %d: new course %s (%s)", row, course.code, course.title)
        acc = acc.start(CourseBuilder(course))

    # 2) Exam info
    exam_raw = record[COL_EXAM]
    if exam_raw and exam_raw != NO_EXAM:
        exam = parse_exam(exam_raw)
        if acc.current is None:
            raise UnknownCourseError(row, exam)
        acc = acc.update(acc.current.with_exam(exam))

    # 3) No class on this row if there is no class type
    if not record[COL_CLASS_TYPE]:
        return acc

    # 4) Class info
    cls = _parse_class(record, recess_week)
    if acc.current is None:
        raise UnknownCourseError(row, cls)
    return acc.update(acc.current.with_class(cls))


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def parse_from_table(text: str, recess_week: int) -> List[Course]:
    """
    Parse an exported timetable into courses, in table order.

    Row numbers in errors are record indices (0-based), not line numbers.
    """
    acc = _Accumulator()

    for row, record in enumerate(split_records(text)):
        try:
            acc = _fold_record(acc, row, record, recess_week)
        except FieldFormatError as exc:
            raise exc.at_row(row) from exc

    courses = list(acc.finish())
    logger.debug("Parsed %d courses", len(courses))
    return courses
