"""
ntu-ics: convert an exported class timetable into an iCalendar file.
"""

from ntu_ics.errors import (
    DateRangeError,
    DateResolutionError,
    FieldFormatError,
    TableStructureError,
    TimetableError,
    UnknownCourseError,
)
from ntu_ics.expand import generate_events
from ntu_ics.parse import parse_from_table

__all__ = [
    "DateRangeError",
    "DateResolutionError",
    "FieldFormatError",
    "TableStructureError",
    "TimetableError",
    "UnknownCourseError",
    "generate_events",
    "parse_from_table",
]
