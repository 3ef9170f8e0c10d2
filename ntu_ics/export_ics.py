"""
iCalendar (.ics) export.

We convert generated event records into a calendar file that can be imported into:
- Google Calendar
- Outlook
- Apple Calendar
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

from ntu_ics.model import EventRecord, to_utc_stamp


PRODID = "-//ntu-ics//EN"

# RFC 5545: lines SHOULD NOT be longer than 75 octets
MAX_LINE_OCTETS = 75


def _ics_escape(text: str) -> str:
    """
    Escape text for ICS fields (very small subset, sufficient for our use).
    """
    return (
        text.replace("\\", "\\\\").replace("\r\n", "\\n").replace("\n", "\\n").replace(";", "\\;").replace(",", "\\,")
    )


def _fold(line: str) -> list[str]:
    """
    Split a content line into 75-octet chunks; continuation lines start with a space.
    """
    out: list[str] = []
    current = ""
    for ch in line:
        if len((current + ch).encode("utf-8")) > MAX_LINE_OCTETS:
            out.append(current)
            current = " "
        current += ch
    out.append(current)
    return out


def _event_lines(ev: EventRecord) -> list[str]:
    lines = [
        "BEGIN:VEVENT",
        f"UID:{_ics_escape(ev.uid)}",
        f"DTSTAMP:{to_utc_stamp(ev.created)}",
        f"DTSTART:{to_utc_stamp(ev.start)}",
        f"DTEND:{to_utc_stamp(ev.end)}",
        f"SUMMARY:{_ics_escape(ev.summary)}",
        f"CATEGORIES:{_ics_escape(ev.category)}",
    ]
    if ev.location:
        lines.append(f"LOCATION:{_ics_escape(ev.location)}")
    lines.append("END:VEVENT")
    return lines


def render_calendar(events: Iterable[EventRecord]) -> str:
    """
    Render events as one VCALENDAR document (CRLF line endings).
    """
    lines: list[str] = []
    lines.append("BEGIN:VCALENDAR")
    lines.append("VERSION:2.0")
    lines.append(f"PRODID:{PRODID}")
    lines.append("CALSCALE:GREGORIAN")

    for ev in events:
        lines.extend(_event_lines(ev))

    lines.append("END:VCALENDAR")

    folded = [part for line in lines for part in _fold(line)]

    # ICS standard uses CRLF
    return "\r\n".join(folded) + "\r\n"


def export_events_to_ics(events: list[EventRecord], out_path: str | Path) -> int:
    """
    Export events to an .ics file. Returns number of exported events.
    """
    out = Path(out_path)
    out.parent.mkdir(parents=True, exist_ok=True)

    out.write_text(render_calendar(events), encoding="utf-8", newline="")
    return len(events)
