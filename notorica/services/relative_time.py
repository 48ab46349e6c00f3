"""
Relative Time.

Turns a note's stored ``date`` (M/D/YYYY) and optional ``time`` (HH:MM)
into a coarse age label such as "5 mins ago", plus the elapsed minutes.
All datetimes are naive local time, matching how notes record them.
"""

from datetime import datetime, timedelta

from notorica.schemas.dashboard import RelativeTime
from notorica.schemas.note import Note

MINUTE_MS = 60 * 1000
HOUR_MS = 60 * MINUTE_MS
DAY_MS = 24 * HOUR_MS


def format_short_date(moment: datetime) -> str:
    """Locale short date as stored on notes, e.g. 10/19/2026."""
    return f"{moment.month}/{moment.day}/{moment.year}"


def format_clock(moment: datetime) -> str:
    """Zero-padded 24-hour HH:MM."""
    return f"{moment.hour:02d}:{moment.minute:02d}"


def epoch_ms(moment: datetime) -> int:
    return int(moment.timestamp() * 1000)


def parse_note_datetime(date: str, time: str | None = None) -> datetime | None:
    """
    Parse a stored date and optional time.

    Returns None unless ``date`` splits on "/" into exactly three integers
    forming a real calendar day. A time that does not split into at least
    two integers is ignored and midnight is used; hours and minutes past
    their range roll over into the following day or hour.
    """
    parts = date.split("/")
    if len(parts) != 3:
        return None
    try:
        month, day, year = (int(part) for part in parts)
    except ValueError:
        return None

    hours = minutes = 0
    if time:
        time_parts = time.split(":")
        if len(time_parts) >= 2:
            try:
                hours, minutes = int(time_parts[0]), int(time_parts[1])
            except ValueError:
                hours = minutes = 0

    try:
        day_start = datetime(year, month, day)
    except ValueError:
        return None
    return day_start + timedelta(hours=hours, minutes=minutes)


def _ago(count: int, unit: str) -> str:
    return f"{count} {unit if count == 1 else unit + 's'} ago"


def format_elapsed(diff_ms: int) -> str:
    """Bucket a millisecond difference into a label."""
    if diff_ms < MINUTE_MS:
        return "Just now"
    if diff_ms < HOUR_MS:
        return _ago(diff_ms // MINUTE_MS, "min")
    if diff_ms < DAY_MS:
        return _ago(diff_ms // HOUR_MS, "hour")
    return _ago(diff_ms // DAY_MS, "day")


def relative_time(date: str, time: str | None = None, now: datetime | None = None) -> RelativeTime | None:
    """Label and elapsed minutes for a date/time, or None if the date is unparseable."""
    saved = parse_note_datetime(date, time)
    if saved is None:
        return None
    current = now if now is not None else datetime.now()
    diff_ms = int((current - saved).total_seconds() * 1000)
    return RelativeTime(label=format_elapsed(diff_ms), minutes=diff_ms // MINUTE_MS)


def note_relative_time(note: Note, now: datetime | None = None) -> RelativeTime | None:
    return relative_time(note.date, note.time, now)
