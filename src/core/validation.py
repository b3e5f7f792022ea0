"""
Event field validation and conflict detection.
"""

import re
from datetime import date, datetime

from core.config import DATE_KEY_FORMAT, DEFAULT_EVENT_COLOR, TIME_FORMAT
from core.exceptions import ValidationError

TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")
COLOR_PATTERN = re.compile(r"^#[0-9a-fA-F]{6}$")


def is_blank(value) -> bool:
    """Check if a form value is missing or empty; whitespace counts as a value."""
    return value is None or value == ""


def is_valid_time(value: str) -> bool:
    """Check for zero-padded 24-hour HH:MM."""
    return isinstance(value, str) and bool(TIME_PATTERN.match(value))


def normalize_color(color: str | None) -> str:
    """Return the color token, falling back to the default when unset."""
    if color is None or not str(color).strip():
        return DEFAULT_EVENT_COLOR
    color = str(color).strip()
    if not COLOR_PATTERN.match(color):
        raise ValidationError(f"Invalid color '{color}'", details=["Expected format: #RRGGBB"])
    return color


def to_date_key(value: date | datetime | str) -> str:
    """
    Reduce a calendar date to its YYYY-MM-DD key.

    Datetimes keep their own calendar date; time-of-day and tzinfo are
    dropped without any UTC conversion.
    """
    if isinstance(value, datetime):
        return value.date().strftime(DATE_KEY_FORMAT)
    if isinstance(value, date):
        return value.strftime(DATE_KEY_FORMAT)
    if isinstance(value, str):
        try:
            return datetime.strptime(value.strip(), DATE_KEY_FORMAT).date().strftime(DATE_KEY_FORMAT)
        except ValueError:
            pass
    raise ValidationError(f"Invalid date key '{value}'", details=["Expected format: YYYY-MM-DD"])


def to_instant(date_key: str, time_str: str) -> datetime:
    """Combine a date key and an HH:MM time into an absolute instant."""
    return datetime.strptime(f"{date_key} {time_str}", f"{DATE_KEY_FORMAT} {TIME_FORMAT}")


def validate_event_fields(name, start_time, end_time) -> list[str]:
    """
    Collect problems with the required event fields.

    Checks:
    1. Name, start time and end time are present
    2. Times are HH:MM
    """
    errors = []

    if is_blank(name):
        errors.append("Missing event name")
    if is_blank(start_time):
        errors.append("Missing start time")
    elif not is_valid_time(start_time):
        errors.append(f"Invalid start time '{start_time}'")
    if is_blank(end_time):
        errors.append("Missing end time")
    elif not is_valid_time(end_time):
        errors.append(f"Invalid end time '{end_time}'")

    return errors


def check_time_range(start_time: str, end_time: str) -> None:
    """Raise if the event does not end after it starts."""
    if end_time <= start_time:
        raise ValidationError(
            "End time must be after start time",
            details=[f"Start: {start_time}", f"End: {end_time}"],
        )


def events_overlap(date_key: str, a, b) -> bool:
    """
    Check if two events on the same date overlap.

    Intervals are half-open, so an event ending at 10:00 does not clash
    with one starting at 10:00.
    """
    a_start = to_instant(date_key, a.start_time)
    a_end = to_instant(date_key, a.end_time)
    b_start = to_instant(date_key, b.start_time)
    b_end = to_instant(date_key, b.end_time)
    return a_start < b_end and a_end > b_start


def find_overlapping(date_key: str, candidate, existing: list) -> list:
    """Return the existing events the candidate would overlap."""
    return [event for event in existing if events_overlap(date_key, candidate, event)]
