"""
Data models for calendar events.

Event is a frozen dataclass whose constructor validates its fields, so an
invalid Event cannot exist. TypedDicts describe the serialized shapes.
"""

import uuid
from dataclasses import dataclass, field
from typing import NotRequired, TypedDict

from core.config import DEFAULT_EVENT_COLOR
from core.exceptions import ValidationError
from core.validation import normalize_color, validate_event_fields


class EventRecord(TypedDict):
    """Persisted/exported event record."""
    name: str
    startTime: str
    endTime: str
    description: str
    color: str
    id: NotRequired[str]


class MonthView(TypedDict):
    """Displayed month for the presentation layer."""
    year: int
    month: int
    title: str
    weekday_headers: list[str]
    weeks: list[list[int]]
    days_with_events: list[int]
    today: int | None  # day number when the displayed month contains today


def new_event_id() -> str:
    return uuid.uuid4().hex[:12]


@dataclass(frozen=True)
class Event:
    """A single scheduled item on one calendar day."""

    name: str
    start_time: str  # HH:MM
    end_time: str  # HH:MM
    description: str = ""
    color: str = DEFAULT_EVENT_COLOR
    id: str = field(default_factory=new_event_id)

    def __post_init__(self):
        errors = validate_event_fields(self.name, self.start_time, self.end_time)
        if errors:
            raise ValidationError("Invalid event: " + "; ".join(errors), details=errors)
        if self.description is None:
            object.__setattr__(self, "description", "")
        object.__setattr__(self, "color", normalize_color(self.color))

    def to_dict(self) -> EventRecord:
        return {
            "name": self.name,
            "startTime": self.start_time,
            "endTime": self.end_time,
            "description": self.description,
            "color": self.color,
            "id": self.id,
        }

    @classmethod
    def from_dict(cls, record: dict) -> "Event":
        """Build an Event from a persisted record; records without an id get one."""
        if not isinstance(record, dict):
            raise ValidationError(f"Event record must be an object, got {type(record).__name__}")
        for key in ("name", "startTime", "endTime"):
            if not isinstance(record.get(key), str):
                raise ValidationError(f"Event record field '{key}' must be a string")
        for key in ("description", "color", "id"):
            if record.get(key) is not None and not isinstance(record[key], str):
                raise ValidationError(f"Event record field '{key}' must be a string")

        kwargs = {
            "name": record["name"],
            "start_time": record["startTime"],
            "end_time": record["endTime"],
            "description": record.get("description") or "",
            "color": record.get("color") or DEFAULT_EVENT_COLOR,
        }
        if record.get("id"):
            kwargs["id"] = record["id"]
        return cls(**kwargs)
