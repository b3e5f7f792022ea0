"""
In-memory event store keyed by calendar date.

Each date key maps to its events sorted by start time. No two events on the
same date may overlap; touching boundaries (09:00-10:00 then 10:00-11:00) are
allowed.
"""

import logging
from datetime import date, datetime

from core.config import OVERLAP_MESSAGE
from core.exceptions import (
    NotFoundError,
    OverlapError,
    PersistenceReadError,
    ValidationError,
)
from core.validation import find_overlapping, to_date_key
from models.events import Event, EventRecord

logger = logging.getLogger(__name__)

DateLike = date | datetime | str


def _by_start_time(event: Event) -> str:
    return event.start_time


class EventStore:
    """Mapping from date key to the ordered events on that date."""

    def __init__(self):
        self._events: dict[str, list[Event]] = {}
        # Records from_dict could not restore
        self.skipped = 0

    def __len__(self) -> int:
        return sum(len(events) for events in self._events.values())

    def __contains__(self, date_key) -> bool:
        try:
            return bool(self._events.get(to_date_key(date_key)))
        except ValidationError:
            return False

    def __eq__(self, other) -> bool:
        if not isinstance(other, EventStore):
            return NotImplemented
        return self._non_empty() == other._non_empty()

    def __repr__(self) -> str:
        return f"EventStore(dates={len(self.dates())}, events={len(self)})"

    def _non_empty(self) -> dict[str, list[Event]]:
        return {key: events for key, events in self._events.items() if events}

    def dates(self) -> list[str]:
        """Date keys that currently hold at least one event."""
        return list(self._non_empty())

    def query(self, date_key: DateLike) -> list[Event]:
        """Return a snapshot of the events on a date, sorted by start time."""
        return list(self._events.get(to_date_key(date_key), []))

    def find_conflicts(self, date_key: DateLike, event: Event) -> list[Event]:
        """Return the events on date_key that the candidate would overlap."""
        key = to_date_key(date_key)
        return find_overlapping(key, event, self._events.get(key, []))

    def add(self, date_key: DateLike, event: Event) -> Event:
        """
        Add an event to a date.

        Raises:
            OverlapError: if the event overlaps an existing event on that date.
                The store is left unchanged.
        """
        if not isinstance(event, Event):
            raise ValidationError(f"Expected Event, got {type(event).__name__}")
        key = to_date_key(date_key)
        existing = self._events.get(key, [])

        conflicts = find_overlapping(key, event, existing)
        if conflicts:
            logger.info(
                f"Rejected '{event.name}' {event.start_time}-{event.end_time} on {key}: "
                f"overlaps {len(conflicts)} event(s)"
            )
            raise OverlapError(OVERLAP_MESSAGE, key, conflicts)

        # sorted() is stable, so equal start times keep insertion order
        self._events[key] = sorted([*existing, event], key=_by_start_time)
        logger.debug(f"Added '{event.name}' on {key}")
        return event

    def delete(self, date_key: DateLike, index: int) -> Event:
        """
        Remove the event at a position in a date's list.

        Raises:
            NotFoundError: if the date has no events or index is out of range.
        """
        key = to_date_key(date_key)
        events = self._events.get(key)
        if events is None:
            raise NotFoundError(f"No events on {key}")
        if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < len(events):
            raise NotFoundError(f"No event at index {index} on {key}")

        removed = events[index]
        self._events[key] = events[:index] + events[index + 1:]
        logger.debug(f"Deleted '{removed.name}' from {key}")
        return removed

    def delete_by_id(self, date_key: DateLike, event_id: str) -> Event:
        """Remove an event by its stable id."""
        key = to_date_key(date_key)
        for index, event in enumerate(self._events.get(key, [])):
            if event.id == event_id:
                return self.delete(key, index)
        raise NotFoundError(f"No event with id '{event_id}' on {key}")

    def dates_with_events(self, year: int, month: int) -> set[int]:
        """Day numbers in a month that carry at least one event."""
        prefix = f"{year:04d}-{month:02d}-"
        return {int(key[-2:]) for key in self.dates() if key.startswith(prefix)}

    def search(self, term: str) -> list[tuple[str, Event]]:
        """Case-insensitive match on name and description across all dates."""
        needle = (term or "").strip().lower()
        if not needle:
            return []
        matches = []
        for key in sorted(self.dates()):
            for event in self._events[key]:
                if needle in event.name.lower() or needle in event.description.lower():
                    matches.append((key, event))
        return matches

    def to_dict(self) -> dict[str, list[EventRecord]]:
        """Serialize the mapping in date-key insertion order."""
        return {key: [event.to_dict() for event in events] for key, events in self._events.items()}

    @classmethod
    def from_dict(cls, data) -> "EventStore":
        """
        Rebuild a store from its serialized mapping.

        Every record is re-validated and re-added, so the sort and
        no-overlap invariants hold for whatever was stored. Entries that
        cannot be restored are skipped with a warning; the rest still load.

        Raises:
            PersistenceReadError: if the payload is not a mapping at all.
        """
        if not isinstance(data, dict):
            raise PersistenceReadError(f"Expected a mapping of date keys, got {type(data).__name__}")

        store = cls()
        for key, records in data.items():
            if not isinstance(key, str) or not isinstance(records, list):
                logger.warning(f"Skipping invalid entry for date key {key!r}")
                store.skipped += len(records) if isinstance(records, list) else 1
                continue
            try:
                normalized = to_date_key(key)
            except ValidationError:
                normalized = None
            if normalized != key:
                logger.warning(f"Skipping {len(records)} record(s) under malformed date key {key!r}")
                store.skipped += len(records)
                continue

            store._events.setdefault(key, [])
            for position, record in enumerate(records):
                try:
                    store.add(key, Event.from_dict(record))
                except (ValidationError, OverlapError) as e:
                    logger.warning(f"Skipping record {position} on {key}: {e}")
                    store.skipped += 1
        return store
