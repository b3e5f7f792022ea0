"""
Calendar session: the displayed month, form capture, and explicit persistence.

The session owns the EventStore and its PersistenceBridge. Every successful
mutation is followed by a save inside the same lock, so a threaded host
never interleaves one user's edit with another's save.
"""

import calendar
import logging
import threading
from datetime import date
from pathlib import Path

from core.config import REQUIRED_FIELDS_MESSAGE, STRICT_TIME_RANGE
from core.exceptions import ValidationError
from core.validation import check_time_range, is_blank, to_date_key, validate_event_fields
from models.events import Event, MonthView
from services.event_store import DateLike, EventStore
from services.export import (
    export_filename,
    render_export_excel,
    render_export_json,
    write_export_excel,
    write_export_json,
)
from services.persistence import PersistenceBridge

logger = logging.getLogger(__name__)

# Sunday-first grid, matching the Sun..Sat header row
GRID_FIRST_WEEKDAY = calendar.SUNDAY
WEEKDAY_HEADERS = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]


def month_weeks(year: int, month: int) -> list[list[int]]:
    return calendar.Calendar(firstweekday=GRID_FIRST_WEEKDAY).monthdayscalendar(year, month)


class CalendarSession:
    """Single-user session over one event store."""

    def __init__(
        self,
        bridge: PersistenceBridge,
        today: date | None = None,
        strict_time_range: bool = STRICT_TIME_RANGE,
        persist_on_load: bool = True,
    ):
        self.bridge = bridge
        self.today = today or date.today()
        self.strict_time_range = strict_time_range
        self._current = self.today.replace(day=1)
        self._lock = threading.Lock()

        self.store: EventStore = bridge.load()
        # Saved data that did not fully load stays untouched until the next edit
        restored_all = not bridge.load_failed and not self.store.skipped
        self.last_save_ok = bridge.save(self.store) if persist_on_load and restored_all else True

    # =========================================================================
    # MONTH NAVIGATION
    # =========================================================================

    @property
    def current_year(self) -> int:
        return self._current.year

    @property
    def current_month(self) -> int:
        return self._current.month

    def go_to(self, year: int, month: int) -> None:
        with self._lock:
            self._show(year, month)

    def prev_month(self) -> None:
        with self._lock:
            year, month = self._current.year, self._current.month
            if month == 1:
                self._show(year - 1, 12)
            else:
                self._show(year, month - 1)

    def next_month(self) -> None:
        with self._lock:
            year, month = self._current.year, self._current.month
            if month == 12:
                self._show(year + 1, 1)
            else:
                self._show(year, month + 1)

    def _show(self, year: int, month: int) -> None:
        # Caller holds self._lock
        if not 1 <= month <= 12:
            raise ValidationError(f"Invalid month {month}")
        self._current = date(year, month, 1)
        logger.debug(f"Showing {self.month_title()}")

    def month_title(self) -> str:
        """Example: 'October 2026'"""
        return self._current.strftime("%B %Y")

    def days_in_month(self) -> int:
        return calendar.monthrange(self.current_year, self.current_month)[1]

    def first_weekday(self) -> int:
        """Column of day 1 in the grid (0=Sunday .. 6=Saturday)."""
        return (self._current.weekday() + 1) % 7

    def month_grid(self) -> list[list[int]]:
        """Weeks of day numbers; 0 marks padding cells outside the month."""
        return month_weeks(self.current_year, self.current_month)

    def select_date(self, day: int) -> str:
        """Date key for a day of the displayed month."""
        if not 1 <= day <= self.days_in_month():
            raise ValidationError(f"Day {day} is not in {self.month_title()}")
        return to_date_key(self._current.replace(day=day))

    def month_view(self) -> MonthView:
        with self._lock:
            shown = self._current
            marked = self.store.dates_with_events(shown.year, shown.month)
        return {
            "year": shown.year,
            "month": shown.month,
            "title": shown.strftime("%B %Y"),
            "weekday_headers": list(WEEKDAY_HEADERS),
            "weeks": month_weeks(shown.year, shown.month),
            "days_with_events": sorted(marked),
            "today": self.today.day if self.today.replace(day=1) == shown else None,
        }

    # =========================================================================
    # EVENTS
    # =========================================================================

    def add_event(
        self,
        date_key: DateLike,
        name: str,
        start_time: str,
        end_time: str,
        description: str = "",
        color: str | None = None,
    ) -> Event:
        """
        Validate form fields, add the event, then persist.

        Raises:
            ValidationError: a required field is missing or malformed.
            OverlapError: the event clashes with another on the same date.
        """
        if is_blank(name) or is_blank(start_time) or is_blank(end_time):
            raise ValidationError(
                REQUIRED_FIELDS_MESSAGE,
                details=validate_event_fields(name, start_time, end_time),
            )

        event = Event(
            name=name,
            start_time=start_time,
            end_time=end_time,
            description=description or "",
            color=color,
        )
        if self.strict_time_range:
            check_time_range(event.start_time, event.end_time)

        with self._lock:
            self.store.add(date_key, event)
            self.last_save_ok = self.bridge.save(self.store)
        return event

    def delete_event(self, date_key: DateLike, index: int) -> Event:
        """Delete by display position, then persist."""
        with self._lock:
            removed = self.store.delete(date_key, index)
            self.last_save_ok = self.bridge.save(self.store)
        return removed

    def delete_event_by_id(self, date_key: DateLike, event_id: str) -> Event:
        """Delete by stable id, then persist."""
        with self._lock:
            removed = self.store.delete_by_id(date_key, event_id)
            self.last_save_ok = self.bridge.save(self.store)
        return removed

    def events_on(self, date_key: DateLike) -> list[Event]:
        with self._lock:
            return self.store.query(date_key)

    def search(self, term: str) -> list[tuple[str, Event]]:
        with self._lock:
            return self.store.search(term)

    # =========================================================================
    # EXPORT
    # =========================================================================

    def export_json(self, output_dir: Path | None = None) -> Path:
        """Export every stored date, named after the displayed month."""
        with self._lock:
            return write_export_json(self.store, self.current_year, self.current_month, output_dir)

    def export_excel(self, output_dir: Path | None = None) -> Path:
        with self._lock:
            return write_export_excel(self.store, self.current_year, self.current_month, output_dir)

    def export_bytes(
        self, fmt: str = "json", year: int | None = None, month: int | None = None
    ) -> tuple[bytes, str]:
        """
        Export content and download filename for the displayed month.

        When year and month are both given the session shows that month
        first, in the same critical region as the export.
        """
        with self._lock:
            if year is not None and month is not None:
                self._show(year, month)
            if fmt == "json":
                content = render_export_json(self.store).encode("utf-8")
            elif fmt == "xlsx":
                content = render_export_excel(self.store)
            else:
                raise ValidationError(f"Unsupported export format '{fmt}'", details=["Expected: json, xlsx"])
            return content, export_filename(self.current_year, self.current_month, fmt)
