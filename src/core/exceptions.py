"""
Error kinds raised by the calendar core.
"""


class CalendarError(Exception):
    """Base class for calendar errors."""


class ValidationError(CalendarError):
    """A required event field is missing or malformed."""

    def __init__(self, message: str, details: list[str] | None = None):
        super().__init__(message)
        self.details = details or []


class OverlapError(CalendarError):
    """A new event's time range intersects an existing event on the same date."""

    def __init__(self, message: str, date_key: str, conflicts: list | None = None):
        super().__init__(message)
        self.date_key = date_key
        self.conflicts = conflicts or []


class NotFoundError(CalendarError):
    """Delete requested for a date key, index or id that does not exist."""


class PersistenceError(CalendarError):
    """Backing medium unavailable or corrupt."""


class PersistenceReadError(PersistenceError):
    pass


class PersistenceWriteError(PersistenceError):
    pass


class QuotaExceededError(PersistenceWriteError):
    """Medium refused the write because it is over capacity."""


class ExportError(CalendarError):
    pass
