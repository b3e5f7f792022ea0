"""API Pydantic models."""

from .responses import (
    ErrorCodes,
    ErrorResponse,
    EventCreate,
    EventResponse,
    HealthResponse,
    MonthViewResponse,
    SearchResult,
)

__all__ = [
    "HealthResponse",
    "ErrorResponse",
    "ErrorCodes",
    "EventCreate",
    "EventResponse",
    "MonthViewResponse",
    "SearchResult",
]
