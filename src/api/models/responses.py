"""Pydantic request and response models for API endpoints."""

from pydantic import BaseModel, ConfigDict, Field

from core.config import DEFAULT_EVENT_COLOR
from models.events import Event


class HealthResponse(BaseModel):
    """Health check response."""

    status: str  # "healthy" or "unhealthy"
    version: str
    storage_backend: str
    events_stored: int
    timestamp: str  # ISO 8601 UTC
    error: str | None = None


class ErrorResponse(BaseModel):
    """Standard error response."""

    error: str
    code: str
    details: list[str] = []


class ErrorCodes:
    """Error code constants."""

    INVALID_REQUEST = "INVALID_REQUEST"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    EVENT_OVERLAP = "EVENT_OVERLAP"
    NOT_FOUND = "NOT_FOUND"
    EXPORT_FAILED = "EXPORT_FAILED"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class EventCreate(BaseModel):
    """Event form fields. Presence is checked by the session, not here."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = ""
    start_time: str = Field("", alias="startTime")
    end_time: str = Field("", alias="endTime")
    description: str = ""
    color: str = DEFAULT_EVENT_COLOR


class EventResponse(BaseModel):
    """Stored event, serialized with the persisted field names."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    start_time: str = Field(alias="startTime")
    end_time: str = Field(alias="endTime")
    description: str
    color: str

    @classmethod
    def from_event(cls, event: Event) -> "EventResponse":
        return cls.model_validate(event.to_dict())


class SearchResult(BaseModel):
    date: str
    event: EventResponse


class MonthViewResponse(BaseModel):
    """Displayed month grid."""

    year: int
    month: int
    title: str
    weekday_headers: list[str]
    weeks: list[list[int]]  # 0 = padding cell
    days_with_events: list[int]
    today: int | None = None
