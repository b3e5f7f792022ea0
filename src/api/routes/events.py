"""Event endpoints: list, create, delete and search."""

from fastapi import APIRouter, Depends, HTTPException, status

from api.dependencies import get_session
from api.models.responses import ErrorCodes, EventCreate, EventResponse, SearchResult
from core.exceptions import NotFoundError, OverlapError, ValidationError
from core.validation import to_date_key
from services.calendar import CalendarSession

router = APIRouter(prefix="/v1")


def parse_date_key(date_key: str) -> str:
    """Normalize a path date key to YYYY-MM-DD."""
    try:
        return to_date_key(date_key)
    except ValidationError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={
                "error": "Invalid date format",
                "code": ErrorCodes.INVALID_REQUEST,
                "details": ["Expected format: YYYY-MM-DD"],
            },
        )


def not_found(e: NotFoundError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail={
            "error": str(e),
            "code": ErrorCodes.NOT_FOUND,
            "details": [],
        },
    )


@router.get("/events/{date_key}", response_model=list[EventResponse])
def list_events(date_key: str, session: CalendarSession = Depends(get_session)):
    """Events on a date, sorted by start time."""
    key = parse_date_key(date_key)
    return [EventResponse.from_event(event) for event in session.events_on(key)]


@router.post(
    "/events/{date_key}",
    response_model=EventResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_event(
    date_key: str,
    body: EventCreate,
    session: CalendarSession = Depends(get_session),
):
    """
    Add an event to a date.

    Returns 422 for missing or malformed fields and 409 when the time range
    overlaps another event on the same date.
    """
    key = parse_date_key(date_key)
    try:
        event = session.add_event(
            key,
            name=body.name,
            start_time=body.start_time,
            end_time=body.end_time,
            description=body.description,
            color=body.color,
        )
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={
                "error": str(e),
                "code": ErrorCodes.VALIDATION_ERROR,
                "details": e.details,
            },
        )
    except OverlapError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={
                "error": str(e),
                "code": ErrorCodes.EVENT_OVERLAP,
                "details": [
                    f"{c.name} ({c.start_time}-{c.end_time})" for c in e.conflicts
                ],
            },
        )
    return EventResponse.from_event(event)


@router.delete("/events/{date_key}/{index}", response_model=EventResponse)
def delete_event(
    date_key: str,
    index: int,
    session: CalendarSession = Depends(get_session),
):
    """Delete the event at a display position."""
    key = parse_date_key(date_key)
    try:
        removed = session.delete_event(key, index)
    except NotFoundError as e:
        raise not_found(e)
    return EventResponse.from_event(removed)


@router.delete("/events/{date_key}/by-id/{event_id}", response_model=EventResponse)
def delete_event_by_id(
    date_key: str,
    event_id: str,
    session: CalendarSession = Depends(get_session),
):
    """Delete an event by its stable id."""
    key = parse_date_key(date_key)
    try:
        removed = session.delete_event_by_id(key, event_id)
    except NotFoundError as e:
        raise not_found(e)
    return EventResponse.from_event(removed)


@router.get("/search", response_model=list[SearchResult])
def search_events(q: str = "", session: CalendarSession = Depends(get_session)):
    """Events whose name or description contains q."""
    return [
        SearchResult(date=key, event=EventResponse.from_event(event))
        for key, event in session.search(q)
    ]
