"""Month view and export endpoints."""

from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import Response

from api.dependencies import get_session
from api.models.responses import ErrorCodes, MonthViewResponse
from core.exceptions import ExportError, ValidationError
from services.calendar import CalendarSession
from services.export import EXCEL_MEDIA_TYPE

router = APIRouter(prefix="/v1")

MEDIA_TYPES = {
    "json": "application/json",
    "xlsx": EXCEL_MEDIA_TYPE,
}


def navigate(session: CalendarSession, year: int | None, month: int | None) -> None:
    """Move the displayed month when both year and month are given."""
    if year is None or month is None:
        return
    try:
        session.go_to(year, month)
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={
                "error": str(e),
                "code": ErrorCodes.INVALID_REQUEST,
                "details": [],
            },
        )


@router.get("/calendar", response_model=MonthViewResponse)
def month_view(
    year: int | None = Query(None, description="Year to display"),
    month: int | None = Query(None, description="Month to display (1-12)"),
    session: CalendarSession = Depends(get_session),
):
    """Grid for the displayed month, optionally navigating first."""
    navigate(session, year, month)
    return MonthViewResponse(**session.month_view())


@router.post("/calendar/prev", response_model=MonthViewResponse)
def previous_month(session: CalendarSession = Depends(get_session)):
    session.prev_month()
    return MonthViewResponse(**session.month_view())


@router.post("/calendar/next", response_model=MonthViewResponse)
def next_month(session: CalendarSession = Depends(get_session)):
    session.next_month()
    return MonthViewResponse(**session.month_view())


@router.get("/export")
def export_events(
    format: Literal["json", "xlsx"] = "json",
    year: int | None = Query(None),
    month: int | None = Query(None),
    session: CalendarSession = Depends(get_session),
):
    """
    Download every stored event.

    The filename is taken from the displayed month even though the content
    covers all months.
    """
    try:
        content, filename = session.export_bytes(format, year, month)
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={
                "error": str(e),
                "code": ErrorCodes.INVALID_REQUEST,
                "details": e.details,
            },
        )
    except ExportError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "error": "Failed to export events",
                "code": ErrorCodes.EXPORT_FAILED,
                "details": [str(e)],
            },
        )

    return Response(
        content=content,
        media_type=MEDIA_TYPES[format],
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
