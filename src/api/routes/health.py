"""Health check endpoint."""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from api.dependencies import get_session
from api.models.responses import HealthResponse
from core.config import API_VERSION
from services.calendar import CalendarSession

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check(session: CalendarSession = Depends(get_session)):
    """
    Health check endpoint for monitoring.

    Returns 200 if healthy, 503 if the last save to storage failed.
    """
    timestamp = datetime.now(timezone.utc).isoformat()
    events_stored = len(session.store)
    storage_backend = type(session.bridge.medium).__name__

    if session.last_save_ok:
        return HealthResponse(
            status="healthy",
            version=API_VERSION,
            storage_backend=storage_backend,
            events_stored=events_stored,
            timestamp=timestamp,
        )
    else:
        return JSONResponse(
            status_code=503,
            content=HealthResponse(
                status="unhealthy",
                version=API_VERSION,
                storage_backend=storage_backend,
                events_stored=events_stored,
                timestamp=timestamp,
                error="Events could not be saved; changes are kept in memory only",
            ).model_dump(),
        )
