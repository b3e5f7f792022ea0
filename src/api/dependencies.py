"""FastAPI dependencies for shared resources."""

from fastapi import HTTPException, Request, status

from services.calendar import CalendarSession


def get_session(request: Request) -> CalendarSession:
    """
    Return the calendar session attached to the app at startup.

    Raises:
        HTTPException: 500 if the session was never initialized
    """
    session: CalendarSession | None = getattr(request.app.state, "session", None)
    if session is None:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "error": "Calendar session not initialized",
                "code": "INTERNAL_ERROR",
                "details": [],
            },
        )
    return session
