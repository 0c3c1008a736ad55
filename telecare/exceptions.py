from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse


class TelecareError(Exception):
    """Base class for domain errors raised by the reminder core."""


class ReminderStoreError(TelecareError):
    """The pending reminders could not be read; the whole cycle is aborted."""


class NotificationWriteError(TelecareError):
    """A single notification row could not be written."""


class ReminderUpdateError(TelecareError):
    """A single reminder could not be marked as sent."""


def create_error_response(error_message: str, status_code: int = 400) -> dict:
    """Create a standardized error response"""
    return {
        "success": False,
        "data": None,
        "error": error_message
    }


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Custom exception handler for HTTPException"""
    # Convert 403 from HTTPBearer to 401 for missing authentication
    if exc.status_code == 403 and "Not authenticated" in str(exc.detail):
        return JSONResponse(
            status_code=401,
            content=create_error_response("Authentication required", 401)
        )

    return JSONResponse(
        status_code=exc.status_code,
        content=create_error_response(exc.detail, exc.status_code),
        headers=getattr(exc, "headers", None),
    )
