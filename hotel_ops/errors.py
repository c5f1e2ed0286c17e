"""
Error taxonomy for the hotel operations API.

Every failure a route can report is a HotelOpsError subclass carrying its HTTP
status. The handlers registered in main.py render them, FastAPI's own
HTTPException and request validation errors as ``{"error": <message>}``.
"""

from __future__ import annotations

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = structlog.get_logger(__name__)


class HotelOpsError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.message
        super().__init__(self.message)


class Unauthenticated(HotelOpsError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Unauthenticated"


class Forbidden(HotelOpsError):
    status_code = status.HTTP_403_FORBIDDEN
    message = "Forbidden: Insufficient permissions"


class NotFound(HotelOpsError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "Not found"


class RoomNotFound(NotFound):
    message = "Room not found"


class BookingNotFound(NotFound):
    message = "Booking not found"


class AccountNotFound(NotFound):
    message = "User profile not found"


class ValidationError(HotelOpsError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Invalid request"


class InvalidDateRange(ValidationError):
    message = "Invalid dates"


class ProfileMissing(ValidationError):
    message = "User profile not found. Please refresh or contact support."


class Conflict(HotelOpsError):
    status_code = status.HTTP_409_CONFLICT
    message = "Conflict"


class RoomUnavailable(Conflict):
    message = "Room is already booked for these dates"


class InvalidTransition(Conflict):
    message = "Booking cannot make this status transition"


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


async def handle_hotel_ops_error(request: Request, exc: HotelOpsError) -> JSONResponse:
    return error_response(exc.status_code, exc.message)


async def handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return error_response(exc.status_code, str(exc.detail))


async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report the first body/query validation problem as a 400."""
    errors = exc.errors()
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{location}: {first.get('msg')}" if location else str(first.get("msg"))
    else:
        message = ValidationError.message
    return error_response(status.HTTP_400_BAD_REQUEST, message)


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "unhandled_error",
        path=request.url.path,
        method=request.method,
        error=str(exc),
    )
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(HotelOpsError, handle_hotel_ops_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)
