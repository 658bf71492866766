"""
Map domain errors to HTTP responses.

Client mistakes become 400/401/409 with a short explanation; anything else
is logged and collapsed to a bare 500.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ..domain.exceptions import (
    InvalidTimeFormat,
    MeetbookError,
    NotAWorkingDay,
    SlotUnavailable,
    Unauthorized,
    UpstreamFailure,
)

logger = logging.getLogger(__name__)

INTERNAL_ERROR = {"error": "Internal server error"}


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = [
        {"loc": list(error.get("loc", ())), "msg": error.get("msg", ""), "type": error.get("type", "")}
        for error in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Validation Error", "details": details},
    )


async def unauthorized_handler(request: Request, exc: Unauthorized) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_401_UNAUTHORIZED,
        content={"error": "Unauthorized: Invalid or missing API Key"},
    )


async def invalid_time_handler(request: Request, exc: InvalidTimeFormat) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Invalid date format", "message": str(exc)},
    )


async def not_a_working_day_handler(request: Request, exc: NotAWorkingDay) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": f"No schedule configured for {exc.day_of_week}",
            "message": "This day is not a working day",
            "dayOfWeek": exc.day_of_week,
        },
    )


async def slot_unavailable_handler(request: Request, exc: SlotUnavailable) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content={"error": "Slot is no longer available"},
    )


async def upstream_failure_handler(request: Request, exc: UpstreamFailure) -> JSONResponse:
    logger.error("Calendar backend failure on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=INTERNAL_ERROR)


async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=INTERNAL_ERROR)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(InvalidTimeFormat, invalid_time_handler)
    app.add_exception_handler(NotAWorkingDay, not_a_working_day_handler)
    app.add_exception_handler(SlotUnavailable, slot_unavailable_handler)
    app.add_exception_handler(UpstreamFailure, upstream_failure_handler)
    app.add_exception_handler(MeetbookError, unexpected_error_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)
