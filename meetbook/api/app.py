"""
FastAPI application factory.

Run with ``uvicorn --factory meetbook.api.app:create_app`` or ``meetbook serve``.
"""

import logging
from typing import Callable, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pendulum import DateTime

from .. import __version__
from ..adapters import GoogleCalendarClient
from ..config import MEETING_DURATION_MINUTES, WEEKLY_SCHEDULE, Settings
from ..domain.models import WeeklySchedule
from ..domain.slot_calculator import Shuffler, SlotCalculator
from ..services import AvailabilityService, BookingService, CalendarClientProtocol, CalendarLocks
from .dependencies import api_key_middleware
from .errors import register_exception_handlers
from .routes import public_router, router

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    calendar_client: Optional[CalendarClientProtocol] = None,
    schedule: WeeklySchedule = WEEKLY_SCHEDULE,
    rng: Optional[Shuffler] = None,
    clock: Optional[Callable[[], DateTime]] = None,
) -> FastAPI:
    """
    Build the API with its collaborators wired in.

    Args:
        settings: Deployment settings; read from the environment when omitted
        calendar_client: Calendar backend; a Google service-account client
            is built from ``settings`` when omitted
        schedule: Weekly working hours and timezone
        rng: Source of slot shuffling (seed it for reproducible output)
        clock: Returns "now"; defaults to the wall clock in the schedule timezone
    """
    settings = settings or Settings()

    if calendar_client is None:
        calendar_client = GoogleCalendarClient.from_service_account(
            client_email=settings.google_client_email,
            private_key=settings.google_private_key,
            calendar_id=settings.calendar_id,
            timezone=schedule.timezone,
            timeout=settings.request_timeout_seconds,
        )

    availability = AvailabilityService(
        calendar_client=calendar_client,
        schedule=schedule,
        slot_calculator=SlotCalculator(slot_minutes=MEETING_DURATION_MINUTES, rng=rng),
        clock=clock,
    )

    app = FastAPI(title="meetbook", version=__version__)
    app.state.api_key = settings.api_key
    app.state.availability = availability
    app.state.booking = BookingService(
        calendar_client=calendar_client,
        availability=availability,
        locks=CalendarLocks(),
    )

    # CORS is added last so it wraps the key check and answers preflights itself.
    app.middleware("http")(api_key_middleware(public_paths={f"{settings.api_prefix}/health"}))
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)

    app.include_router(public_router, prefix=settings.api_prefix)
    app.include_router(router, prefix=settings.api_prefix)

    logger.info("API ready for calendar %s under %r", calendar_client.calendar_id, settings.api_prefix or "/")
    return app
