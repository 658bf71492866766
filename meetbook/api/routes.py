"""
HTTP routes for slot discovery and booking.

Handlers are plain ``def`` functions; FastAPI runs them in its threadpool,
so the blocking calendar calls do not stall the event loop.
"""

from fastapi import APIRouter, Depends

from ..config import MAX_DAY_SLOTS, MAX_LOOKAHEAD_DAYS, MAX_UPCOMING_SLOTS
from ..domain.models import BookingDetails
from ..domain.timepoints import from_civil, from_civil_date
from ..services import AvailabilityService, BookingService
from .dependencies import get_availability, get_booking
from .schemas import (
    AvailabilityResponse,
    CreateEventRequest,
    DateBody,
    DateTimeBody,
    DaySlotsResponse,
    EventCreatedResponse,
    HealthResponse,
    SlotsResponse,
    WorkingHoursBody,
)

public_router = APIRouter()
router = APIRouter()


@public_router.get("/health", response_model=HealthResponse)
def get_health():
    return HealthResponse()


@router.get("/upcoming-free-slots", response_model=SlotsResponse)
def get_upcoming_free_slots(availability: AvailabilityService = Depends(get_availability)):
    slots = availability.upcoming_free_slots(
        cap=MAX_UPCOMING_SLOTS,
        max_days_lookahead=MAX_LOOKAHEAD_DAYS,
    )
    return SlotsResponse(slots=availability.describe(slots))


@router.post("/free-slots-day", response_model=DaySlotsResponse)
def get_free_slots_for_day(
    body: DateBody,
    availability: AvailabilityService = Depends(get_availability),
):
    result = availability.slots_for_day(from_civil_date(body.date), cap=MAX_DAY_SLOTS)

    return DaySlotsResponse(
        date=body.date,
        day_of_week=result.day_of_week,
        working_hours=WorkingHoursBody(**result.working_hours.as_dict()),
        slots=availability.describe(result.slots),
    )


@router.post("/check-availability", response_model=AvailabilityResponse)
def check_availability(
    body: DateTimeBody,
    availability: AvailabilityService = Depends(get_availability),
):
    start = from_civil(body.date, body.time, availability.schedule.timezone)
    available = availability.is_available(start)

    return AvailabilityResponse(
        slot=f"{body.date} {body.time}",
        available=available,
        message="Slot is free" if available else "Slot is busy",
    )


@router.post("/create-event", response_model=EventCreatedResponse)
def create_event(
    body: CreateEventRequest,
    availability: AvailabilityService = Depends(get_availability),
    booking: BookingService = Depends(get_booking),
):
    details = BookingDetails(
        name=body.name,
        email=body.email,
        mobile=body.mobile,
        notes=body.notes,
        start=from_civil(body.date, body.time, availability.schedule.timezone),
    )
    event = booking.create_event(details)

    return EventCreatedResponse(link=event.link)
