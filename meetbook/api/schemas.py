"""
Request and response bodies for the HTTP API.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from ..domain.timepoints import DATE_PATTERN, TIME_PATTERN


class DateBody(BaseModel):
    """Body carrying a ``DD/MM/YYYY`` date."""
    date: str

    @field_validator("date")
    @classmethod
    def validate_date(cls, value: str) -> str:
        if not DATE_PATTERN.match(value):
            raise ValueError("Date must be DD/MM/YYYY")
        return value


class DateTimeBody(DateBody):
    """Body carrying a date and a 24-hour ``HH:mm`` time."""
    time: str

    @field_validator("time")
    @classmethod
    def validate_time(cls, value: str) -> str:
        if not TIME_PATTERN.match(value):
            raise ValueError("Time must be HH:mm")
        return value


class CreateEventRequest(DateTimeBody):
    """Booking request for one meeting slot."""
    name: str = Field(..., min_length=1)
    email: EmailStr
    mobile: str = Field(..., min_length=10)
    notes: Optional[str] = None


class HealthResponse(BaseModel):
    status: str = "UP"
    message: str = "Server is healthy"


class SlotsResponse(BaseModel):
    slots: List[str]


class WorkingHoursBody(BaseModel):
    start: str
    end: str


class DaySlotsResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    date: str
    day_of_week: str = Field(..., alias="dayOfWeek")
    working_hours: WorkingHoursBody = Field(..., alias="workingHours")
    slots: List[str]


class AvailabilityResponse(BaseModel):
    slot: str
    available: bool
    message: str


class EventCreatedResponse(BaseModel):
    message: str = "Event created successfully"
    link: Optional[str] = None
