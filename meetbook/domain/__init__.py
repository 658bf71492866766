"""
Domain layer - Pure business logic without external dependencies.
"""

from .models import (
    BookingDetails,
    CreatedEvent,
    DayAvailability,
    DaySchedule,
    TimeRange,
    WeeklySchedule,
)
from .slot_calculator import SlotCalculator

__all__ = [
    "BookingDetails",
    "CreatedEvent",
    "DayAvailability",
    "DaySchedule",
    "TimeRange",
    "WeeklySchedule",
    "SlotCalculator",
]
