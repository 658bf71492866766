"""
Service layer helpers that orchestrate adapters and domain logic.
"""

from .availability import AvailabilityService, CalendarClientProtocol
from .booking import BookingService, CalendarLocks

__all__ = ["AvailabilityService", "BookingService", "CalendarClientProtocol", "CalendarLocks"]
