"""
Booking service: re-check a slot, then create the calendar event.
"""

from __future__ import annotations

import logging
import threading
from typing import Dict, Optional

from ..domain.exceptions import SlotUnavailable
from ..domain.models import BookingDetails, CreatedEvent
from .availability import AvailabilityService, CalendarClientProtocol

logger = logging.getLogger(__name__)


class CalendarLocks:
    """One lock per calendar identifier, created on first use."""

    def __init__(self) -> None:
        self._locks: Dict[str, threading.Lock] = {}
        self._guard = threading.Lock()

    def __len__(self) -> int:
        return len(self._locks)

    def lock_for(self, calendar_id: str) -> threading.Lock:
        with self._guard:
            return self._locks.setdefault(calendar_id, threading.Lock())


class BookingService:
    """
    Creates meetings on the calendar after a final availability check.

    Check and insert for one calendar run under a lock, so two requests in
    this process cannot both claim the same slot, provided the services
    involved share one ``CalendarLocks``. Bookings made by other processes
    against the same calendar are not covered.
    """

    def __init__(
        self,
        calendar_client: CalendarClientProtocol,
        availability: AvailabilityService,
        locks: Optional[CalendarLocks] = None,
    ) -> None:
        self._calendar_client = calendar_client
        self._availability = availability
        self._locks = locks if locks is not None else CalendarLocks()

    def create_event(self, details: BookingDetails) -> CreatedEvent:
        """
        Book a slot-length meeting starting at ``details.start``.

        Raises:
            SlotUnavailable: If the slot is already busy
        """
        start = details.start
        end = start.add(minutes=self._availability.slot_minutes)

        with self._locks.lock_for(self._calendar_client.calendar_id):
            if not self._availability.is_available(start):
                logger.info("Slot %s is no longer available", start)
                raise SlotUnavailable(f"Slot starting {start} is no longer available")

            event = self._calendar_client.insert_event(
                summary=details.summary(),
                description=details.description(),
                start_time=start,
                end_time=end,
                timezone=self._availability.schedule.timezone,
            )

        logger.info("Created event %s for %s", event.id, start)
        return event
