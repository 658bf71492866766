"""
Tests for BookingService.
"""

import threading
import time as time_module

import pytest

from meetbook.adapters import InMemoryCalendarClient
from meetbook.config import WEEKLY_SCHEDULE
from meetbook.domain.exceptions import SlotUnavailable
from meetbook.domain.models import BookingDetails
from meetbook.domain.slot_calculator import SlotCalculator
from meetbook.services import AvailabilityService, BookingService, CalendarLocks

from .helpers import TZ, NoShuffle, at, busy


def _details(start: str = "2024-11-25 10:00", name: str = "Asha") -> BookingDetails:
    return BookingDetails(
        name=name,
        email="asha@example.com",
        mobile="9876543210",
        start=at(start),
        notes="Intro call",
    )


class SlowCalendarClient(InMemoryCalendarClient):
    """Widens the gap between the availability check and the insert."""

    def query_busy(self, start_time, end_time):
        result = super().query_busy(start_time, end_time)
        time_module.sleep(0.05)
        return result


class TestCreateEvent:

    def test_creates_event_for_free_slot(self, calendar, booking):
        event = booking.create_event(_details())

        assert event.id
        assert event.link
        assert len(calendar.events) == 1

        created = calendar.events[0]
        assert created["summary"] == "Meeting with Asha"
        assert "Notes: Intro call" in created["description"]
        assert created["start"] == at("2024-11-25 10:00")
        assert created["end"] == at("2024-11-25 10:15")
        assert created["timezone"] == TZ

    def test_busy_slot_is_rejected(self, calendar, booking):
        """A slot someone else already took raises and creates nothing."""
        calendar.busy.append(busy("2024-11-25 10:00", "2024-11-25 10:30"))

        with pytest.raises(SlotUnavailable):
            booking.create_event(_details("2024-11-25 10:10"))

        assert calendar.events == []

    def test_second_booking_of_same_slot_conflicts(self, calendar, booking):
        booking.create_event(_details())

        with pytest.raises(SlotUnavailable):
            booking.create_event(_details(name="Ravi"))

        assert len(calendar.events) == 1

    def test_adjacent_slot_can_be_booked(self, calendar, booking):
        booking.create_event(_details("2024-11-25 10:00"))
        booking.create_event(_details("2024-11-25 10:15"))

        assert len(calendar.events) == 2

    def test_concurrent_bookings_create_one_event(self):
        """Two threads racing for one slot: one wins, the other gets a conflict."""
        calendar = SlowCalendarClient(calendar_id="race-calendar", timezone=TZ)
        availability = AvailabilityService(
            calendar_client=calendar,
            schedule=WEEKLY_SCHEDULE,
            slot_calculator=SlotCalculator(slot_minutes=15, rng=NoShuffle()),
        )
        booking = BookingService(calendar_client=calendar, availability=availability)

        barrier = threading.Barrier(2)
        outcomes = []

        def book(name):
            barrier.wait()
            try:
                booking.create_event(_details(name=name))
                outcomes.append("created")
            except SlotUnavailable:
                outcomes.append("conflict")

        threads = [threading.Thread(target=book, args=(name,)) for name in ("Asha", "Ravi")]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert sorted(outcomes) == ["conflict", "created"]
        assert len(calendar.events) == 1


class TestCalendarLocks:

    def test_one_lock_per_calendar(self):
        locks = CalendarLocks()

        assert locks.lock_for("a") is locks.lock_for("a")
        assert locks.lock_for("a") is not locks.lock_for("b")
        assert len(locks) == 2

    def test_held_lock_blocks_booking(self, calendar, availability):
        locks = CalendarLocks()
        booking = BookingService(calendar_client=calendar, availability=availability, locks=locks)
        done = threading.Event()

        with locks.lock_for(calendar.calendar_id):
            worker = threading.Thread(target=lambda: (booking.create_event(_details()), done.set()))
            worker.start()
            assert not done.wait(0.1)

        worker.join()
        assert done.is_set()
        assert len(calendar.events) == 1
