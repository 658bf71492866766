"""
Shared fixtures for the test suite.
"""

import pytest

from meetbook.adapters import InMemoryCalendarClient
from meetbook.config import WEEKLY_SCHEDULE
from meetbook.domain.slot_calculator import SlotCalculator
from meetbook.services import AvailabilityService, BookingService

from .helpers import TZ, NoShuffle


@pytest.fixture
def calendar():
    return InMemoryCalendarClient(calendar_id="test-calendar", timezone=TZ)


@pytest.fixture
def availability(calendar):
    return AvailabilityService(
        calendar_client=calendar,
        schedule=WEEKLY_SCHEDULE,
        slot_calculator=SlotCalculator(slot_minutes=15, rng=NoShuffle()),
    )


@pytest.fixture
def booking(calendar, availability):
    return BookingService(calendar_client=calendar, availability=availability)

