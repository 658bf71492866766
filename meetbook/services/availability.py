"""
Application services for finding free meeting slots.

The service coordinates fetching busy periods via a calendar client adapter
and delegates the per-window slot calculation to the domain-level
``SlotCalculator``. The calendar dependency is a simple protocol, so tests
plug in a fake busy-period source without touching process-wide state.
"""

from __future__ import annotations

import logging
from typing import Callable, List, Optional, Protocol, Sequence

import pendulum
from pendulum import Date, DateTime

from ..domain.exceptions import InvalidInterval, NotAWorkingDay
from ..domain.models import CreatedEvent, DayAvailability, TimeRange, WeeklySchedule
from ..domain.slot_calculator import SlotCalculator
from ..domain.timepoints import format_slot_start, round_up_to_slot_boundary, weekday_name

logger = logging.getLogger(__name__)

PROBE_PADDING_MINUTES = 1


class CalendarClientProtocol(Protocol):
    """Protocol describing the calendar backend behaviour needed by the services."""

    calendar_id: str

    def query_busy(self, start_time: DateTime, end_time: DateTime) -> List[TimeRange]:
        """Return busy ranges overlapping the window, in the schedule timezone."""

    def insert_event(
        self,
        *,
        summary: str,
        description: str,
        start_time: DateTime,
        end_time: DateTime,
        timezone: str,
    ) -> CreatedEvent:
        """Create an event and return its id and link."""


class AvailabilityService:
    """
    Answers "which slots are free" and "is this slot free" for one calendar.

    Nothing is cached between calls: every question re-fetches busy periods.
    """

    def __init__(
        self,
        calendar_client: CalendarClientProtocol,
        schedule: WeeklySchedule,
        slot_calculator: SlotCalculator,
        clock: Optional[Callable[[], DateTime]] = None,
    ) -> None:
        self._calendar_client = calendar_client
        self._schedule = schedule
        self._slot_calculator = slot_calculator
        self._clock = clock or (lambda: pendulum.now(schedule.timezone))

    @property
    def schedule(self) -> WeeklySchedule:
        return self._schedule

    @property
    def slot_minutes(self) -> int:
        return self._slot_calculator.slot_minutes

    def now(self) -> DateTime:
        return self._clock().in_timezone(self._schedule.timezone)

    def upcoming_free_slots(
        self,
        *,
        now: Optional[DateTime] = None,
        cap: int = 4,
        max_days_lookahead: int = 7,
    ) -> List[TimeRange]:
        """
        Collect up to ``cap`` free slots starting from the present.

        Today's remaining working hours are searched first (from the next
        slot boundary, never before opening), then following working days until the cap is met or
        ``max_days_lookahead`` days have been tried.
        """
        now = (now or self.now()).in_timezone(self._schedule.timezone)
        slots: List[TimeRange] = []

        try:
            today = self._schedule.window_for(now)
        except InvalidInterval as exc:
            logger.warning("Skipping today: %s", exc)
            today = None

        if today is not None and now < today.end:
            start = max(today.start, round_up_to_slot_boundary(now, self.slot_minutes))
            slots.extend(self.search_window(start, today.end, cap))

        day = self._schedule.next_working_day(now)
        attempts = 0

        while len(slots) < cap and day is not None and attempts < max_days_lookahead:
            try:
                window = self._schedule.window_for(day)
            except InvalidInterval as exc:
                logger.warning("Skipping %s: %s", day.format("YYYY-MM-DD"), exc)
            else:
                if window is not None:
                    slots.extend(self.search_window(window.start, window.end, cap - len(slots)))

            day = self._schedule.next_working_day(day)
            attempts += 1

        if len(slots) < cap:
            logger.info("Only %d of %d upcoming slots found", len(slots), cap)

        return slots[:cap]

    def slots_for_day(self, day: Date, *, cap: int = 4) -> DayAvailability:
        """
        Sample free slots across one day's full working hours.

        Raises:
            NotAWorkingDay: If the day's weekday has no configured hours
        """
        day_of_week = weekday_name(day)
        day_schedule = self._schedule.schedule_for(day_of_week)
        if day_schedule is None:
            raise NotAWorkingDay(day_of_week)

        window = self._schedule.window_for(day)

        return DayAvailability(
            date=day,
            day_of_week=day_of_week,
            working_hours=day_schedule,
            slots=self.search_window(window.start, window.end, cap),
        )

    def search_window(self, start: DateTime, end: DateTime, cap: int) -> List[TimeRange]:
        """Fetch busy periods for one window and sample its free slots."""
        if start >= end or cap <= 0:
            return []

        busy = self._calendar_client.query_busy(start, end)
        logger.debug("Window %s - %s has %d busy period(s)", start, end, len(busy))

        return self._slot_calculator.generate_slots(
            window_start=start,
            window_end=end,
            busy_periods=busy,
            cap=cap,
        )

    def is_available(self, requested_start: DateTime) -> bool:
        """
        Check whether a single slot starting at ``requested_start`` is free.

        The busy query is padded by a minute on both sides to tolerate
        backends that report boundaries slightly off.
        """
        slot = TimeRange(
            start=requested_start,
            end=requested_start.add(minutes=self.slot_minutes),
        )

        busy = self._calendar_client.query_busy(
            slot.start.subtract(minutes=PROBE_PADDING_MINUTES),
            slot.end.add(minutes=PROBE_PADDING_MINUTES),
        )

        return SlotCalculator.is_free(slot, busy)

    @staticmethod
    def describe(slots: Sequence[TimeRange]) -> List[str]:
        """Format slot starts as ``YYYY-MM-DD HH:mm`` strings."""
        return [format_slot_start(slot.start) for slot in slots]
