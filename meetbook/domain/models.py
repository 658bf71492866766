"""
Domain models for intervals, the weekly working schedule and bookings.
"""

from dataclasses import dataclass, field
from datetime import time
from types import MappingProxyType
from typing import Mapping, Optional, Union

import pendulum
from pendulum import Date, DateTime

from .exceptions import InvalidInterval
from .timepoints import weekday_name


@dataclass(frozen=True)
class TimeRange:
    """
    Represents an immutable time range with start and end datetime.

    Used for working-hours windows, busy periods and candidate slots alike.

    Invariant: start must not be after end.
    """
    start: DateTime
    end: DateTime

    def __post_init__(self):
        if self.start > self.end:
            raise InvalidInterval(f"Start time {self.start} must not be after end time {self.end}")

    def duration_minutes(self) -> int:
        """Return the duration in minutes."""
        return int((self.end - self.start).total_seconds() / 60)

    def overlaps(self, other: "TimeRange") -> bool:
        """Check if this range overlaps with another (half-open, touching is free)."""
        return self.start < other.end and self.end > other.start

    def in_timezone(self, timezone: str) -> "TimeRange":
        """Return the same range expressed in another timezone."""
        return TimeRange(start=self.start.in_timezone(timezone), end=self.end.in_timezone(timezone))

    def __str__(self) -> str:
        return f"{self.start.format('YYYY-MM-DD HH:mm')} - {self.end.format('HH:mm')}"


@dataclass(frozen=True)
class DaySchedule:
    """
    Working hours for one weekday as civil clock times (no date component).
    """
    start: time
    end: time

    def as_dict(self) -> dict:
        return {"start": self.start.strftime("%H:%M"), "end": self.end.strftime("%H:%M")}


@dataclass(frozen=True)
class WeeklySchedule:
    """
    Read-only mapping from weekday name ("Monday") to working hours,
    anchored to one fixed timezone.
    """
    days: Mapping[str, DaySchedule]
    timezone: str

    def __post_init__(self):
        object.__setattr__(self, "days", MappingProxyType(dict(self.days)))

    def schedule_for(self, day_of_week: str) -> Optional[DaySchedule]:
        """Get the working hours for a weekday, or None for a non-working day."""
        return self.days.get(day_of_week)

    def is_working_day(self, day_of_week: str) -> bool:
        """Check if a weekday has working hours configured."""
        return self.schedule_for(day_of_week) is not None

    def next_working_day(
        self,
        from_date: Union[Date, DateTime],
        max_lookahead: int = 7
    ) -> Optional[Union[Date, DateTime]]:
        """
        Find the first working day strictly after ``from_date``.

        Gives up after ``max_lookahead`` days so an empty schedule cannot
        loop forever.
        """
        candidate = from_date.add(days=1)
        for _ in range(max_lookahead):
            if self.is_working_day(weekday_name(candidate)):
                return candidate
            candidate = candidate.add(days=1)
        return None

    def window_for(self, day: Union[Date, DateTime]) -> Optional[TimeRange]:
        """
        Get the working-hours range for a specific calendar day.
        Returns None if it's not a working day.

        Raises:
            InvalidInterval: If the configured start is after the configured end
        """
        day_schedule = self.schedule_for(weekday_name(day))
        if day_schedule is None:
            return None

        start = pendulum.datetime(
            day.year, day.month, day.day,
            day_schedule.start.hour, day_schedule.start.minute,
            tz=self.timezone
        )
        end = pendulum.datetime(
            day.year, day.month, day.day,
            day_schedule.end.hour, day_schedule.end.minute,
            tz=self.timezone
        )

        return TimeRange(start=start, end=end)


@dataclass(frozen=True)
class DayAvailability:
    """Free slots found for one requested day."""
    date: Date
    day_of_week: str
    working_hours: DaySchedule
    slots: list = field(default_factory=list)


@dataclass(frozen=True)
class BookingDetails:
    """Who is booking and when the meeting starts."""
    name: str
    email: str
    mobile: str
    start: DateTime
    notes: Optional[str] = None

    def summary(self) -> str:
        return f"Meeting with {self.name}"

    def description(self) -> str:
        return (
            f"Email: {self.email}\n"
            f"Mobile: {self.mobile}\n"
            f"Notes: {self.notes or 'None'}"
        )


@dataclass(frozen=True)
class CreatedEvent:
    """An event the calendar backend accepted."""
    id: str
    link: Optional[str]
