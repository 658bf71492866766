"""
Domain-specific exception hierarchy for the meeting booking application.
"""


class MeetbookError(Exception):
    """Base class for all application-level errors."""


class InvalidTimeFormat(MeetbookError, ValueError):
    """Raised when a date/time string is malformed or names an impossible value."""


class InvalidInterval(MeetbookError, ValueError):
    """Raised when an interval would end before it starts."""


class NotAWorkingDay(MeetbookError):
    """Raised when a date falls on a weekday without configured working hours."""

    def __init__(self, day_of_week: str):
        super().__init__(f"No schedule configured for {day_of_week}")
        self.day_of_week = day_of_week


class SlotUnavailable(MeetbookError):
    """Raised when a slot was taken between the availability check and the insert."""


class Unauthorized(MeetbookError):
    """Raised when a request carries a missing or wrong API key."""


class UpstreamFailure(MeetbookError):
    """Raised when the calendar backend cannot be reached or answers badly."""


class CalendarAPIError(UpstreamFailure):
    """Raised when calendar data cannot be fetched, parsed or written."""


class AuthenticationError(UpstreamFailure):
    """Raised when the service-account credentials are rejected."""
