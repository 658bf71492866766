"""
Timezone-aware time points built on pendulum.

A time point is a ``pendulum.DateTime`` in the configured timezone. Pendulum
already provides add/subtract, comparisons and formatting; this module covers
reading civil input, exchanging instants with the calendar backend and slot
boundary rounding.
"""

import re
from typing import Optional

import pendulum
from pendulum import Date, DateTime

from .exceptions import InvalidTimeFormat

DATE_PATTERN = re.compile(r"^(\d{2})/(\d{2})/(\d{4})$")
TIME_PATTERN = re.compile(r"^([0-1]?[0-9]|2[0-3]):([0-5][0-9])$")

SLOT_FORMAT = "YYYY-MM-DD HH:mm"


def _parse_date_parts(date_str: str) -> tuple:
    match = DATE_PATTERN.match(date_str or "")
    if not match:
        raise InvalidTimeFormat(f"Date must be DD/MM/YYYY, got {date_str!r}")
    day, month, year = (int(part) for part in match.groups())
    return year, month, day


def from_civil_date(date_str: str) -> Date:
    """
    Parse a ``DD/MM/YYYY`` string into a calendar date.

    Raises:
        InvalidTimeFormat: If the string is malformed or names an impossible date
    """
    year, month, day = _parse_date_parts(date_str)
    try:
        return pendulum.date(year, month, day)
    except ValueError as exc:
        raise InvalidTimeFormat(f"Invalid date: {date_str}") from exc


def from_civil(date_str: str, time_str: str, timezone: str) -> DateTime:
    """
    Interpret a ``DD/MM/YYYY`` date and ``HH:mm`` time as wall-clock time
    in the given timezone.

    Raises:
        InvalidTimeFormat: If either part is malformed or impossible
    """
    year, month, day = _parse_date_parts(date_str)

    match = TIME_PATTERN.match(time_str or "")
    if not match:
        raise InvalidTimeFormat(f"Time must be HH:mm, got {time_str!r}")
    hour, minute = (int(part) for part in match.groups())

    try:
        return pendulum.datetime(year, month, day, hour, minute, tz=timezone)
    except ValueError as exc:
        raise InvalidTimeFormat(f"Invalid date/time: {date_str} {time_str}") from exc


def to_external_instant(point: DateTime) -> str:
    """Convert a time point to a UTC ISO-8601 instant for the calendar backend."""
    return point.in_timezone("UTC").to_iso8601_string()


def from_external_instant(value: Optional[str], timezone: str) -> DateTime:
    """
    Parse an ISO-8601 instant from the calendar backend into the given timezone.

    A missing value is an error rather than "now"; a blank timestamp must
    never turn into a phantom busy period.

    Raises:
        InvalidTimeFormat: If the value is missing or not a datetime
    """
    if not value:
        raise InvalidTimeFormat("Missing timestamp in calendar response")

    try:
        parsed = pendulum.parse(value)
    except ValueError as exc:
        raise InvalidTimeFormat(f"Could not parse datetime: {value}") from exc

    if not isinstance(parsed, DateTime):
        raise InvalidTimeFormat(f"Could not parse datetime: {value}")

    return parsed.in_timezone(timezone)


def round_up_to_slot_boundary(point: DateTime, slot_minutes: int) -> DateTime:
    """
    Advance to the next slot boundary, zeroing seconds.

    A point already on a boundary moves a full slot forward, so the result
    is always strictly later than the input minute.
    """
    remainder = point.minute % slot_minutes
    return point.add(minutes=slot_minutes - remainder).set(second=0, microsecond=0)


def weekday_name(day) -> str:
    """English weekday name ("Monday") for a date or datetime."""
    return day.format("dddd", locale="en")


def format_slot_start(point: DateTime) -> str:
    return point.format(SLOT_FORMAT)
