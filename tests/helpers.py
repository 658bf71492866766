"""
Small builders shared by the tests.
"""

import pendulum

from meetbook.domain.models import TimeRange

TZ = "Asia/Kolkata"


class NoShuffle:
    """Keeps slots in chronological order so tests can assert on them."""

    def shuffle(self, x):
        pass


def at(value: str):
    return pendulum.parse(value, tz=TZ)


def busy(start: str, end: str) -> TimeRange:
    return TimeRange(start=at(start), end=at(end))
