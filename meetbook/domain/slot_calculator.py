"""
Core business logic for calculating bookable meeting slots.

This is the heart of the application - pure domain logic without any
external dependencies (no API calls, no database, no I/O).
"""

import random
from typing import Iterable, List, Optional, Protocol

from pendulum import DateTime

from .models import TimeRange


class Shuffler(Protocol):
    """Anything that can permute a list in place (``random.Random`` qualifies)."""

    def shuffle(self, x: list) -> None:
        ...


class SlotCalculator:
    """
    Splits a search window into fixed-size slots and offers a random
    selection of the free ones.

    Algorithm:
    1. Partition the window into consecutive slots of ``slot_minutes``
    2. Drop every slot that overlaps a busy period
    3. Shuffle the free slots uniformly
    4. Return at most ``cap`` of them

    Shuffling spreads the offered slots across the day instead of always
    proposing the earliest ones.
    """

    def __init__(self, slot_minutes: int = 15, rng: Optional[Shuffler] = None):
        if slot_minutes <= 0:
            raise ValueError("slot_minutes must be greater than zero")
        self.slot_minutes = slot_minutes
        self._rng = rng or random.SystemRandom()

    def generate_slots(
        self,
        window_start: DateTime,
        window_end: DateTime,
        busy_periods: Iterable[TimeRange],
        cap: int
    ) -> List[TimeRange]:
        """
        Find free slots in a window and sample up to ``cap`` of them.

        Args:
            window_start: First instant a slot may start at
            window_end: Last instant a slot may end at
            busy_periods: Busy ranges reported by the calendar
            cap: Maximum number of slots to return

        Returns:
            Randomly ordered free slots, at most ``cap`` long
        """
        if cap <= 0:
            return []

        free = self.free_slots(window_start, window_end, busy_periods)
        self._rng.shuffle(free)

        return free[:cap]

    def free_slots(
        self,
        window_start: DateTime,
        window_end: DateTime,
        busy_periods: Iterable[TimeRange]
    ) -> List[TimeRange]:
        """All free slots in the window, in chronological order."""
        busy = list(busy_periods)

        return [
            candidate for candidate in self.partition(window_start, window_end)
            if self.is_free(candidate, busy)
        ]

    def partition(self, window_start: DateTime, window_end: DateTime) -> List[TimeRange]:
        """
        Cut ``[window_start, window_end)`` into back-to-back slots.

        A trailing remainder shorter than one slot is dropped.
        """
        slots: List[TimeRange] = []
        current = window_start

        while current < window_end:
            slot_end = current.add(minutes=self.slot_minutes)
            if slot_end > window_end:
                break

            slots.append(TimeRange(start=current, end=slot_end))
            current = slot_end

        return slots

    @staticmethod
    def is_free(candidate: TimeRange, busy_periods: Iterable[TimeRange]) -> bool:
        """True when no busy period overlaps the candidate."""
        return not any(candidate.overlaps(busy) for busy in busy_periods)
