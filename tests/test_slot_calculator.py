"""
Tests for slot calculator.
"""

import random
from itertools import permutations
from collections import Counter

import pytest

from meetbook.domain.slot_calculator import SlotCalculator

from .helpers import NoShuffle, at, busy


class TestPartition:
    """Tests for cutting a window into fixed-size slots."""

    def test_partition_full_window(self):
        """A busy-free window yields floor(length / slot) back-to-back slots."""
        calculator = SlotCalculator(slot_minutes=15)

        slots = calculator.partition(at("2024-11-25 09:00"), at("2024-11-25 20:00"))

        assert len(slots) == 44
        assert all(slot.duration_minutes() == 15 for slot in slots)
        assert slots[0].start == at("2024-11-25 09:00")
        assert slots[-1].end == at("2024-11-25 20:00")
        for earlier, later in zip(slots, slots[1:]):
            assert earlier.end == later.start
            assert not earlier.overlaps(later)

    def test_partition_drops_partial_trailing_slot(self):
        """A remainder shorter than one slot is not offered."""
        calculator = SlotCalculator(slot_minutes=15)

        slots = calculator.partition(at("2024-11-25 09:00"), at("2024-11-25 09:40"))

        assert [slot.start for slot in slots] == [at("2024-11-25 09:00"), at("2024-11-25 09:15")]

    def test_partition_empty_or_reversed_window(self):
        calculator = SlotCalculator(slot_minutes=15)

        assert calculator.partition(at("2024-11-25 10:00"), at("2024-11-25 10:00")) == []
        assert calculator.partition(at("2024-11-25 11:00"), at("2024-11-25 10:00")) == []

    def test_rejects_non_positive_slot_length(self):
        with pytest.raises(ValueError):
            SlotCalculator(slot_minutes=0)


class TestGenerateSlots:
    """Tests for SlotCalculator.generate_slots."""

    def test_find_slots_no_busy_times(self):
        """Test finding slots when the calendar is empty."""
        calculator = SlotCalculator(slot_minutes=15, rng=NoShuffle())

        slots = calculator.generate_slots(
            window_start=at("2024-11-25 09:00"),
            window_end=at("2024-11-25 10:00"),
            busy_periods=[],
            cap=10
        )

        assert [slot.start.format("HH:mm") for slot in slots] == ["09:00", "09:15", "09:30", "09:45"]

    def test_find_slots_with_busy_times(self):
        """Slots overlapping a busy period are dropped; touching ones are kept."""
        calculator = SlotCalculator(slot_minutes=15, rng=NoShuffle())

        slots = calculator.generate_slots(
            window_start=at("2024-11-25 09:00"),
            window_end=at("2024-11-25 11:00"),
            busy_periods=[busy("2024-11-25 09:30", "2024-11-25 10:10")],
            cap=10
        )

        assert [slot.start.format("HH:mm") for slot in slots] == [
            "09:00", "09:15", "10:15", "10:30", "10:45"
        ]

    def test_duplicate_busy_periods_are_tolerated(self):
        """Overlapping and duplicated busy periods give the same result as one."""
        calculator = SlotCalculator(slot_minutes=15, rng=NoShuffle())
        meeting = busy("2024-11-25 09:15", "2024-11-25 09:45")

        once = calculator.free_slots(at("2024-11-25 09:00"), at("2024-11-25 10:00"), [meeting])
        twice = calculator.free_slots(
            at("2024-11-25 09:00"),
            at("2024-11-25 10:00"),
            [meeting, meeting, busy("2024-11-25 09:20", "2024-11-25 09:40")]
        )

        assert once == twice

    def test_cap_limits_results(self):
        calculator = SlotCalculator(slot_minutes=15, rng=random.Random(7))

        slots = calculator.generate_slots(
            window_start=at("2024-11-25 09:00"),
            window_end=at("2024-11-25 20:00"),
            busy_periods=[],
            cap=4
        )

        assert len(slots) == 4
        assert len(set(slots)) == 4

    @pytest.mark.parametrize("cap", [0, -1])
    def test_non_positive_cap_returns_nothing(self, cap):
        calculator = SlotCalculator(slot_minutes=15)

        assert calculator.generate_slots(at("2024-11-25 09:00"), at("2024-11-25 10:00"), [], cap) == []

    def test_reversed_window_returns_nothing(self):
        calculator = SlotCalculator(slot_minutes=15)

        assert calculator.generate_slots(at("2024-11-25 10:00"), at("2024-11-25 09:00"), [], 4) == []

    def test_sampled_slots_are_free_members(self):
        """Whatever is sampled comes from the free candidates."""
        calculator = SlotCalculator(slot_minutes=15, rng=random.Random(3))
        busy_periods = [busy("2024-11-25 12:00", "2024-11-25 15:00")]

        free = calculator.free_slots(at("2024-11-25 09:00"), at("2024-11-25 20:00"), busy_periods)
        sampled = calculator.generate_slots(at("2024-11-25 09:00"), at("2024-11-25 20:00"), busy_periods, 4)

        assert set(sampled) <= set(free)

    def test_shuffle_reaches_every_order(self):
        """Every permutation of the free slots shows up with a seeded source."""
        calculator = SlotCalculator(slot_minutes=15, rng=random.Random(1234))
        start, end = at("2024-11-25 09:00"), at("2024-11-25 09:45")
        free = calculator.free_slots(start, end, [])

        seen = Counter(
            tuple(calculator.generate_slots(start, end, [], cap=3))
            for _ in range(600)
        )

        assert set(seen) == set(permutations(free))
        assert min(seen.values()) > 50
