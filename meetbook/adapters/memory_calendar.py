"""
In-memory calendar backend for demos and tests without Google credentials.
"""

import json
import uuid
from pathlib import Path
from typing import Dict, Iterable, List, Optional

import pendulum
from pendulum import DateTime

from ..domain.models import CreatedEvent, TimeRange


class InMemoryCalendarClient:
    """
    Fake client that keeps busy periods in a list.

    Busy periods can be seeded directly or loaded from a JSON file of
    ``{"start": ..., "end": ...}`` objects. Inserted events are recorded and
    immediately count as busy, like on a real calendar.
    """

    def __init__(
        self,
        busy: Optional[Iterable[TimeRange]] = None,
        calendar_id: str = "mock",
        timezone: str = "UTC"
    ):
        """
        Initialize the mock client.

        Args:
            busy: Busy periods to start with
            calendar_id: Identifier reported to the booking lock
            timezone: Timezone returned busy periods are converted into
        """
        self.calendar_id = calendar_id
        self.timezone = timezone
        self.busy: List[TimeRange] = list(busy or [])
        self.events: List[Dict[str, object]] = []
        self.queries: List[TimeRange] = []

    @classmethod
    def from_json(cls, data_file: Path, timezone: str, calendar_id: str = "mock") -> "InMemoryCalendarClient":
        """Load busy periods from a JSON file; naive timestamps are read in ``timezone``."""
        with open(data_file, "r", encoding="utf-8") as f:
            entries = json.load(f)

        busy = [
            TimeRange(
                start=pendulum.parse(entry["start"], tz=timezone),
                end=pendulum.parse(entry["end"], tz=timezone),
            )
            for entry in entries
        ]

        return cls(busy=busy, calendar_id=calendar_id, timezone=timezone)

    def query_busy(self, start_time: DateTime, end_time: DateTime) -> List[TimeRange]:
        """Return stored busy periods that overlap the requested window."""
        self.queries.append(TimeRange(start=start_time, end=end_time))

        return [
            busy.in_timezone(self.timezone)
            for busy in self.busy
            if busy.start < end_time and busy.end > start_time
        ]

    def insert_event(
        self,
        *,
        summary: str,
        description: str,
        start_time: DateTime,
        end_time: DateTime,
        timezone: str,
    ) -> CreatedEvent:
        """Record the event and mark its time as busy."""
        event_id = uuid.uuid4().hex
        self.events.append({
            "id": event_id,
            "summary": summary,
            "description": description,
            "start": start_time,
            "end": end_time,
            "timezone": timezone,
        })
        self.busy.append(TimeRange(start=start_time, end=end_time))

        return CreatedEvent(id=event_id, link=f"https://calendar.example.invalid/event/{event_id}")
