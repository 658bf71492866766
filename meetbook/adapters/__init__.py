"""
Adapters layer - External integrations (Google Calendar API).
"""

from .google_calendar import GoogleCalendarClient
from .memory_calendar import InMemoryCalendarClient

__all__ = ["GoogleCalendarClient", "InMemoryCalendarClient"]
