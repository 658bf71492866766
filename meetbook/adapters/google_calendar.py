"""
Google Calendar API client for busy periods and event creation.
"""

import logging
from typing import Any, Dict, List, Optional, Union
from urllib.parse import quote

import requests
from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import AuthorizedSession
from google.oauth2 import service_account
from pendulum import DateTime

from ..domain.exceptions import (
    AuthenticationError,
    CalendarAPIError,
    InvalidInterval,
    InvalidTimeFormat,
)
from ..domain.models import CreatedEvent, TimeRange
from ..domain.timepoints import from_external_instant, to_external_instant

logger = logging.getLogger(__name__)


class GoogleCalendarClient:
    """
    Client for Google Calendar REST operations on a single calendar.

    Uses the /freeBusy endpoint for busy periods and /calendars/{id}/events
    to create bookings. Every call carries a timeout and is never retried;
    failures surface as ``CalendarAPIError`` or ``AuthenticationError``.
    """

    API_ENDPOINT = "https://www.googleapis.com/calendar/v3"
    TOKEN_URI = "https://oauth2.googleapis.com/token"
    SCOPES = ["https://www.googleapis.com/auth/calendar"]

    def __init__(
        self,
        session: requests.Session,
        calendar_id: str,
        timezone: str,
        timeout: float = 10.0
    ):
        """
        Initialize the Calendar API client.

        Args:
            session: An authorized requests session (see ``from_service_account``)
            calendar_id: Calendar to read and write
            timezone: IANA timezone busy periods are converted into
            timeout: Seconds to wait for each HTTP call
        """
        self.session = session
        self.calendar_id = calendar_id
        self.timezone = timezone
        self.timeout = timeout

    @classmethod
    def from_service_account(
        cls,
        client_email: str,
        private_key: str,
        calendar_id: str,
        timezone: str,
        timeout: float = 10.0
    ) -> "GoogleCalendarClient":
        """
        Build a client authenticated as a service account (JWT flow).

        Raises:
            AuthenticationError: If the private key cannot be loaded
        """
        info = {
            "client_email": client_email,
            "private_key": private_key,
            "token_uri": cls.TOKEN_URI,
        }

        try:
            credentials = service_account.Credentials.from_service_account_info(
                info, scopes=cls.SCOPES
            )
        except (ValueError, GoogleAuthError) as e:
            raise AuthenticationError(f"Invalid service account credentials: {e}") from e

        return cls(
            session=AuthorizedSession(credentials),
            calendar_id=calendar_id,
            timezone=timezone,
            timeout=timeout,
        )

    def _calendar_url(self) -> str:
        return f"{self.API_ENDPOINT}/calendars/{quote(self.calendar_id, safe='')}"

    def _request(self, method: str, url: str, payload: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        try:
            response = self.session.request(method, url, json=payload, timeout=self.timeout)
            response.raise_for_status()
            return response.json()

        except GoogleAuthError as e:
            raise AuthenticationError(f"Google authentication failed: {e}") from e

        except requests.exceptions.RequestException as e:
            raise CalendarAPIError(f"Google Calendar request failed: {e}") from e

        except ValueError as e:
            raise CalendarAPIError(f"Google Calendar returned invalid JSON: {e}") from e

    def query_busy(self, start_time: DateTime, end_time: DateTime) -> List[TimeRange]:
        """
        Get busy periods overlapping a time window.

        Args:
            start_time: Start of the time window
            end_time: End of the time window

        Returns:
            Busy TimeRange objects in the client's timezone

        Raises:
            CalendarAPIError: If the API call fails or returns malformed periods
        """
        payload = {
            "timeMin": to_external_instant(start_time),
            "timeMax": to_external_instant(end_time),
            "timeZone": "UTC",
            "items": [{"id": self.calendar_id}],
        }

        data = self._request("POST", f"{self.API_ENDPOINT}/freeBusy", payload)

        return self._parse_freebusy_response(data)

    def _parse_freebusy_response(self, response_data: Dict[str, Any]) -> List[TimeRange]:
        """
        Parse the freeBusy API response into our domain model.

        Response format:
        {
            "calendars": {
                "primary": {
                    "busy": [
                        {"start": "2024-11-25T04:30:00Z", "end": "2024-11-25T05:00:00Z"}
                    ],
                    "errors": [{"domain": "global", "reason": "notFound"}]
                }
            }
        }
        """
        calendar = response_data.get("calendars", {}).get(self.calendar_id, {})

        errors = calendar.get("errors")
        if errors:
            reasons = ", ".join(error.get("reason", "unknown") for error in errors)
            raise CalendarAPIError(f"Calendar {self.calendar_id} returned errors: {reasons}")

        busy_ranges: List[TimeRange] = []

        for item in calendar.get("busy", []):
            try:
                start = from_external_instant(self._instant_value(item.get("start")), self.timezone)
                end = from_external_instant(self._instant_value(item.get("end")), self.timezone)
                busy_ranges.append(TimeRange(start=start, end=end))

            except (InvalidTimeFormat, InvalidInterval) as e:
                raise CalendarAPIError(f"Malformed busy period {item!r}: {e}") from e

        return busy_ranges

    @staticmethod
    def _instant_value(value: Union[str, Dict[str, Any], None]) -> Optional[str]:
        # Busy entries are plain strings; event-style objects carry "dateTime".
        if isinstance(value, dict):
            return value.get("dateTime")
        return value

    def insert_event(
        self,
        *,
        summary: str,
        description: str,
        start_time: DateTime,
        end_time: DateTime,
        timezone: str,
    ) -> CreatedEvent:
        """
        Create an event on the calendar.

        Raises:
            CalendarAPIError: If the API call fails
        """
        event = {
            "summary": summary,
            "description": description,
            "start": {"dateTime": to_external_instant(start_time), "timeZone": timezone},
            "end": {"dateTime": to_external_instant(end_time), "timeZone": timezone},
        }

        data = self._request("POST", f"{self._calendar_url()}/events", event)
        logger.debug("Inserted event %s on %s", data.get("id"), self.calendar_id)

        return CreatedEvent(id=data.get("id", ""), link=data.get("htmlLink"))

    def test_connection(self) -> Dict[str, Any]:
        """
        Test the connection and authentication by fetching calendar metadata.

        Returns:
            Calendar resource data

        Raises:
            CalendarAPIError: If the calendar cannot be read
        """
        return self._request("GET", self._calendar_url())
