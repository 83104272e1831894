"""
Google Calendar API client for fetching calendar data.
"""

import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import pendulum
import requests
from pendulum import DateTime

from ..domain.exceptions import CalendarAPIError, DataIntegrityError
from ..domain.models import Attendee, CalendarEvent
from .base import CalendarGateway

logger = logging.getLogger(__name__)


class GoogleCalendarClient(CalendarGateway):
    """
    Client for Google Calendar API v3 read operations.

    Uses the /calendars/{calendarId}/events endpoint with singleEvents=true,
    so recurring events arrive already expanded into single occurrences.
    """

    API_ENDPOINT = "https://www.googleapis.com/calendar/v3"
    PAGE_SIZE = 250

    def __init__(
        self,
        session: requests.Session,
        calendar_id: str = "primary",
        timezone: str = "Europe/Berlin",
        timeout: int = 30,
    ):
        """
        Initialize the Google Calendar client.

        Args:
            session: Authorized requests session (e.g. google-auth AuthorizedSession)
            calendar_id: Calendar to read, "primary" for the signed-in user
            timezone: IANA timezone every instant is normalized to
            timeout: Request timeout in seconds
        """
        super().__init__(timezone=timezone)
        self.session = session
        self.calendar_id = calendar_id
        self.timeout = timeout

    @property
    def _calendar_path(self) -> str:
        return f"calendars/{quote(self.calendar_id, safe='')}"

    def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        url = f"{self.API_ENDPOINT}/{path}"

        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
            response.raise_for_status()
            return response.json()

        except requests.exceptions.RequestException as e:
            raise CalendarAPIError(f"Failed to fetch {path} from Google Calendar: {e}") from e
        except ValueError as e:
            raise CalendarAPIError(f"Google Calendar returned invalid JSON for {path}: {e}") from e

    def list_events(self, time_min: DateTime, time_max: DateTime) -> List[CalendarEvent]:
        """
        Get all events overlapping a time window, following result pages.

        Args:
            time_min: Start of the time window
            time_max: End of the time window

        Returns:
            List of CalendarEvent objects ordered by start time

        Raises:
            CalendarAPIError: If the API call fails
            DataIntegrityError: If an event has an invalid or inverted start/end
        """
        params: Dict[str, Any] = {
            "timeMin": self._to_rfc3339(time_min),
            "timeMax": self._to_rfc3339(time_max),
            "singleEvents": "true",
            "orderBy": "startTime",
            "maxResults": self.PAGE_SIZE,
            "timeZone": self.timezone,
        }
        logger.debug("Listing events of %s from %s to %s", self.calendar_id, time_min, time_max)

        events: List[CalendarEvent] = []
        while True:
            data = self._get(f"{self._calendar_path}/events", params=params)

            events.extend(self._parse_event(item) for item in data.get("items", []))

            page_token = data.get("nextPageToken")
            if not page_token:
                break
            params["pageToken"] = page_token

        return events

    def _parse_event(self, item: Dict[str, Any]) -> CalendarEvent:
        """
        Parse one events.list item into our domain model.

        Item format:
        {
            "id": "abc123",
            "summary": "Standup",
            "status": "confirmed",
            "start": {"dateTime": "2024-11-25T09:00:00+01:00"} | {"date": "2024-11-25"},
            "end": {"dateTime": "..."} | {"date": "2024-11-26"},
            "organizer": {"email": "..."},
            "attendees": [{"email": "...", "responseStatus": "needsAction", "self": true}]
        }

        Raises:
            DataIntegrityError: If start or end cannot be parsed, or end precedes start
        """
        try:
            start, all_day = self._parse_boundary(item["start"])
            end, _ = self._parse_boundary(item["end"])
        except (KeyError, TypeError, ValueError) as e:
            raise DataIntegrityError(
                f"Event {item.get('id', '<unknown>')} has an invalid start or end: {e!r}"
            ) from e

        if start > end:
            raise DataIntegrityError(
                f"Event {item.get('id', '<unknown>')} ends at {end} before it starts at {start}"
            )

        attendees = [
            Attendee(
                email=attendee.get("email", ""),
                response_status=attendee.get("responseStatus", "needsAction"),
                is_self=bool(attendee.get("self", False)),
            )
            for attendee in item.get("attendees", [])
        ]

        return CalendarEvent(
            id=item.get("id", ""),
            summary=item.get("summary") or "(No title)",
            start=start,
            end=end,
            status=item.get("status") or "confirmed",
            all_day=all_day,
            description=item.get("description") or None,
            location=item.get("location") or None,
            organizer=item.get("organizer", {}).get("email"),
            attendees=attendees,
            html_link=item.get("htmlLink") or None,
            transparent=item.get("transparency") == "transparent",
        )

    def _parse_boundary(self, boundary: Dict[str, str]) -> tuple[DateTime, bool]:
        """
        Parse an event start/end object.

        Timed boundaries are converted to the reference timezone; all-day
        boundaries become midnight of that date in the reference timezone.
        """
        if boundary.get("dateTime"):
            return self._parse_datetime(boundary["dateTime"]), False

        return pendulum.from_format(boundary["date"], "YYYY-MM-DD", tz=self.timezone), True

    def _parse_datetime(self, datetime_str: str) -> DateTime:
        """
        Parse a datetime string to a pendulum DateTime in the reference timezone.

        Args:
            datetime_str: RFC 3339 datetime string

        Returns:
            Pendulum DateTime object
        """
        dt = pendulum.parse(datetime_str, tz=self.timezone)

        if isinstance(dt, DateTime):
            return dt.in_timezone(self.timezone)

        raise ValueError(f"Could not parse datetime: {datetime_str}")

    @staticmethod
    def _to_rfc3339(dt: DateTime) -> str:
        return dt.in_timezone("UTC").to_iso8601_string()

    def test_connection(self) -> Dict[str, Any]:
        """
        Test the connection and authentication by fetching the calendar resource.

        Returns:
            Calendar metadata

        Raises:
            CalendarAPIError: If connection test fails
        """
        return self._get(self._calendar_path)
