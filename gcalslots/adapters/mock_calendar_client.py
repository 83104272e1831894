"""
Mock calendar client for trying the tool without Google authentication.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import pendulum
from pendulum import DateTime

from ..domain.models import Attendee, CalendarEvent
from .base import CalendarGateway

logger = logging.getLogger(__name__)


class MockCalendarClient(CalendarGateway):
    """
    Mock client that simulates Google Calendar responses.

    This client loads calendar data from mock_calendar_data.json. Entries are
    placed relative to an anchor day (today by default) so the data never
    goes stale:

        {"id": "...", "summary": "...", "day_offset": 1, "start": "09:30", "end": "10:00"}
        {"id": "...", "summary": "...", "day_offset": 3, "all_day": true}
    """

    def __init__(
        self,
        timezone: str = "Europe/Berlin",
        anchor: Optional[DateTime] = None,
        data_file: Optional[Path] = None,
    ):
        """
        Initialize the mock client.

        Args:
            timezone: IANA timezone the mock events are placed in
            anchor: Day that day_offset 0 refers to, defaults to today
            data_file: Alternative JSON file with mock entries
        """
        super().__init__(timezone=timezone)
        self.anchor = (anchor or pendulum.now(timezone)).in_timezone(timezone).start_of("day")
        self.data_file = data_file or Path(__file__).parent / "mock_calendar_data.json"
        self.calendar_events = self._load_calendar_data()

    def _load_calendar_data(self) -> List[CalendarEvent]:
        """Load mock calendar data from JSON file."""
        if not self.data_file.exists():
            # Fallback to empty if file doesn't exist
            return []

        with open(self.data_file, "r", encoding="utf-8") as f:
            entries = json.load(f)

        events: List[CalendarEvent] = []
        for entry in entries:
            try:
                events.append(self._build_event(entry))
            except (KeyError, ValueError) as e:
                logger.warning("Skipping invalid mock entry %s: %s", entry.get("id", "<unknown>"), e)

        events.sort(key=lambda event: event.start)
        return events

    def _build_event(self, entry: Dict[str, Any]) -> CalendarEvent:
        day = self.anchor.add(days=int(entry["day_offset"]))

        if entry.get("all_day"):
            start = day
            end = day.add(days=int(entry.get("days", 1)))
        else:
            start = day.set(**self._parse_clock(entry["start"]))
            end = day.set(**self._parse_clock(entry["end"]))

        return CalendarEvent(
            id=entry["id"],
            summary=entry.get("summary", "(No title)"),
            start=start,
            end=end,
            status=entry.get("status", "confirmed"),
            all_day=bool(entry.get("all_day", False)),
            location=entry.get("location"),
            organizer=entry.get("organizer"),
            attendees=[
                Attendee(
                    email=attendee["email"],
                    response_status=attendee.get("responseStatus", "needsAction"),
                    is_self=bool(attendee.get("self", False)),
                )
                for attendee in entry.get("attendees", [])
            ],
            transparent=entry.get("transparency") == "transparent",
        )

    @staticmethod
    def _parse_clock(value: str) -> Dict[str, int]:
        hour, minute = value.split(":")
        return {"hour": int(hour), "minute": int(minute)}

    def list_events(self, time_min: DateTime, time_max: DateTime) -> List[CalendarEvent]:
        """
        Return mock events that overlap with the requested time window.

        Args:
            time_min: Start of the time window
            time_max: End of the time window

        Returns:
            List of CalendarEvent objects ordered by start time
        """
        return [
            event for event in self.calendar_events
            if event.start < time_max and event.end > time_min
        ]

    def test_connection(self) -> Dict[str, Any]:
        """
        Mock connection test.

        Returns:
            Mock calendar metadata
        """
        return {
            "id": "mock.user@example.com",
            "summary": "Mock User",
            "timeZone": self.timezone,
        }
