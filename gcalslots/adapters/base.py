"""
Calendar gateway interface shared by the real and the mock client.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List

from pendulum import DateTime

from ..domain.calendar_day import CalendarDay
from ..domain.models import BusyInterval, CalendarEvent

logger = logging.getLogger(__name__)


class CalendarGateway(ABC):
    """
    Read-only access to a single calendar.

    Subclasses only implement the raw range query; the day, week and
    invitation views are derived from it.
    """

    def __init__(self, timezone: str = "Europe/Berlin"):
        self.timezone = timezone

    @abstractmethod
    def list_events(self, time_min: DateTime, time_max: DateTime) -> List[CalendarEvent]:
        """Return the single-occurrence events overlapping [time_min, time_max], by start time."""

    @abstractmethod
    def test_connection(self) -> Dict[str, Any]:
        """Return calendar metadata, proving that credentials work."""

    def list_busy_intervals(self, time_min: DateTime, time_max: DateTime) -> List[BusyInterval]:
        """
        Get the busy intervals between two instants.

        Cancelled events and events shown as free are not busy. The result is
        in provider order; callers must not assume it is sorted by day.
        """
        events = self.list_events(time_min, time_max)
        busy = [event.to_busy_interval() for event in events if event.blocks_time()]
        logger.debug(
            "%d of %d event(s) between %s and %s block time",
            len(busy),
            len(events),
            time_min,
            time_max,
        )
        return busy

    def get_events_for_day(self, day: DateTime) -> List[CalendarEvent]:
        """Get all events of the calendar day containing ``day``."""
        calendar_day = CalendarDay.of(day.in_timezone(self.timezone))
        return self.list_events(calendar_day.start(), calendar_day.end())

    def get_events_for_week(self, day: DateTime) -> List[CalendarEvent]:
        """Get all events from Monday to Sunday of the week containing ``day``."""
        week_start = day.in_timezone(self.timezone).start_of("week")
        week_end = week_start.add(days=6).end_of("day")
        return self.list_events(week_start, week_end)

    def get_pending_invites(self, now: DateTime, days: int = 30) -> List[CalendarEvent]:
        """Get upcoming invitations the calendar owner has not answered yet."""
        events = self.list_events(now, now.add(days=days))
        return [event for event in events if event.needs_response()]
