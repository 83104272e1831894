"""
Application services for calendar views and free slot search.

The service coordinates fetching calendar data via a gateway adapter and
delegates the actual availability calculation to the domain-level
``SlotFinder``. This keeps the CLI thin and improves testability by
allowing the calendar dependency to be replaced by a stub.
"""

from __future__ import annotations

import logging
from typing import List, Optional

import pendulum
from pendulum import DateTime
from pydantic import BaseModel, Field, ValidationError

from ..adapters.base import CalendarGateway
from ..domain.exceptions import InvalidParameterError
from ..domain.models import CalendarEvent, FreeSlot, SearchParameters
from ..domain.slot_finder import SlotFinder

logger = logging.getLogger(__name__)


class SlotSearchRequest(BaseModel):
    """A free slot search as requested by a caller, before it reaches the engine."""

    duration_minutes: int = Field(ge=15, le=480)
    search_days: int = Field(default=7, ge=1, le=14)
    working_hours_start: int = Field(default=9, ge=0, le=23)
    working_hours_end: int = Field(default=17, ge=1, le=24)

    @classmethod
    def create(cls, **values) -> "SlotSearchRequest":
        """
        Validate raw request values.

        Raises:
            InvalidParameterError: If any value is outside its documented bounds
        """
        try:
            return cls(**values)
        except ValidationError as exc:
            error = exc.errors()[0]
            field = ".".join(str(part) for part in error["loc"]) or "request"
            raise InvalidParameterError(field, error["msg"]) from exc

    def to_parameters(self) -> SearchParameters:
        return SearchParameters(
            duration_minutes=self.duration_minutes,
            search_days=self.search_days,
            working_hours_start=self.working_hours_start,
            working_hours_end=self.working_hours_end,
        )


class CalendarService:
    """
    Orchestrates calendar retrieval and slot search.

    Depending on the CalendarGateway interface makes it easy to plug in the
    real Google adapter or the mock implementation in tests.
    """

    def __init__(
        self,
        calendar_client: CalendarGateway,
        slot_finder: SlotFinder,
        pending_invite_days: int = 30,
    ) -> None:
        self._calendar_client = calendar_client
        self._slot_finder = slot_finder
        self._pending_invite_days = pending_invite_days

    def _now(self, now: Optional[DateTime]) -> DateTime:
        """Normalize the reference instant to the calendar's timezone."""
        timezone = self._calendar_client.timezone
        return (now or pendulum.now(timezone)).in_timezone(timezone)

    def now(self) -> DateTime:
        """Current instant in the calendar's timezone."""
        return self._now(None)

    def find_available_slots(
        self,
        request: SlotSearchRequest,
        now: Optional[DateTime] = None,
    ) -> List[FreeSlot]:
        """
        Retrieve busy data for the search window and compute free slots.

        An empty list means no availability; it is not an error.
        """
        now = self._now(now)
        params = request.to_parameters()

        busy_intervals = self._calendar_client.list_busy_intervals(
            now,
            now.add(days=params.search_days),
        )
        logger.debug("Searching %d busy interval(s) for %s", len(busy_intervals), params)

        return self._slot_finder.find_slots(now, busy_intervals, params)

    def events_today(self, now: Optional[DateTime] = None) -> List[CalendarEvent]:
        """Get all events of the current day."""
        return self._calendar_client.get_events_for_day(self._now(now))

    def events_this_week(self, now: Optional[DateTime] = None) -> List[CalendarEvent]:
        """Get all events of the current week (Monday to Sunday)."""
        return self._calendar_client.get_events_for_week(self._now(now))

    def pending_invites(self, now: Optional[DateTime] = None) -> List[CalendarEvent]:
        """Get invitations that still require a response."""
        return self._calendar_client.get_pending_invites(
            self._now(now),
            days=self._pending_invite_days,
        )
