"""
Domain layer - Pure business logic without external dependencies.
"""

from .calendar_day import CalendarDay
from .models import (
    Attendee,
    BusyInterval,
    CalendarEvent,
    FreeSlot,
    SearchParameters,
    WorkingHours,
)
from .slot_finder import SlotFinder

__all__ = [
    "Attendee",
    "BusyInterval",
    "CalendarDay",
    "CalendarEvent",
    "FreeSlot",
    "SearchParameters",
    "SlotFinder",
    "WorkingHours",
]
