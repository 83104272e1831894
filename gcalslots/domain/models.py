"""
Domain models for busy intervals, free slots and calendar events.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from pendulum import DateTime

from .calendar_day import CalendarDay
from .exceptions import DataIntegrityError

# Saturday, Sunday
WEEKEND: Tuple[int, ...] = (5, 6)


@dataclass(frozen=True)
class BusyInterval:
    """
    One occupied span on the calendar.

    Invariant: start must not be after end. Zero-length intervals are allowed.
    """
    start: DateTime
    end: DateTime

    def __post_init__(self):
        if self.start > self.end:
            raise DataIntegrityError(
                f"Busy interval starts at {self.start} after it ends at {self.end}"
            )

    def duration_minutes(self) -> int:
        """Return the duration in minutes."""
        return int((self.end - self.start).total_seconds() / 60)

    def __str__(self) -> str:
        return f"{self.start.format('DD.MM.YYYY HH:mm')} - {self.end.format('HH:mm')}"


@dataclass(frozen=True)
class FreeSlot:
    """
    A candidate meeting window of exactly the requested duration.

    Invariant: end - start == duration_minutes.
    """
    start: DateTime
    end: DateTime
    duration_minutes: int

    def __post_init__(self):
        actual = (self.end - self.start).total_seconds() / 60
        if actual != self.duration_minutes:
            raise ValueError(
                f"Slot {self.start} - {self.end} spans {actual:g} minutes, "
                f"expected {self.duration_minutes}"
            )

    def overlaps(self, interval: BusyInterval) -> bool:
        """Check if this slot overlaps with a busy interval."""
        return self.start < interval.end and self.end > interval.start

    def format_display(self) -> str:
        """
        Format the slot for display.
        Format: Mon, Nov 25 at 10:00 AM - 10:30 AM
        """
        date_str = self.start.format("ddd, MMM D")
        return f"{date_str} at {self.start.format('hh:mm A')} - {self.end.format('hh:mm A')}"


@dataclass(frozen=True)
class SearchParameters:
    """
    Parameters of one availability search.

    Range checks happen at the request boundary; the engine only relies on
    ``working_hours_start < working_hours_end`` meaning there is a window.
    """
    duration_minutes: int
    search_days: int = 7
    working_hours_start: int = 9
    working_hours_end: int = 17


@dataclass(frozen=True)
class WorkingHours:
    """
    Daily working window plus the weekdays on which nobody works.
    """
    start_hour: int
    end_hour: int
    exclude_weekdays: Tuple[int, ...] = WEEKEND  # 0=Monday, 6=Sunday

    def is_working_day(self, day: CalendarDay) -> bool:
        """Check if a given calendar day is a working day."""
        return day.weekday not in self.exclude_weekdays

    def window_for(self, day: CalendarDay) -> Optional[Tuple[DateTime, DateTime]]:
        """
        Get the working hours window for a specific day.
        Returns None if it's not a working day or the window is empty.
        """
        if not self.is_working_day(day):
            return None

        start = day.at_hour(self.start_hour)
        end = day.at_hour(self.end_hour)
        if end <= start:
            return None

        return start, end


@dataclass(frozen=True)
class Attendee:
    """An attendee entry on a calendar event."""
    email: str
    response_status: str = "needsAction"
    is_self: bool = False


@dataclass
class CalendarEvent:
    """
    A single (already flattened) calendar event.
    """
    id: str
    summary: str
    start: DateTime
    end: DateTime
    status: str = "confirmed"
    all_day: bool = False
    description: Optional[str] = None
    location: Optional[str] = None
    organizer: Optional[str] = None
    attendees: List[Attendee] = field(default_factory=list)
    html_link: Optional[str] = None
    transparent: bool = False

    @property
    def self_attendee(self) -> Optional[Attendee]:
        for attendee in self.attendees:
            if attendee.is_self:
                return attendee
        return None

    def needs_response(self) -> bool:
        """True when the calendar owner has not answered this invitation yet."""
        attendee = self.self_attendee
        return attendee is not None and attendee.response_status == "needsAction"

    def blocks_time(self) -> bool:
        """Cancelled events and events shown as free do not occupy the calendar."""
        return self.status != "cancelled" and not self.transparent

    def to_busy_interval(self) -> BusyInterval:
        return BusyInterval(start=self.start, end=self.end)

    def format_time_range(self) -> str:
        if self.all_day:
            return "All day"
        return f"{self.start.format('hh:mm A')} - {self.end.format('hh:mm A')}"

    def format_display(self) -> str:
        """
        Format the event as a single line.
        Format: • 10:00 AM - 11:00 AM: Summary (Location)
        """
        location = f" ({self.location})" if self.location else ""
        return f"• {self.format_time_range()}: {self.summary}{location}"
