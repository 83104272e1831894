"""
Calendar-day value type.

All day-level date arithmetic used by the slot search lives here: which
calendar day an instant belongs to, which weekday a day is, and where a
given hour of that day falls on the timeline.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import pendulum
from pendulum import Date, DateTime


@dataclass(frozen=True)
class CalendarDay:
    """
    A calendar date interpreted in one reference timezone.

    Weekday numbering follows pendulum: 0=Monday, 6=Sunday.
    """
    date: Date
    tz: Any = "UTC"

    @classmethod
    def of(cls, instant: DateTime) -> "CalendarDay":
        """Return the calendar day an instant falls on, in the instant's own timezone."""
        return cls(date=instant.date(), tz=instant.timezone)

    @property
    def weekday(self) -> int:
        return int(self.date.day_of_week)

    def shift(self, days: int) -> "CalendarDay":
        """Return the calendar day ``days`` days later (earlier when negative)."""
        return CalendarDay(date=self.date.add(days=days), tz=self.tz)

    def contains(self, instant: DateTime) -> bool:
        """Check whether an instant falls on this calendar day."""
        return instant.in_timezone(self.tz).date() == self.date

    def at_hour(self, hour: int) -> DateTime:
        """
        Return this day at ``hour``:00.

        Hour 24 denotes the midnight that closes the day, i.e. 00:00 of the
        following date.
        """
        if hour == 24:
            return self.shift(1).at_hour(0)
        return pendulum.datetime(
            self.date.year,
            self.date.month,
            self.date.day,
            hour,
            tz=self.tz,
        )

    def start(self) -> DateTime:
        return self.at_hour(0)

    def end(self) -> DateTime:
        """Last representable instant of the day (23:59:59.999999)."""
        return self.start().end_of("day")

    def __str__(self) -> str:
        return self.date.format("ddd, MMM D YYYY")
