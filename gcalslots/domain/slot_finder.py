"""
Core business logic for finding free meeting slots.

This is the heart of the application - pure domain logic without any
external dependencies (no API calls, no database, no I/O).
"""

import logging
from itertools import islice
from typing import Iterator, List, Sequence, Tuple

from pendulum import DateTime, Duration, duration

from .calendar_day import CalendarDay
from .models import WEEKEND, BusyInterval, FreeSlot, SearchParameters, WorkingHours

logger = logging.getLogger(__name__)


class SlotFinder:
    """
    Finds free meeting slots in a single calendar.

    Algorithm:
    1. Walk the calendar days from "now" onwards, skipping excluded weekdays
    2. For each day, open a cursor at the start of working hours (or at "now"
       on the first day)
    3. Walk the busy intervals starting that day in start order; every gap
       in front of the cursor that fits the meeting yields one slot of exactly
       the requested duration, then the cursor jumps past the interval
    4. Whatever is left of the working day after the last interval yields a
       final slot
    5. Stop as soon as MAX_SLOTS slots were found
    """

    MAX_SLOTS = 5

    def __init__(self, exclude_weekdays: Sequence[int] = WEEKEND):
        self.exclude_weekdays = tuple(exclude_weekdays)

    def find_slots(
        self,
        now: DateTime,
        busy_intervals: Sequence[BusyInterval],
        params: SearchParameters,
    ) -> List[FreeSlot]:
        """
        Find up to MAX_SLOTS free slots, earliest first.

        Args:
            now: Reference instant; lower bound for slots on the first day
            busy_intervals: Busy intervals covering at least the search window,
                in any order
            params: Validated search parameters

        Returns:
            List of FreeSlot objects; empty when nothing fits
        """
        slots = list(islice(self.iter_slots(now, busy_intervals, params), self.MAX_SLOTS))
        logger.debug(
            "Found %d free %d-minute slot(s) in %d day(s) from %s",
            len(slots),
            params.duration_minutes,
            params.search_days,
            now,
        )
        return slots

    def iter_slots(
        self,
        now: DateTime,
        busy_intervals: Sequence[BusyInterval],
        params: SearchParameters,
    ) -> Iterator[FreeSlot]:
        """
        Lazily yield free slots day by day.

        The generator is finite: it stops after MAX_SLOTS slots or after the
        last day of the search window, whichever comes first.
        """
        working_hours = WorkingHours(
            start_hour=params.working_hours_start,
            end_hour=params.working_hours_end,
            exclude_weekdays=self.exclude_weekdays,
        )
        length = duration(minutes=params.duration_minutes)
        first_day = CalendarDay.of(now)
        found = 0

        for offset in range(params.search_days):
            day = first_day.shift(offset)
            window = working_hours.window_for(day)

            if window is None:
                continue

            day_busy = self._busy_on_day(day, busy_intervals)
            for slot_start in self._scan_day(now if offset == 0 else None, window, day_busy, length):
                yield FreeSlot(
                    start=slot_start,
                    end=slot_start + length,
                    duration_minutes=params.duration_minutes,
                )
                found += 1
                if found >= self.MAX_SLOTS:
                    return

    @staticmethod
    def _busy_on_day(
        day: CalendarDay,
        busy_intervals: Sequence[BusyInterval],
    ) -> List[BusyInterval]:
        """
        Select the busy intervals that start on the given day, sorted by start.

        Intervals are matched by their start date only; sorted() is stable so
        equal starts keep their input order.
        """
        return sorted(
            (busy for busy in busy_intervals if day.contains(busy.start)),
            key=lambda busy: busy.start,
        )

    @staticmethod
    def _scan_day(
        now: DateTime | None,
        window: Tuple[DateTime, DateTime],
        day_busy: List[BusyInterval],
        length: Duration,
    ) -> Iterator[DateTime]:
        """
        Yield slot start times within one working day.

        The cursor never moves backwards, so nested and overlapping busy
        intervals need no pre-merging.
        """
        day_start, day_end = window
        cursor = max(now, day_start) if now is not None else day_start

        for busy in day_busy:
            # Only the slot start is bound by day_end here; a gap that reaches
            # past the working day may yield a slot ending after day_end.
            if busy.start - cursor >= length and cursor < day_end:
                yield cursor

            cursor = max(cursor, busy.end)

        if day_end - cursor >= length:
            yield cursor
