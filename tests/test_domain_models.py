"""
Tests for domain models.
"""

import pendulum
import pytest

from gcalslots.domain.calendar_day import CalendarDay
from gcalslots.domain.exceptions import DataIntegrityError
from gcalslots.domain.models import (
    Attendee,
    BusyInterval,
    CalendarEvent,
    FreeSlot,
    WorkingHours,
)


class TestBusyInterval:
    """Tests for BusyInterval model."""

    def test_create_valid_interval(self):
        """Test creating a valid busy interval."""
        start = pendulum.parse("2024-11-25 09:00", tz="Europe/Berlin")
        end = pendulum.parse("2024-11-25 17:00", tz="Europe/Berlin")

        interval = BusyInterval(start=start, end=end)

        assert interval.start == start
        assert interval.end == end
        assert interval.duration_minutes() == 480  # 8 hours

    def test_zero_length_interval_is_allowed(self):
        moment = pendulum.parse("2024-11-25 09:00", tz="Europe/Berlin")

        assert BusyInterval(start=moment, end=moment).duration_minutes() == 0

    def test_inverted_interval_raises_data_integrity_error(self):
        """An interval ending before it starts is a provider defect and must surface."""
        start = pendulum.parse("2024-11-25 17:00", tz="Europe/Berlin")
        end = pendulum.parse("2024-11-25 09:00", tz="Europe/Berlin")

        with pytest.raises(DataIntegrityError, match="after it ends"):
            BusyInterval(start=start, end=end)


class TestFreeSlot:
    """Tests for FreeSlot model."""

    def test_duration_invariant(self):
        """A slot must span exactly its declared duration."""
        start = pendulum.parse("2024-11-25 10:00", tz="Europe/Berlin")

        with pytest.raises(ValueError, match="expected 30"):
            FreeSlot(start=start, end=start.add(minutes=45), duration_minutes=30)

    def test_overlaps(self):
        """Test overlap detection against busy intervals."""
        slot = FreeSlot(
            start=pendulum.parse("2024-11-25 10:00", tz="Europe/Berlin"),
            end=pendulum.parse("2024-11-25 10:30", tz="Europe/Berlin"),
            duration_minutes=30,
        )
        touching = BusyInterval(
            start=pendulum.parse("2024-11-25 10:30", tz="Europe/Berlin"),
            end=pendulum.parse("2024-11-25 11:00", tz="Europe/Berlin"),
        )
        overlapping = BusyInterval(
            start=pendulum.parse("2024-11-25 10:15", tz="Europe/Berlin"),
            end=pendulum.parse("2024-11-25 11:00", tz="Europe/Berlin"),
        )

        assert not slot.overlaps(touching)
        assert slot.overlaps(overlapping)

    def test_format_display(self):
        slot = FreeSlot(
            start=pendulum.parse("2024-11-25 10:00", tz="Europe/Berlin"),
            end=pendulum.parse("2024-11-25 10:30", tz="Europe/Berlin"),
            duration_minutes=30,
        )

        assert slot.format_display() == "Mon, Nov 25 at 10:00 AM - 10:30 AM"


class TestCalendarDay:
    """Tests for the CalendarDay value type."""

    def test_of_uses_the_instants_timezone(self):
        instant = pendulum.parse("2024-11-25 00:30", tz="Europe/Berlin")

        day = CalendarDay.of(instant)

        assert day.date == pendulum.date(2024, 11, 25)
        assert day.weekday == 0  # Monday

    def test_contains_compares_in_reference_timezone(self):
        """23:30 UTC on Sunday is already Monday in Berlin."""
        monday = CalendarDay.of(pendulum.parse("2024-11-25 12:00", tz="Europe/Berlin"))

        assert monday.contains(pendulum.parse("2024-11-24 23:30", tz="UTC"))
        assert not monday.contains(pendulum.parse("2024-11-24 22:30", tz="UTC"))

    def test_shift_and_weekday(self):
        monday = CalendarDay.of(pendulum.parse("2024-11-25 12:00", tz="Europe/Berlin"))

        assert monday.shift(5).weekday == 5  # Saturday
        assert monday.shift(-1).date == pendulum.date(2024, 11, 24)

    def test_at_hour(self):
        day = CalendarDay.of(pendulum.parse("2024-11-25 12:00", tz="Europe/Berlin"))

        assert day.at_hour(9) == pendulum.datetime(2024, 11, 25, 9, tz="Europe/Berlin")
        assert day.at_hour(24) == pendulum.datetime(2024, 11, 26, 0, tz="Europe/Berlin")

    def test_day_bounds(self):
        day = CalendarDay.of(pendulum.parse("2024-11-25 12:00", tz="Europe/Berlin"))

        assert day.start() == pendulum.datetime(2024, 11, 25, tz="Europe/Berlin")
        assert day.end() == pendulum.datetime(2024, 11, 25, 23, 59, 59, 999999, tz="Europe/Berlin")

    def test_at_hour_on_dst_change(self):
        """Working hours stay wall-clock hours on the day clocks go back."""
        day = CalendarDay.of(pendulum.parse("2024-10-27 12:00", tz="Europe/Berlin"))

        start = day.at_hour(9)

        assert start.hour == 9
        assert start.offset_hours == 1


class TestWorkingHours:
    """Tests for WorkingHours model."""

    def test_is_working_day(self):
        """Test working day detection."""
        working_hours = WorkingHours(start_hour=9, end_hour=17, exclude_weekdays=(5, 6))

        monday = CalendarDay.of(pendulum.parse("2024-11-25", tz="Europe/Berlin"))
        saturday = CalendarDay.of(pendulum.parse("2024-11-23", tz="Europe/Berlin"))
        sunday = CalendarDay.of(pendulum.parse("2024-11-24", tz="Europe/Berlin"))

        assert working_hours.is_working_day(monday)
        assert not working_hours.is_working_day(saturday)
        assert not working_hours.is_working_day(sunday)

    def test_window_for_day(self):
        """Test getting working hours for a specific day."""
        working_hours = WorkingHours(start_hour=9, end_hour=17)

        monday = CalendarDay.of(pendulum.parse("2024-11-25", tz="Europe/Berlin"))
        window = working_hours.window_for(monday)

        assert window is not None
        start, end = window
        assert start == pendulum.datetime(2024, 11, 25, 9, tz="Europe/Berlin")
        assert end == pendulum.datetime(2024, 11, 25, 17, tz="Europe/Berlin")

    def test_window_for_weekend(self):
        """Test getting working hours for weekend returns None."""
        working_hours = WorkingHours(start_hour=9, end_hour=17)

        saturday = CalendarDay.of(pendulum.parse("2024-11-23", tz="Europe/Berlin"))

        assert working_hours.window_for(saturday) is None

    def test_empty_window(self):
        """Start hour at or after end hour means no window at all."""
        monday = CalendarDay.of(pendulum.parse("2024-11-25", tz="Europe/Berlin"))

        assert WorkingHours(start_hour=12, end_hour=12).window_for(monday) is None
        assert WorkingHours(start_hour=17, end_hour=9).window_for(monday) is None


class TestCalendarEvent:
    """Tests for CalendarEvent model."""

    def _event(self, **overrides) -> CalendarEvent:
        values = dict(
            id="evt-1",
            summary="Design Review",
            start=pendulum.parse("2024-11-25 11:00", tz="Europe/Berlin"),
            end=pendulum.parse("2024-11-25 12:30", tz="Europe/Berlin"),
        )
        values.update(overrides)
        return CalendarEvent(**values)

    def test_needs_response(self):
        pending = self._event(attendees=[
            Attendee(email="boss@example.com", response_status="accepted"),
            Attendee(email="me@example.com", response_status="needsAction", is_self=True),
        ])
        answered = self._event(attendees=[
            Attendee(email="me@example.com", response_status="accepted", is_self=True),
        ])
        own_event = self._event()

        assert pending.needs_response()
        assert not answered.needs_response()
        assert not own_event.needs_response()

    def test_blocks_time(self):
        assert self._event().blocks_time()
        assert not self._event(transparent=True).blocks_time()
        assert not self._event(status="cancelled").blocks_time()

    def test_format_display(self):
        event = self._event(location="Room 2.14")

        assert event.format_display() == "• 11:00 AM - 12:30 PM: Design Review (Room 2.14)"

    def test_format_display_all_day(self):
        event = self._event(
            summary="Offsite",
            start=pendulum.parse("2024-11-25", tz="Europe/Berlin"),
            end=pendulum.parse("2024-11-26", tz="Europe/Berlin"),
            all_day=True,
        )

        assert event.format_display() == "• All day: Offsite"
