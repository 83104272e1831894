"""
Domain-specific exception hierarchy for the calendar slots application.
"""


class CalendarSlotsError(Exception):
    """Base class for all application-level errors."""


class InvalidParameterError(CalendarSlotsError, ValueError):
    """Raised when a search request violates its documented bounds."""

    def __init__(self, field: str, message: str):
        super().__init__(f"Invalid value for '{field}': {message}")
        self.field = field


class DataIntegrityError(CalendarSlotsError):
    """Raised when the calendar provider hands back malformed interval data."""


class CalendarAPIError(CalendarSlotsError):
    """Raised when calendar data cannot be fetched or parsed."""


class AuthenticationError(CalendarSlotsError):
    """Raised when authentication or token handling fails."""
