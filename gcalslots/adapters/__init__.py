"""
Adapters layer - External integrations (Google Calendar API).
"""

from .base import CalendarGateway
from .google_authenticator import GoogleAuthenticator
from .google_calendar_client import GoogleCalendarClient
from .mock_calendar_client import MockCalendarClient

__all__ = ["CalendarGateway", "GoogleAuthenticator", "GoogleCalendarClient", "MockCalendarClient"]
