"""
Service layer helpers that orchestrate adapters and domain logic.
"""

from .calendar_service import CalendarService, SlotSearchRequest

__all__ = ["CalendarService", "SlotSearchRequest"]
