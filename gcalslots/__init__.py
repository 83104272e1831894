"""
gcalslots - read-only Google Calendar views and free meeting slot search.
"""

__version__ = "1.0.0"
