"""
User input error classifications.

These exceptions are raised by state machine operations when a user request
cannot be applied. They are surfaced as user-visible error messages and leave
the application state untouched.
"""

from typing import Any, Optional


class TrackerInputError(Exception):
    """Base class for rejected user requests."""

    def __init__(self, message: str, context: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}
        self.recoverable = True


class InvalidTimestamp(TrackerInputError):
    """Manual start text could not be parsed as a date/time."""

    def __init__(self, message: str, raw_value: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.raw_value = raw_value


class SessionAlreadyActive(TrackerInputError):
    """Start requested while a fast is running and restarts are disabled."""

    def __init__(self, message: str, start_time: Optional[int] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.start_time = start_time
