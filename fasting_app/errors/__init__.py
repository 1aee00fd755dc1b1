"""
Error classification system for the fasting tracker.

This module provides a structured exception hierarchy for the conditions the
tracker handles: bad user input, persistence failures and notification
capability problems. None of them is fatal.
"""

from .user_input import (
    TrackerInputError,
    InvalidTimestamp,
    SessionAlreadyActive,
)
from .system_failures import (
    PersistenceError,
    PersistenceReadError,
    PersistenceWriteError,
    NotificationError,
    NotificationUnsupported,
    NotificationDenied,
)
from .recovery import GracefulDegradationError

__all__ = [
    # User input errors
    "TrackerInputError",
    "InvalidTimestamp",
    "SessionAlreadyActive",
    # Persistence
    "PersistenceError",
    "PersistenceReadError",
    "PersistenceWriteError",
    # Notifications
    "NotificationError",
    "NotificationUnsupported",
    "NotificationDenied",
    # Recovery categories
    "GracefulDegradationError",
]
