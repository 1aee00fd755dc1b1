"""
System failure error classifications.

Persistence errors are recovered locally and never reach the user.
Notification errors are surfaced and force the notification preference back
to disabled.
"""

from typing import Any, Optional

from .recovery import GracefulDegradationError


class PersistenceError(GracefulDegradationError):
    """Durable store read or write failure."""

    def __init__(self, message: str, operation: Optional[str] = None,
                 target: Optional[str] = None, context: Optional[dict[str, Any]] = None):
        super().__init__(
            message,
            degraded_functionality="persistence",
            fallback_strategy="defaults" if operation == "read" else "skip_write",
        )
        self.operation = operation
        self.target = target
        self.context = context or {}
        self.recoverable = True


class PersistenceReadError(PersistenceError):
    """Durable record is missing or malformed; defaults are substituted."""

    def __init__(self, message: str, target: Optional[str] = None, **kwargs):
        super().__init__(message, operation="read", target=target, **kwargs)


class PersistenceWriteError(PersistenceError):
    """Snapshot could not be written; the write is skipped."""

    def __init__(self, message: str, target: Optional[str] = None, **kwargs):
        super().__init__(message, operation="write", target=target, **kwargs)


class NotificationError(GracefulDegradationError):
    """Platform notifications cannot be used."""

    def __init__(self, message: str, notifier: Optional[str] = None,
                 context: Optional[dict[str, Any]] = None):
        super().__init__(
            message,
            degraded_functionality="platform_notifications",
            fallback_strategy="disable_preference",
        )
        self.notifier = notifier
        self.context = context or {}
        self.recoverable = True


class NotificationUnsupported(NotificationError):
    """The host has no notification capability."""


class NotificationDenied(NotificationError):
    """The notification permission request was not granted."""

    def __init__(self, message: str, permission: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.permission = permission
