"""Goal notification scheduling and the notification permission contract."""

from .goal import (
    GoalNotificationScheduler,
    NotificationPermissionGate,
    ArmingKey,
    goal_body,
)

__all__ = [
    "GoalNotificationScheduler",
    "NotificationPermissionGate",
    "ArmingKey",
    "goal_body",
]
