"""Platform notification mechanisms for the goal-reached alert."""

import asyncio
import shutil
import subprocess
from abc import ABC, abstractmethod
from enum import Enum
from typing import Optional

from ..logging.config import get_logger

NOTIFY_TIMEOUT_SECONDS = 5


class NotificationPermission(str, Enum):
    """Host permission to show notifications."""
    GRANTED = "granted"
    DENIED = "denied"
    DEFAULT = "default"                              # Not asked yet


class BaseNotifier(ABC):
    """Base class for platform notifiers."""

    def __init__(self, name: str):
        self.name = name
        self.logger = get_logger(f"fasting.notifier.{name}")

    @property
    @abstractmethod
    def supported(self) -> bool:
        """Whether the host has any notification capability."""

    @property
    @abstractmethod
    def permission(self) -> NotificationPermission:
        """Current permission state."""

    @abstractmethod
    async def request_permission(self) -> NotificationPermission:
        """Ask the host for permission and return the outcome."""

    @abstractmethod
    def notify(self, title: str, body: str) -> bool:
        """Show a notification. Returns True if it was shown."""


class NullNotifier(BaseNotifier):
    """Notifier for hosts without notification capability."""

    def __init__(self, name: str = "null"):
        super().__init__(name)

    @property
    def supported(self) -> bool:
        return False

    @property
    def permission(self) -> NotificationPermission:
        return NotificationPermission.DENIED

    async def request_permission(self) -> NotificationPermission:
        return NotificationPermission.DENIED

    def notify(self, title: str, body: str) -> bool:
        return False


class CommandNotifier(BaseNotifier):
    """
    Desktop notifications through a command such as ``notify-send``.

    Permission starts undetermined; requesting it test-runs the command once.
    """

    def __init__(self, command: str = "notify-send", name: str = "command"):
        super().__init__(name)
        self.command = command
        self._executable: Optional[str] = shutil.which(command)
        self._permission = NotificationPermission.DEFAULT

    @property
    def supported(self) -> bool:
        return self._executable is not None

    @property
    def permission(self) -> NotificationPermission:
        if not self.supported:
            return NotificationPermission.DENIED
        return self._permission

    async def request_permission(self) -> NotificationPermission:
        if not self.supported:
            return NotificationPermission.DENIED

        try:
            process = await asyncio.create_subprocess_exec(
                self._executable, "--version",
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.DEVNULL,
            )
            returncode = await asyncio.wait_for(process.wait(), NOTIFY_TIMEOUT_SECONDS)
        except (OSError, asyncio.TimeoutError) as e:
            self.logger.warning("Notification command check failed", command=self.command, error=str(e))
            returncode = -1

        self._permission = (
            NotificationPermission.GRANTED if returncode == 0 else NotificationPermission.DENIED
        )
        self.logger.info("Notification permission resolved", permission=self._permission.value)
        return self._permission

    def notify(self, title: str, body: str) -> bool:
        if self.permission != NotificationPermission.GRANTED:
            return False

        try:
            subprocess.run(
                [self._executable, title, body],
                check=True,
                timeout=NOTIFY_TIMEOUT_SECONDS,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
            )
        except (OSError, subprocess.SubprocessError) as e:
            self.logger.warning("Platform notification failed", command=self.command, error=str(e))
            return False

        return True
