"""Pytest configuration and shared fixtures."""

from datetime import datetime
from typing import Callable, Optional

import pytest

from fasting_app.delivery.memory_delivery import MemoryMessageDelivery
from fasting_app.delivery.notifications import BaseNotifier, NotificationPermission
from fasting_app.logging import configure_logging
from fasting_app.persistence.state_store import StateStore

HOUR_MS = 3_600_000


def local_ms(*args: int) -> int:
    """Epoch ms of a naive local wall-clock time."""
    return int(datetime(*args).timestamp() * 1000)


class FakeClock:
    """Injectable wall clock returning a controllable epoch ms value."""

    def __init__(self, now: int):
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


class FakeNotifier(BaseNotifier):
    """Notifier with scripted capability and permission outcomes."""

    def __init__(
        self,
        supported: bool = True,
        permission: NotificationPermission = NotificationPermission.GRANTED,
        request_result: NotificationPermission = NotificationPermission.GRANTED
    ):
        super().__init__("fake")
        self._supported = supported
        self._permission = permission
        self.request_result = request_result
        self.requests = 0
        self.shown: list[tuple[str, str]] = []

    @property
    def supported(self) -> bool:
        return self._supported

    @property
    def permission(self) -> NotificationPermission:
        return self._permission

    async def request_permission(self) -> NotificationPermission:
        self.requests += 1
        self._permission = self.request_result
        return self._permission

    def notify(self, title: str, body: str) -> bool:
        self.shown.append((title, body))
        return True


@pytest.fixture
def to_local_ms() -> Callable[..., int]:
    """Convert naive local date parts to epoch ms."""
    return local_ms


@pytest.fixture
def clock() -> FakeClock:
    """Clock fixed at 2024-01-10 08:00 local time."""
    return FakeClock(local_ms(2024, 1, 10, 8, 0))


@pytest.fixture
def messages() -> MemoryMessageDelivery:
    return MemoryMessageDelivery()


@pytest.fixture
def store(tmp_path) -> StateStore:
    return StateStore(db_path=str(tmp_path / "tracker.db"))


@pytest.fixture
def make_notifier() -> Callable[..., FakeNotifier]:
    def _make(
        supported: bool = True,
        permission: NotificationPermission = NotificationPermission.GRANTED,
        request_result: Optional[NotificationPermission] = None
    ) -> FakeNotifier:
        return FakeNotifier(
            supported=supported,
            permission=permission,
            request_result=request_result or NotificationPermission.GRANTED
        )
    return _make


@pytest.fixture(autouse=True)
def reset_logging():
    """Rebind logging to the session stderr after tests that reconfigure it."""
    yield
    configure_logging()
