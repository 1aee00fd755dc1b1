"""
Goal-reached notification scheduling.

At most one deferred alert is pending at any time. Every re-arm bumps an
arming generation; a deferred callback whose captured generation is no longer
current does nothing, so a stale alert can never fire.
"""

import asyncio
from dataclasses import dataclass
from typing import Callable, Optional

from ..data.plans import Plan
from ..delivery.base import BaseMessageDelivery
from ..delivery.notifications import BaseNotifier, NotificationPermission
from ..errors import NotificationDenied, NotificationError, NotificationUnsupported
from ..logging.config import get_scheduler_logger
from ..state.models import AppState
from ..utils.time import MS_PER_SECOND, now_ms, to_iso_utc

GOAL_TITLE = "Fasting goal reached!"
GOAL_MESSAGE = "Fasting goal reached! You can open your eating window."
UNSUPPORTED_MESSAGE = "Notifications not supported on this system."
DENIED_MESSAGE = "Notifications denied."

logger = get_scheduler_logger(__name__)


def goal_body(fast_hours: int) -> str:
    return f"{fast_hours}h complete. Great job 👏"


@dataclass(frozen=True)
class ArmingKey:
    """Inputs that decide whether and when the alert is armed."""
    notifications: bool
    start_time: Optional[int]
    target_end_time: Optional[int]
    fast_hours: int

    @classmethod
    def from_state(cls, state: AppState, plan: Plan) -> "ArmingKey":
        return cls(
            notifications=state.notifications,
            start_time=state.session.start_time,
            target_end_time=state.session.target_end_time,
            fast_hours=plan.fast_hours,
        )

    @property
    def armable(self) -> bool:
        return (
            self.notifications
            and self.start_time is not None
            and self.target_end_time is not None
        )


class GoalNotificationScheduler:
    """Arms a single deferred goal alert at the session's target end time."""

    def __init__(
        self,
        notifier: BaseNotifier,
        messages: BaseMessageDelivery,
        clock: Callable[[], int] = now_ms
    ):
        self.notifier = notifier
        self.messages = messages
        self.clock = clock
        self.generation = 0
        self.fired_count = 0
        self._handle: Optional[asyncio.TimerHandle] = None
        self._key: Optional[ArmingKey] = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def update(self, state: AppState, plan: Plan) -> bool:
        """
        Re-evaluate arming after a state change.

        Re-arms only when the arming inputs changed.

        Returns:
            True if an alert is pending afterwards
        """
        key = ArmingKey.from_state(state, plan)
        if key == self._key:
            return self.pending
        self._key = key
        return self.rearm(key)

    def rearm(self, key: ArmingKey) -> bool:
        """
        Disarm any pending alert and arm again from scratch.

        Nothing is scheduled when the goal time has already passed.

        Returns:
            True if an alert was armed
        """
        self._disarm()

        if not key.armable:
            return False

        delay_ms = key.target_end_time - self.clock()
        if delay_ms <= 0:
            logger.debug(
                "Goal already passed, alert not armed",
                target_end_time=to_iso_utc(key.target_end_time)
            )
            return False

        generation = self.generation
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(
            delay_ms / MS_PER_SECOND, self._fire, generation, key.fast_hours
        )
        logger.info(
            "Goal alert armed",
            generation=generation,
            delay_ms=delay_ms,
            target_end_time=to_iso_utc(key.target_end_time)
        )
        return True

    def close(self) -> None:
        """Disarm on teardown."""
        self._disarm()
        self._key = None

    def _disarm(self) -> None:
        self.generation += 1
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
            logger.debug("Goal alert disarmed", generation=self.generation)

    def _fire(self, generation: int, fast_hours: int) -> None:
        if generation != self.generation:
            logger.debug("Stale goal alert ignored", generation=generation, current=self.generation)
            return
        self._handle = None
        self.fired_count += 1

        shown = False
        if self.notifier.supported and self.notifier.permission == NotificationPermission.GRANTED:
            shown = self.notifier.notify(GOAL_TITLE, goal_body(fast_hours))

        logger.info("Goal alert fired", generation=generation, platform_notification=shown)
        self.messages.success(GOAL_MESSAGE)


class NotificationPermissionGate:
    """
    Enforces the notification capability/permission contract.

    Enabling without capability is refused at once. An undetermined
    permission is requested in the background on a running loop, or inline
    without one; a refusal reverts the preference.
    """

    def __init__(
        self,
        notifier: BaseNotifier,
        messages: BaseMessageDelivery,
        revert: Callable[[], None]
    ):
        self.notifier = notifier
        self.messages = messages
        self.revert = revert
        self._requests: set[asyncio.Task] = set()

    def admit(self, enabled: bool) -> bool:
        """
        Decide whether the preference may be stored at all.

        Enabling without capability is rejected here, before anything is
        persisted.
        """
        if not enabled:
            return True

        try:
            self._require_capability()
        except NotificationUnsupported as e:
            self._reject(e)
            return False
        return True

    def ensure(self, enabled: bool) -> Optional[asyncio.Task]:
        """
        Check the preference that was just set.

        An undetermined permission is requested in the background on the
        running loop; without one the request completes before returning.

        Returns:
            The background permission request task, if one was issued
        """
        if not enabled or not self.admit(enabled):
            return None

        if self.notifier.permission != NotificationPermission.DEFAULT:
            return None

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            asyncio.run(self._request_permission())
            return None

        task = loop.create_task(self._request_permission())
        self._requests.add(task)
        task.add_done_callback(self._requests.discard)
        return task

    async def close(self) -> None:
        """Cancel outstanding permission requests."""
        for task in list(self._requests):
            task.cancel()
        if self._requests:
            await asyncio.gather(*self._requests, return_exceptions=True)

    def _require_capability(self) -> None:
        if not self.notifier.supported:
            raise NotificationUnsupported(UNSUPPORTED_MESSAGE, notifier=self.notifier.name)

    async def _request_permission(self) -> None:
        permission = await self.notifier.request_permission()
        try:
            if permission != NotificationPermission.GRANTED:
                raise NotificationDenied(
                    DENIED_MESSAGE,
                    notifier=self.notifier.name,
                    permission=permission.value
                )
        except NotificationDenied as e:
            self._reject(e)

    def _reject(self, error: NotificationError) -> None:
        logger.warning(
            "Notification preference reverted",
            reason=type(error).__name__,
            notifier=error.notifier,
            fallback=error.fallback_strategy
        )
        self.revert()
        self.messages.error(str(error))
