"""
Main tracker coordinator.

Wires configuration, persistence, the session runtime, the ticker, the goal
scheduler and the statistics engine together:
Tick / State change → Progress + Statistics → Observers, Goal scheduler
"""

import asyncio
from pathlib import Path
from typing import Any, Callable, Optional

import structlog

from .config.defaults import TrackerConfig
from .config.loader import ConfigLoader
from .clock.ticker import Ticker
from .data.plans import Plan
from .delivery.base import BaseMessageDelivery
from .delivery.notifications import BaseNotifier, CommandNotifier, NotificationPermission
from .delivery.stdout_delivery import StdoutMessageDelivery
from .export.csv_export import write_csv
from .metrics import StatsCalculator, compute_progress
from .models.metrics import ProgressSnapshot, StatsSnapshot
from .persistence.state_store import StateStore
from .scheduler.goal import GoalNotificationScheduler, NotificationPermissionGate
from .state.models import AppState, SessionTransition
from .state.runtime import FastingRuntime
from .utils.time import now_ms

logger = structlog.get_logger(__name__)

SnapshotObserver = Callable[[ProgressSnapshot, StatsSnapshot], None]


class FastingTracker:
    """
    Coordinator for the fasting tracker.

    Synchronous operations can be used without an event loop. Live features
    (ticking and the goal alert) are active between ``start()`` and
    ``close()``, which must run on an asyncio event loop.
    """

    def __init__(
        self,
        config: Optional[TrackerConfig] = None,
        config_dir: Optional[str] = None,
        overrides: Optional[dict[str, Any]] = None,
        messages: Optional[BaseMessageDelivery] = None,
        notifier: Optional[BaseNotifier] = None,
        store: Optional[StateStore] = None,
        clock: Callable[[], int] = now_ms
    ) -> None:
        """Initialize the tracker from configuration and persisted state."""
        self.logger = logger
        self.config = config or ConfigLoader.create(
            Path(config_dir) if config_dir else None
        ).load(overrides)
        self.clock = clock

        self.messages = messages or StdoutMessageDelivery(config=self.config.messages)
        self.store = store or StateStore(
            db_path=self.config.storage.db_path,
            key=self.config.storage.state_key,
            default_plan=self.config.session.default_plan,
            history_limit=self.config.history.max_entries
        )
        self.notifier = notifier or CommandNotifier(self.config.notifications.command)

        self.runtime = FastingRuntime.load(self.messages, self.store, self.config, clock)
        self.ticker = Ticker(self.config.clock.tick_interval_seconds)
        self.scheduler = GoalNotificationScheduler(self.notifier, self.messages, clock)
        self.permission_gate = NotificationPermissionGate(
            self.notifier, self.messages, revert=lambda: self.runtime.set_notifications(False)
        )
        self.stats_calculator = StatsCalculator(self.config.stats)

        self._observers: list[SnapshotObserver] = []
        self._live = False
        self._unsubscribers = [
            self.runtime.subscribe(self._on_state_change),
            self.ticker.subscribe(self._on_tick),
        ]

        self.progress, self.stats = self.refresh()
        self.logger.info(
            "Fasting tracker initialized",
            state=self.state.state.value,
            plan=self.plan.id,
            db_path=str(self.store.db_path)
        )

    @property
    def state(self) -> AppState:
        return self.runtime.state

    @property
    def plan(self) -> Plan:
        return self.runtime.plan

    @property
    def live(self) -> bool:
        return self._live

    def subscribe(self, observer: SnapshotObserver) -> Callable[[], None]:
        """Register an observer of recomputed snapshots."""
        self._observers.append(observer)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    def refresh(self) -> tuple[ProgressSnapshot, StatsSnapshot]:
        """Recompute progress and statistics from a fresh clock sample."""
        now = self.clock()
        state = self.runtime.state
        plan = self.runtime.plan

        self.progress = compute_progress(state.session, plan, now)
        self.stats = self.stats_calculator.calculate(state.history, plan, now)
        return self.progress, self.stats

    # Operations

    def start_fast(self) -> Optional[SessionTransition]:
        return self.runtime.start()

    def end_fast(self) -> Optional[SessionTransition]:
        return self.runtime.end()

    def reset_fast(self) -> Optional[SessionTransition]:
        return self.runtime.reset()

    def change_plan(self, plan_id: str) -> Plan:
        return self.runtime.change_plan(plan_id)

    def import_start(self, text: str) -> Optional[SessionTransition]:
        return self.runtime.import_start(text)

    def repeat(self, index: int) -> Optional[SessionTransition]:
        return self.runtime.repeat(index)

    def clear_history(self) -> None:
        self.runtime.clear_history()

    def set_notifications(self, enabled: bool) -> Optional[asyncio.Task]:
        """
        Change the notification preference and enforce the permission contract.

        Without a running event loop an undetermined permission is requested
        before this returns, so the stored preference is already final.

        Returns:
            The background permission request task, if one was issued on the
            running loop
        """
        if not self.permission_gate.admit(enabled):
            return None
        self.runtime.set_notifications(enabled)
        return self.permission_gate.ensure(enabled)

    def export_csv(self, directory: Optional[str] = None) -> Path:
        """Write the history CSV into ``directory`` (configured output dir by default)."""
        return write_csv(
            self.state.history,
            directory or self.config.export.output_dir,
            now=self.clock()
        )

    # Live lifecycle

    async def start(self) -> None:
        """Start ticking and arm the goal alert for the loaded state."""
        if self._live:
            return
        self._live = True

        if (self.state.notifications and self.notifier.supported
                and self.notifier.permission == NotificationPermission.DEFAULT):
            permission = await self.notifier.request_permission()
            self.logger.info("Notification permission refreshed", permission=permission.value)

        self.ticker.start()
        self.scheduler.update(self.state, self.plan)
        self.logger.info("Fasting tracker started", pending_alert=self.scheduler.pending)

    async def run(self, duration: Optional[float] = None) -> None:
        """
        Run live for ``duration`` seconds, or until cancelled.

        Everything is torn down on exit.
        """
        await self.start()
        try:
            if duration is None:
                await asyncio.Event().wait()
            else:
                await asyncio.sleep(duration)
        finally:
            await self.close()

    async def close(self) -> None:
        """Cancel the ticker, disarm the goal alert and drop pending permission requests."""
        self._live = False
        await self.ticker.stop()
        self.scheduler.close()
        await self.permission_gate.close()
        self.logger.info("Fasting tracker stopped", ticks=self.ticker.tick_count)

    def _on_tick(self, tick: int) -> None:
        self._publish()

    def _on_state_change(self, state: AppState) -> None:
        if self._live:
            self.scheduler.update(state, self.runtime.plan)
        self._publish()

    def _publish(self) -> None:
        progress, stats = self.refresh()
        for observer in list(self._observers):
            try:
                observer(progress, stats)
            except Exception as e:
                self.logger.error("Snapshot observer failed", error=str(e), exc_info=True)
