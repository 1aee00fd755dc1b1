"""
Runtime state management for the fasting session lifecycle.

The runtime owns the single AppState instance and is its only writer. Every
operation applies a pure transition, snapshots the whole state to the store,
notifies subscribers and emits the user-visible message for the outcome.
"""

from typing import Callable, Optional

import structlog

from ..config.defaults import TrackerConfig, get_default_config
from ..data.plans import Plan, resolve
from ..delivery.base import BaseMessageDelivery
from ..errors import InvalidTimestamp, SessionAlreadyActive
from ..persistence.state_store import StateStore
from ..utils.time import now_ms
from . import machine
from .models import AppState, SessionTransition

logger = structlog.get_logger(__name__)

StateListener = Callable[[AppState], None]

FAST_STARTED = "Fast started."
FAST_SAVED = "Fast saved to history."


class FastingRuntime:
    """Applies transitions to the application state and publishes the results."""

    def __init__(
        self,
        messages: BaseMessageDelivery,
        store: Optional[StateStore] = None,
        config: Optional[TrackerConfig] = None,
        state: Optional[AppState] = None,
        clock: Callable[[], int] = now_ms
    ):
        self.config = config or get_default_config()
        self.messages = messages
        self.store = store
        self.clock = clock
        self.logger = logger
        self._state = state or AppState(preset=self.config.session.default_plan)
        self._listeners: list[StateListener] = []

    @classmethod
    def load(
        cls,
        messages: BaseMessageDelivery,
        store: StateStore,
        config: Optional[TrackerConfig] = None,
        clock: Callable[[], int] = now_ms
    ) -> "FastingRuntime":
        """Create a runtime from the persisted state, or defaults when there is none."""
        runtime = cls(messages, store=store, config=config, state=store.load(), clock=clock)
        runtime.logger.info(
            "Runtime state loaded",
            state=runtime.state.state.value,
            preset=runtime.state.preset,
            history_size=len(runtime.state.history)
        )
        return runtime

    @property
    def state(self) -> AppState:
        return self._state

    @property
    def plan(self) -> Plan:
        """Currently selected plan."""
        return resolve(self._state.preset)

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register a state listener; returns a callable that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def start(self) -> Optional[SessionTransition]:
        """Start a fast now against the selected plan."""
        try:
            new_state, transition = machine.start_session(
                self._state,
                self.clock(),
                self.plan,
                allow_restart=self.config.session.allow_restart
            )
        except SessionAlreadyActive as e:
            self._reject(e)
            return None

        self._commit(new_state)
        self.messages.info(FAST_STARTED)
        return transition

    def end(self) -> Optional[SessionTransition]:
        """End the running fast and save it to history; a no-op when idle."""
        new_state, transition = machine.end_session(
            self._state, self.clock(), history_limit=self.config.history.max_entries
        )
        if transition is None:
            return None

        self._commit(new_state)
        self.messages.success(FAST_SAVED)
        return transition

    def reset(self) -> Optional[SessionTransition]:
        """Abandon the running fast."""
        new_state, transition = machine.reset_session(self._state)
        self._commit(new_state)
        return transition

    def change_plan(self, plan_id: str) -> Plan:
        """Select a plan by id, re-targeting a running fast."""
        plan = resolve(plan_id)
        new_state, _ = machine.change_plan(self._state, plan)
        self._commit(new_state)
        return plan

    def import_start(self, text: str) -> Optional[SessionTransition]:
        """Start a fast from a free-text date/time."""
        try:
            new_state, transition = machine.import_start(
                self._state,
                text,
                self.plan,
                allow_restart=self.config.session.allow_restart
            )
        except (InvalidTimestamp, SessionAlreadyActive) as e:
            self._reject(e)
            return None

        self._commit(new_state)
        self.messages.info(FAST_STARTED)
        return transition

    def repeat(self, index: int) -> Optional[SessionTransition]:
        """
        Start a new fast shaped like the history entry at ``index``.

        Raises:
            IndexError: if there is no entry at ``index``
        """
        entry = self._state.history[index]
        try:
            new_state, transition = machine.repeat_fast(
                self._state,
                entry,
                self.clock(),
                allow_restart=self.config.session.allow_restart
            )
        except SessionAlreadyActive as e:
            self._reject(e)
            return None

        self._commit(new_state)
        self.messages.info(FAST_STARTED)
        return transition

    def clear_history(self) -> None:
        """Discard every history entry."""
        self._commit(machine.clear_history(self._state))

    def set_notifications(self, enabled: bool) -> None:
        """Store the notification preference."""
        if enabled == self._state.notifications:
            return
        self.logger.info("Notification preference changed", enabled=enabled)
        self._commit(self._state.with_notifications(enabled))

    def _reject(self, error: Exception) -> None:
        self.logger.info("Operation rejected", reason=type(error).__name__, error=str(error))
        self.messages.error(str(error))

    def _commit(self, new_state: AppState) -> None:
        self._state = new_state
        if self.store is not None:
            self.store.save(new_state)
        for listener in list(self._listeners):
            try:
                listener(new_state)
            except Exception as e:
                self.logger.error("State listener failed", error=str(e), exc_info=True)
