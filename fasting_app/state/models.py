"""
State machine data models for the fasting session lifecycle.

This module defines immutable data structures for the active session, the
persisted application aggregate and state transitions.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Optional

from ..data.history import DEFAULT_HISTORY_LIMIT, HistoryEntry, entries_from_records
from ..data.plans import FALLBACK_PLAN_ID
from ..utils.time import coerce_timestamp


class SessionState(str, Enum):
    """Session lifecycle states."""
    IDLE = "idle"
    FASTING = "fasting"


@dataclass(frozen=True)
class Session:
    """The active fasting window, if any."""

    start_time: Optional[int] = None                 # Epoch ms, set iff active
    target_end_time: Optional[int] = None            # Survives mid-fast plan changes

    @property
    def active(self) -> bool:
        return self.start_time is not None

    @property
    def state(self) -> SessionState:
        return SessionState.FASTING if self.active else SessionState.IDLE


IDLE_SESSION = Session()


@dataclass(frozen=True)
class AppState:
    """
    Persisted aggregate: selected plan, session, history and preference.

    This is the single unit of durability; every change is snapshotted whole.
    """

    preset: str = FALLBACK_PLAN_ID
    session: Session = IDLE_SESSION
    history: tuple[HistoryEntry, ...] = field(default_factory=tuple)
    notifications: bool = False

    @property
    def state(self) -> SessionState:
        return self.session.state

    @property
    def is_fasting(self) -> bool:
        return self.session.active

    def with_session(self, session: Session) -> "AppState":
        return replace(self, session=session)

    def with_history(self, history: tuple[HistoryEntry, ...]) -> "AppState":
        return replace(self, history=history)

    def with_preset(self, preset: str) -> "AppState":
        return replace(self, preset=preset)

    def with_notifications(self, enabled: bool) -> "AppState":
        return replace(self, notifications=enabled)

    def to_record(self) -> dict[str, Any]:
        """Serialize to the persisted record schema."""
        return {
            "preset": self.preset,
            "isFasting": self.session.active,
            "startTime": self.session.start_time,
            "targetEndTime": self.session.target_end_time,
            "history": [entry.to_record() for entry in self.history],
            "notifications": self.notifications,
        }

    @classmethod
    def from_record(
        cls,
        record: Optional[dict[str, Any]],
        default_plan: str = FALLBACK_PLAN_ID,
        history_limit: int = DEFAULT_HISTORY_LIMIT
    ) -> "AppState":
        """
        Rebuild state from a persisted record, defaulting every missing field.

        A session is only restored when ``isFasting`` is set and a start time
        is present, so ``active`` always matches ``start_time``.
        """
        if not isinstance(record, dict):
            return cls(preset=default_plan)

        preset = record.get("preset")
        if not isinstance(preset, str) or not preset:
            preset = default_plan

        start_time = coerce_timestamp(record.get("startTime"))
        session = IDLE_SESSION
        if record.get("isFasting") is True and start_time is not None:
            session = Session(
                start_time=start_time,
                target_end_time=coerce_timestamp(record.get("targetEndTime"))
            )

        raw_history = record.get("history")
        history = entries_from_records(
            raw_history if isinstance(raw_history, list) else [],
            limit=history_limit
        )

        return cls(
            preset=preset,
            session=session,
            history=history,
            notifications=record.get("notifications") is True,
        )


@dataclass(frozen=True)
class SessionTransition:
    """Represents an applied state machine transition."""

    from_state: SessionState
    to_state: SessionState
    trigger: str
    timestamp: Optional[int] = None

    # Set when the transition wrote a history record
    entry: Optional[HistoryEntry] = None
