"""
Core fasting session state machine.

Transitions are pure functions over the immutable AppState: each returns the
new state together with the applied transition (None for a no-op). Side
effects such as persistence and user-visible messages belong to the runtime.
"""

from typing import Optional

from ..data.history import DEFAULT_HISTORY_LIMIT, HistoryEntry, prepend_entry, repeat_plan
from ..data.plans import Plan
from ..errors import SessionAlreadyActive
from ..logging.config import get_state_logger, log_state_transition
from ..utils.time import parse_datetime_text, to_iso_utc
from .models import IDLE_SESSION, AppState, Session, SessionState, SessionTransition

state_logger = get_state_logger(__name__)

TransitionResult = tuple[AppState, Optional[SessionTransition]]


def start_session(
    state: AppState,
    now: int,
    plan: Plan,
    allow_restart: bool = True,
    trigger: str = "start"
) -> TransitionResult:
    """
    Start a fast at ``now`` against ``plan``.

    Starting while already fasting overwrites the running session unless
    ``allow_restart`` is False.

    Args:
        state: Current application state
        now: Start timestamp in epoch ms (may be in the past)
        plan: Plan whose fast hours set the target
        allow_restart: Permit overwriting an active session
        trigger: Transition name recorded in the audit log

    Returns:
        Tuple of (new state, transition)

    Raises:
        SessionAlreadyActive: if fasting and restarts are disabled
    """
    if state.is_fasting:
        if not allow_restart:
            raise SessionAlreadyActive(
                "A fast is already running.",
                start_time=state.session.start_time
            )
        state_logger.warning(
            "Overwriting active session",
            previous_start=state.session.start_time,
            new_start=now
        )

    session = Session(start_time=now, target_end_time=now + plan.target_ms)
    new_state = state.with_session(session)

    log_state_transition(
        state_logger,
        from_state=state.state.value,
        to_state=SessionState.FASTING.value,
        trigger=trigger,
        context={
            "plan_id": plan.id,
            "plan_kind": plan.kind.value,
            "fast_hours": plan.fast_hours,
            "start_time": to_iso_utc(now),
            "target_end_time": to_iso_utc(session.target_end_time),
        }
    )

    return new_state, SessionTransition(
        from_state=state.state,
        to_state=SessionState.FASTING,
        trigger=trigger,
        timestamp=now
    )


def end_session(
    state: AppState,
    now: int,
    history_limit: int = DEFAULT_HISTORY_LIMIT
) -> TransitionResult:
    """
    End the running fast and record it in the history log.

    A no-op when no fast is running.
    """
    start_time = state.session.start_time
    if not state.is_fasting or start_time is None:
        state_logger.debug("End ignored, no active session")
        return state, None

    entry = HistoryEntry.completed(start=start_time, end=now)
    new_state = state.with_session(IDLE_SESSION).with_history(
        prepend_entry(state.history, entry, history_limit)
    )

    log_state_transition(
        state_logger,
        from_state=SessionState.FASTING.value,
        to_state=SessionState.IDLE.value,
        trigger="end",
        context={
            "duration_ms": entry.duration,
            "history_size": len(new_state.history),
        }
    )

    return new_state, SessionTransition(
        from_state=SessionState.FASTING,
        to_state=SessionState.IDLE,
        trigger="end",
        timestamp=now,
        entry=entry
    )


def reset_session(state: AppState) -> TransitionResult:
    """Abandon the running fast without writing history."""
    new_state = state.with_session(IDLE_SESSION)

    log_state_transition(
        state_logger,
        from_state=state.state.value,
        to_state=SessionState.IDLE.value,
        trigger="reset",
        context={"abandoned_start": state.session.start_time}
    )

    return new_state, SessionTransition(
        from_state=state.state,
        to_state=SessionState.IDLE,
        trigger="reset"
    )


def change_plan(state: AppState, plan: Plan) -> TransitionResult:
    """
    Select a different plan.

    While fasting the goal is re-targeted from the original start time, so
    elapsed time is preserved.
    """
    new_state = state.with_preset(plan.id)

    start_time = state.session.start_time
    if state.is_fasting and start_time is not None:
        new_state = new_state.with_session(
            Session(start_time=start_time, target_end_time=start_time + plan.target_ms)
        )
        log_state_transition(
            state_logger,
            from_state=SessionState.FASTING.value,
            to_state=SessionState.FASTING.value,
            trigger="change_plan",
            context={
                "from_plan": state.preset,
                "to_plan": plan.id,
                "target_end_time": to_iso_utc(start_time + plan.target_ms),
            }
        )
    else:
        state_logger.info("Plan selected", from_plan=state.preset, to_plan=plan.id)

    return new_state, SessionTransition(
        from_state=state.state,
        to_state=new_state.state,
        trigger="change_plan"
    )


def import_start(
    state: AppState,
    text: str,
    plan: Plan,
    allow_restart: bool = True
) -> TransitionResult:
    """
    Start a fast from a user-supplied date/time.

    Raises:
        InvalidTimestamp: if ``text`` cannot be parsed; the state is untouched
    """
    started_at = parse_datetime_text(text)
    return start_session(state, started_at, plan, allow_restart, trigger="import_start")


def repeat_fast(
    state: AppState,
    entry: HistoryEntry,
    now: int,
    allow_restart: bool = True
) -> TransitionResult:
    """
    Start a new fast shaped like a past one.

    The derived synthetic plan becomes the selected plan and its fast hours
    set the target directly.
    """
    plan = repeat_plan(entry)
    return start_session(
        state.with_preset(plan.id), now, plan, allow_restart, trigger="repeat"
    )


def clear_history(state: AppState) -> AppState:
    """Discard every history entry."""
    state_logger.info("History cleared", discarded=len(state.history))
    return state.with_history(())
