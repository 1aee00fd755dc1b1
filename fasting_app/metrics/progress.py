"""Elapsed/remaining time of the active session"""

from ..data.plans import Plan
from ..models.metrics import ProgressSnapshot
from ..state.models import Session


def compute_progress(session: Session, plan: Plan, now: int) -> ProgressSnapshot:
    """
    Derive the time-based values of the current session.

    The stored target end time wins over the plan target so a session keeps
    its goal across reloads; without one the goal is derived from the start.

    Args:
        session: Current session
        plan: Currently selected plan
        now: Wall-clock sample in epoch ms

    Returns:
        ProgressSnapshot for ``now``
    """
    target_ms = plan.target_ms
    start_time = session.start_time
    active = session.active

    elapsed = now - start_time if active and start_time is not None else 0

    if session.target_end_time is not None:
        goal_at = session.target_end_time
    elif start_time is not None:
        goal_at = start_time + target_ms
    else:
        goal_at = 0
    remaining = max(0, goal_at - now)

    return ProgressSnapshot(
        now=now,
        active=active,
        elapsed_ms=elapsed,
        remaining_ms=remaining,
        target_ms=target_ms,
        goal_reached=active and elapsed >= target_ms,
        start_time=start_time,
    )
