"""Streak and average-duration metrics"""

from datetime import timedelta
from typing import Sequence

from ..data.history import HistoryEntry
from ..utils.time import local_date, local_date_key


def average_duration(history: Sequence[HistoryEntry]) -> float:
    """Mean duration in ms, 0 for an empty history."""
    if not history:
        return 0.0
    return sum(entry.duration for entry in history) / len(history)


def calculate_streak(
    history: Sequence[HistoryEntry],
    target_ms: int,
    now: int,
    max_days: int = 365
) -> int:
    """
    Count consecutive qualifying days walking back from today.

    A day qualifies when any single entry placed on it lasted at least
    ``target_ms``; durations are not summed. Counting stops at the first day
    without a qualifying entry, and never looks back more than ``max_days``.

    Args:
        history: Completed fasts
        target_ms: Duration bar of the currently selected plan
        now: Wall-clock sample in epoch ms
        max_days: Backward scan cap

    Returns:
        Streak length in days
    """
    qualifying_days = {
        local_date_key(entry.day_timestamp)
        for entry in history
        if entry.duration >= target_ms
    }
    if not qualifying_days:
        return 0

    today = local_date(now)
    streak = 0
    for offset in range(max_days):
        day = today - timedelta(days=offset)
        if day.isoformat() not in qualifying_days:
            break
        streak += 1

    return streak
