"""Per-day aggregation of completed fasts for the rolling chart"""

from collections import defaultdict
from typing import Iterable

from ..data.history import HistoryEntry
from ..models.metrics import DailyPoint
from ..utils.time import local_date_key, round_half_up


def aggregate_daily_hours(history: Iterable[HistoryEntry], days: int = 14) -> tuple[DailyPoint, ...]:
    """
    Sum fasted time per local calendar day.

    Entries are placed on the day of their end time (start time when no end is
    recorded). Only the ``days`` most recent days that have entries are kept,
    oldest first. The result does not depend on history order.

    Args:
        history: Completed fasts
        days: Maximum number of points

    Returns:
        Tuple of DailyPoint with hours rounded to 0.1h
    """
    totals: dict[str, int] = defaultdict(int)
    for entry in history:
        totals[local_date_key(entry.day_timestamp)] += entry.duration

    recent = sorted(totals.items())[-days:] if days > 0 else []

    return tuple(
        DailyPoint(date=day, hours=round_half_up(ms / 360_000) / 10)
        for day, ms in recent
    )
