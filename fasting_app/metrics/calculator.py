"""Main statistics calculator coordinating all derived metrics"""

from typing import Optional, Sequence

from ..config.defaults import StatsParams
from ..data.history import HistoryEntry
from ..data.plans import Plan
from ..models.metrics import StatsSnapshot
from .daily import aggregate_daily_hours
from .streak import average_duration, calculate_streak


class StatsCalculator:
    """
    Pure statistics engine over (history, selected plan, now).

    Never mutates its inputs; callers recompute on every relevant change.
    """

    def __init__(self, params: Optional[StatsParams] = None):
        self.params = params or StatsParams()

    def calculate(self, history: Sequence[HistoryEntry], plan: Plan, now: int) -> StatsSnapshot:
        """
        Calculate all statistics for a given instant.

        Args:
            history: Completed fasts, most recent first
            plan: Currently selected plan, which sets the streak bar
            now: Wall-clock sample in epoch ms

        Returns:
            StatsSnapshot with streak, average and chart feed
        """
        return StatsSnapshot(
            now=now,
            streak_days=calculate_streak(
                history, plan.target_ms, now, max_days=self.params.streak_scan_days
            ),
            average_ms=average_duration(history),
            total_fasts=len(history),
            daily=aggregate_daily_hours(history, days=self.params.chart_days),
        )
