"""Data models for derived statistics and session progress"""

from dataclasses import dataclass, field
from typing import Optional

from ..utils.time import round_half_up


@dataclass(frozen=True)
class DailyPoint:
    """One point of the rolling chart feed"""
    date: str                                        # Local calendar day, YYYY-MM-DD
    hours: float                                     # Total fasted hours, 0.1h resolution


@dataclass(frozen=True)
class ProgressSnapshot:
    """Time-derived values of the current session at a given instant"""
    now: int
    active: bool
    elapsed_ms: int
    remaining_ms: int
    target_ms: int
    goal_reached: bool
    start_time: Optional[int] = None

    @property
    def progress_pct(self) -> float:
        """Share of the target already fasted (0-100)"""
        if not self.active or self.target_ms <= 0:
            return 0.0
        return min(self.elapsed_ms / self.target_ms * 100, 100.0)


@dataclass(frozen=True)
class StatsSnapshot:
    """Complete statistics snapshot for a given instant"""
    now: int
    streak_days: int
    average_ms: float
    total_fasts: int
    daily: tuple[DailyPoint, ...] = field(default_factory=tuple)

    @property
    def average_hours(self) -> float:
        """Average duration in hours, two decimals"""
        return round_half_up(self.average_ms / 36_000) / 100
