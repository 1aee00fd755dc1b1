"""Statistics engine: session progress, daily totals, averages and streaks"""

from .calculator import StatsCalculator
from .daily import aggregate_daily_hours
from .progress import compute_progress
from .streak import average_duration, calculate_streak

__all__ = [
    "StatsCalculator",
    "aggregate_daily_hours",
    "average_duration",
    "calculate_streak",
    "compute_progress",
]
