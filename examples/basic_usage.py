#!/usr/bin/env python3
"""
Basic Usage Example - Fasting Tracker

This script demonstrates the basic usage of the fasting tracker engine with a
simulated clock. It shows how to:
- Initialize the tracker against a throwaway database
- Start, re-target and end fasts
- Read progress and statistics snapshots
- Export the history as CSV

Run: python examples/basic_usage.py
"""

import tempfile
from datetime import datetime, timedelta
from pathlib import Path

from fasting_app.config.loader import ConfigLoader
from fasting_app.delivery.notifications import NullNotifier
from fasting_app.engine import FastingTracker
from fasting_app.export import render_csv
from fasting_app.logging import configure_logging
from fasting_app.utils.time import MS_PER_HOUR, format_duration, format_hm


class SimulatedClock:
    """Wall clock that only moves when told to."""

    def __init__(self, start: datetime):
        self.now = int(start.timestamp() * 1000)

    def __call__(self) -> int:
        return self.now

    def advance_hours(self, hours: float) -> None:
        self.now += int(hours * MS_PER_HOUR)


def main():
    configure_logging(level="WARNING")

    print("🕗 Fasting Tracker - Basic Usage")
    print("=" * 40)

    workdir = Path(tempfile.mkdtemp())
    config = ConfigLoader.create().load({"storage": {"db_path": str(workdir / "demo.db")}})
    clock = SimulatedClock(datetime.now().replace(hour=20, minute=0) - timedelta(days=3))

    tracker = FastingTracker(config=config, notifier=NullNotifier(), clock=clock)

    for day in range(3):
        print(f"\n📅 Day {day + 1}")
        tracker.start_fast()
        clock.advance_hours(12)

        progress, _ = tracker.refresh()
        print(f"  elapsed {format_duration(progress.elapsed_ms)}, "
              f"remaining {format_duration(progress.remaining_ms)}")

        if day == 2:
            tracker.change_plan("12:12")
            progress, _ = tracker.refresh()
            print(f"  switched to 12:12, goal reached: {progress.goal_reached}")

        clock.advance_hours(4.5)
        tracker.end_fast()
        clock.advance_hours(7.5)

    _, stats = tracker.refresh()
    print("\n📊 Statistics")
    print(f"  fasts:   {stats.total_fasts}")
    print(f"  streak:  {stats.streak_days} days")
    print(f"  average: {format_hm(int(stats.average_ms))} ({stats.average_hours:g} h)")
    for point in stats.daily:
        print(f"  {point.date}: {point.hours} h")

    print("\n📄 CSV export")
    print(render_csv(tracker.state.history))


if __name__ == "__main__":
    main()
