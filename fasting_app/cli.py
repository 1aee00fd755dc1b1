"""
Command line interface for the fasting tracker.

Usage:
    fasting-tracker status
    fasting-tracker start | end | reset
    fasting-tracker plan 18:6
    fasting-tracker start-at "2024-01-01 08:00"
    fasting-tracker history
    fasting-tracker repeat 0
    fasting-tracker export --dir exports
    fasting-tracker notify on
    fasting-tracker watch --seconds 60
"""

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Optional

import yaml

from .config.defaults import TrackerConfig
from .config.loader import ConfigLoader
from .data.plans import PRESETS, Plan, describe
from .engine import FastingTracker
from .logging import configure_from_params
from .models.metrics import ProgressSnapshot, StatsSnapshot
from .utils.time import format_duration, format_hm, format_local_datetime


def format_status(progress: ProgressSnapshot, stats: StatsSnapshot, plan: Plan) -> list[str]:
    """Render the elapsed, target and streak tiles as text lines."""
    if progress.active:
        elapsed = format_duration(progress.elapsed_ms)
    else:
        elapsed = "00:00:00"
    if progress.active and progress.start_time is not None:
        started = format_local_datetime(progress.start_time)
    else:
        started = "—"
    goal = "Goal reached!" if progress.goal_reached else f"{format_duration(progress.remaining_ms)} left"

    return [
        f"Plan     {describe(plan)}",
        f"Elapsed  {elapsed}  ({started})",
        f"Target   {plan.fast_hours}h  ({goal})",
        f"Streak   {stats.streak_days} days  (Avg {stats.average_hours:g} h)",
    ]


def load_config(args: argparse.Namespace) -> TrackerConfig:
    overrides = {}
    if args.db_path:
        overrides["storage"] = {"db_path": args.db_path}
    loader = ConfigLoader.create(Path(args.config_dir) if args.config_dir else None)
    return loader.load(overrides)


def cmd_status(tracker: FastingTracker, args: argparse.Namespace) -> int:
    """Show the current session and statistics."""
    progress, stats = tracker.refresh()
    for line in format_status(progress, stats, tracker.plan):
        print(line)
    return 0


def cmd_plans(tracker: FastingTracker, args: argparse.Namespace) -> int:
    """List the built-in plans."""
    selected = tracker.plan.id
    for plan in PRESETS:
        marker = "*" if plan.id == selected else " "
        print(f"{marker} {describe(plan)}")
    if tracker.plan.is_synthetic:
        print(f"* {describe(tracker.plan)}")
    return 0


def cmd_start(tracker: FastingTracker, args: argparse.Namespace) -> int:
    """Start a fast now."""
    return 0 if tracker.start_fast() else 1


def cmd_end(tracker: FastingTracker, args: argparse.Namespace) -> int:
    """End the running fast."""
    if tracker.end_fast() is None:
        print("No fast is running.")
    return 0


def cmd_reset(tracker: FastingTracker, args: argparse.Namespace) -> int:
    """Abandon the running fast."""
    tracker.reset_fast()
    return 0


def cmd_plan(tracker: FastingTracker, args: argparse.Namespace) -> int:
    """Select a plan."""
    plan = tracker.change_plan(args.plan_id)
    print(f"Plan: {describe(plan)}")
    return 0


def cmd_start_at(tracker: FastingTracker, args: argparse.Namespace) -> int:
    """Start a fast at a past or given date/time."""
    return 0 if tracker.import_start(" ".join(args.when)) else 1


def cmd_history(tracker: FastingTracker, args: argparse.Namespace) -> int:
    """List completed fasts, most recent first."""
    history = tracker.state.history
    if not history:
        print("No fasts yet. Your completed fasts will appear here.")
        return 0

    for index, entry in enumerate(history):
        print(
            f"[{index}] {format_local_datetime(entry.start)} → "
            f"{format_local_datetime(entry.end)}  {format_hm(entry.duration)}"
        )
    return 0


def cmd_repeat(tracker: FastingTracker, args: argparse.Namespace) -> int:
    """Start a new fast shaped like a past one."""
    try:
        transition = tracker.repeat(args.index)
    except IndexError:
        print(f"Error: No history entry at index {args.index}")
        return 1
    return 0 if transition else 1


def cmd_clear(tracker: FastingTracker, args: argparse.Namespace) -> int:
    """Clear the history log."""
    if not args.yes:
        confirm = input("Clear all history? [y/N] ")
        if confirm.lower() != "y":
            print("Cancelled.")
            return 0

    tracker.clear_history()
    print("History cleared.")
    return 0


def cmd_export(tracker: FastingTracker, args: argparse.Namespace) -> int:
    """Export the history as CSV."""
    try:
        path = tracker.export_csv(args.dir)
    except OSError as e:
        print(f"Error: Could not write export: {e}")
        return 1

    print(f"Exported {len(tracker.state.history)} fasts to {path}")
    return 0


def cmd_notify(tracker: FastingTracker, args: argparse.Namespace) -> int:
    """Enable or disable the goal-reached notification."""
    tracker.set_notifications(args.toggle == "on")
    print(f"Notifications: {'on' if tracker.state.notifications else 'off'}")
    return 0


def cmd_watch(tracker: FastingTracker, args: argparse.Namespace) -> int:
    """Show a live status line until interrupted."""
    def show(progress: ProgressSnapshot, stats: StatsSnapshot) -> None:
        line = "  |  ".join(format_status(progress, stats, tracker.plan)[1:])
        print(f"\r{line}", end="", flush=True)

    tracker.subscribe(show)
    try:
        asyncio.run(tracker.run(args.seconds))
    except KeyboardInterrupt:
        pass
    print()
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fasting-tracker",
        description="Intermittent fasting tracker",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--config-dir",
        help="Directory holding tracker.yaml (default: bundled config/)",
    )
    parser.add_argument(
        "--db-path",
        help="SQLite database path (overrides storage.db_path)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    subparsers.add_parser("status", help="Show session and statistics")
    subparsers.add_parser("plans", help="List fasting plans")
    subparsers.add_parser("start", help="Start a fast now")
    subparsers.add_parser("end", help="End the fast and save it")
    subparsers.add_parser("reset", help="Abandon the fast")

    plan_parser = subparsers.add_parser("plan", help="Select a plan")
    plan_parser.add_argument("plan_id", choices=[plan.id for plan in PRESETS])

    start_at_parser = subparsers.add_parser("start-at", help="Start a fast at a given time")
    start_at_parser.add_argument("when", nargs="+", help="Date/time, e.g. '2024-01-01 08:00'")

    subparsers.add_parser("history", help="List completed fasts")

    repeat_parser = subparsers.add_parser("repeat", help="Repeat a past fast")
    repeat_parser.add_argument("index", type=int, help="History index (0 is the most recent)")

    clear_parser = subparsers.add_parser("clear", help="Clear history")
    clear_parser.add_argument(
        "-y", "--yes",
        action="store_true",
        help="Skip confirmation",
    )

    export_parser = subparsers.add_parser("export", help="Export history as CSV")
    export_parser.add_argument("--dir", help="Output directory (default: export.output_dir)")

    notify_parser = subparsers.add_parser("notify", help="Toggle goal notifications")
    notify_parser.add_argument("toggle", choices=["on", "off"])

    watch_parser = subparsers.add_parser("watch", help="Live status")
    watch_parser.add_argument(
        "--seconds",
        type=float,
        default=None,
        help="Stop after this many seconds (default: run until interrupted)",
    )

    return parser


COMMANDS = {
    "status": cmd_status,
    "plans": cmd_plans,
    "start": cmd_start,
    "end": cmd_end,
    "reset": cmd_reset,
    "plan": cmd_plan,
    "start-at": cmd_start_at,
    "history": cmd_history,
    "repeat": cmd_repeat,
    "clear": cmd_clear,
    "export": cmd_export,
    "notify": cmd_notify,
    "watch": cmd_watch,
}


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    try:
        config = load_config(args)
    except (ValueError, yaml.YAMLError) as e:
        print(f"Error: {e}")
        return 2

    configure_from_params(config.logging)

    tracker = FastingTracker(config=config)
    return COMMANDS[args.command](tracker, args)


if __name__ == "__main__":
    sys.exit(main())
