"""Default configuration parameters for the fasting tracker."""

from dataclasses import dataclass


@dataclass(frozen=True)
class SessionParams:
    """Session state machine parameters."""
    default_plan: str = "16:8"                       # Plan selected on first run
    allow_restart: bool = True                       # Start while fasting overwrites the session


@dataclass(frozen=True)
class HistoryParams:
    """History log parameters."""
    max_entries: int = 200


@dataclass(frozen=True)
class StatsParams:
    """Statistics engine parameters."""
    chart_days: int = 14                             # Distinct days in the chart feed
    streak_scan_days: int = 365                      # Backward scan cap for streaks


@dataclass(frozen=True)
class ClockParams:
    """Ticker parameters."""
    tick_interval_seconds: float = 1.0


@dataclass(frozen=True)
class StorageParams:
    """Durable key-value store parameters."""
    db_path: str = "fasting_tracker.db"
    state_key: str = "migtoonz-fasting-tracker-v1"


@dataclass(frozen=True)
class MessageParams:
    """User-visible message output parameters."""
    format: str = "pretty"                           # pretty, json
    include_timestamp: bool = False


@dataclass(frozen=True)
class NotificationParams:
    """Platform notification parameters."""
    command: str = "notify-send"                     # Desktop notifier looked up on PATH


@dataclass(frozen=True)
class ExportParams:
    """CSV export parameters."""
    output_dir: str = "."


@dataclass(frozen=True)
class LoggingParams:
    """Logging parameters."""
    level: str = "WARNING"
    format_json: bool = False


@dataclass(frozen=True)
class TrackerConfig:
    """Complete tracker configuration."""
    session: SessionParams
    history: HistoryParams
    stats: StatsParams
    clock: ClockParams
    storage: StorageParams
    messages: MessageParams
    notifications: NotificationParams
    export: ExportParams
    logging: LoggingParams


SECTION_TYPES = {
    "session": SessionParams,
    "history": HistoryParams,
    "stats": StatsParams,
    "clock": ClockParams,
    "storage": StorageParams,
    "messages": MessageParams,
    "notifications": NotificationParams,
    "export": ExportParams,
    "logging": LoggingParams,
}


def get_default_config() -> TrackerConfig:
    """Get the default configuration instance."""
    return TrackerConfig(
        session=SessionParams(),
        history=HistoryParams(),
        stats=StatsParams(),
        clock=ClockParams(),
        storage=StorageParams(),
        messages=MessageParams(),
        notifications=NotificationParams(),
        export=ExportParams(),
        logging=LoggingParams(),
    )
