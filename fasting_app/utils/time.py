"""
Time utilities for epoch-millisecond timestamps.

This module provides centralized time handling: sampling the wall clock,
converting timestamps to local calendar days and UTC ISO strings, formatting
durations and parsing free-text date/time input.
"""

import math
from datetime import date, datetime, timedelta, timezone
from typing import Any, Optional

from dateutil import parser as dateparser

from ..errors import InvalidTimestamp

MS_PER_SECOND = 1000
MS_PER_MINUTE = 60 * MS_PER_SECOND
MS_PER_HOUR = 60 * MS_PER_MINUTE

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

# 9999-12-30T00:00:00Z, leaves room for any local UTC offset before year 10000
MAX_TIMESTAMP_MS = 253_402_128_000_000


def now_ms() -> int:
    """
    Sample the wall clock.

    Returns:
        Current time as integer epoch milliseconds
    """
    return int(datetime.now(timezone.utc).timestamp() * MS_PER_SECOND)


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves rounded up."""
    return math.floor(value + 0.5)


def coerce_timestamp(value: Any) -> Optional[int]:
    """
    Convert a stored number to epoch milliseconds.

    Returns:
        Integer milliseconds, or None for booleans, non-numbers, NaN/infinity
        and values outside ``0..MAX_TIMESTAMP_MS``
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if not 0 <= value <= MAX_TIMESTAMP_MS:
        return None
    return int(value)


def hours_to_ms(hours: int) -> int:
    """Convert whole hours to milliseconds."""
    return hours * MS_PER_HOUR


def to_utc_datetime(ts_ms: int) -> datetime:
    """Convert epoch milliseconds to an aware UTC datetime."""
    return _EPOCH + timedelta(milliseconds=ts_ms)


def to_iso_utc(ts_ms: int) -> str:
    """
    Format a timestamp as ISO-8601 UTC with millisecond precision.

    Args:
        ts_ms: Epoch milliseconds

    Returns:
        String such as ``2024-01-01T08:00:00.000Z``
    """
    dt = to_utc_datetime(ts_ms)
    return dt.strftime("%Y-%m-%dT%H:%M:%S") + f".{dt.microsecond // 1000:03d}Z"


def utc_date_key(ts_ms: int) -> str:
    """UTC calendar date of a timestamp as ``YYYY-MM-DD``."""
    return to_utc_datetime(ts_ms).date().isoformat()


def local_date(ts_ms: int) -> date:
    """Local calendar date of a timestamp."""
    return datetime.fromtimestamp(ts_ms / MS_PER_SECOND).date()


def local_date_key(ts_ms: int) -> str:
    """Local calendar date of a timestamp as ``YYYY-MM-DD``."""
    return local_date(ts_ms).isoformat()


def format_local_datetime(ts_ms: int) -> str:
    """Human-readable local date and time."""
    return datetime.fromtimestamp(ts_ms / MS_PER_SECOND).strftime("%Y-%m-%d %H:%M:%S")


def duration_breakdown(ms: int) -> tuple[int, int, int]:
    """
    Split a duration into whole hours, minutes and seconds.

    Negative durations clamp to zero and sub-second remainders are dropped, so
    ``h * 3600 + m * 60 + s == max(0, ms // 1000)``.

    Args:
        ms: Duration in milliseconds

    Returns:
        Tuple of (hours, minutes, seconds)
    """
    total_seconds = max(0, ms // MS_PER_SECOND)
    hours, rest = divmod(total_seconds, 3600)
    minutes, seconds = divmod(rest, 60)
    return hours, minutes, seconds


def format_duration(ms: int) -> str:
    """Format a duration as ``HH:MM:SS`` (hours are not capped at 99)."""
    hours, minutes, seconds = duration_breakdown(ms)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


def format_hm(ms: int) -> str:
    """Format a duration as ``{hours}h {minutes}m`` rounded to the nearest minute."""
    total_minutes = round_half_up(ms / MS_PER_MINUTE)
    hours, minutes = divmod(total_minutes, 60)
    return f"{hours}h {minutes}m"


def parse_datetime_text(text: str) -> int:
    """
    Parse free-text date/time input.

    Naive values are interpreted as local wall-clock time.

    Args:
        text: User-supplied date/time string

    Returns:
        Epoch milliseconds

    Raises:
        InvalidTimestamp: if the text cannot be parsed
    """
    if text is None or not str(text).strip():
        raise InvalidTimestamp("Could not parse date/time.", raw_value=text)

    try:
        parsed = dateparser.parse(str(text).strip())
        return int(parsed.timestamp() * MS_PER_SECOND)
    except (ValueError, OverflowError, OSError) as e:
        raise InvalidTimestamp(
            "Could not parse date/time.",
            raw_value=text,
            context={"error": str(e)}
        ) from e
