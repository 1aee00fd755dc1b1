"""
History log of completed fasts.

The log is an immutable tuple ordered most-recent-first and bounded to the
configured capacity; the oldest entries are dropped silently.
"""

from dataclasses import dataclass
from typing import Any, Iterable, Optional

from ..logging.config import get_logger
from ..utils.time import MS_PER_HOUR, coerce_timestamp, round_half_up
from .plans import Plan

DEFAULT_HISTORY_LIMIT = 200

logger = get_logger(__name__)


@dataclass(frozen=True)
class HistoryEntry:
    """A completed fast. Immutable once created."""

    start: int
    end: int
    duration: int

    @classmethod
    def completed(cls, start: int, end: int) -> "HistoryEntry":
        """Create an entry with ``duration = max(0, end - start)``."""
        return cls(start=start, end=end, duration=max(0, end - start))

    @property
    def day_timestamp(self) -> int:
        """Timestamp used to place the entry on a calendar day."""
        return self.end or self.start

    def to_record(self) -> dict[str, int]:
        return {"start": self.start, "end": self.end, "duration": self.duration}

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> Optional["HistoryEntry"]:
        """
        Build an entry from its persisted form.

        Returns:
            HistoryEntry, or None if the record is malformed
        """
        try:
            start = int(record["start"])
            end = int(record.get("end") or 0)
            duration = max(0, int(record["duration"]))
        except (KeyError, TypeError, ValueError, OverflowError, AttributeError):
            return None
        if any(coerce_timestamp(value) is None for value in (start, end, duration)):
            return None
        return cls(start=start, end=end, duration=duration)


def prepend_entry(
    history: tuple[HistoryEntry, ...],
    entry: HistoryEntry,
    limit: int = DEFAULT_HISTORY_LIMIT
) -> tuple[HistoryEntry, ...]:
    """Put ``entry`` at the front and keep only the ``limit`` most recent."""
    return ((entry,) + history)[:limit]


def entries_from_records(
    records: Iterable[Any],
    limit: int = DEFAULT_HISTORY_LIMIT
) -> tuple[HistoryEntry, ...]:
    """Rebuild a history log from persisted records, skipping malformed ones."""
    entries = []
    skipped = 0
    for record in records:
        entry = HistoryEntry.from_record(record) if isinstance(record, dict) else None
        if entry is None:
            skipped += 1
            continue
        entries.append(entry)

    if skipped:
        logger.warning("Skipped malformed history records", skipped=skipped)

    return tuple(entries[:limit])


def repeat_plan(entry: HistoryEntry) -> Plan:
    """
    Derive a synthetic plan from a past fast.

    The duration is rounded to whole hours (at least one) and paired with
    ``24 - hours`` eating hours.
    """
    hours = max(1, round_half_up(entry.duration / MS_PER_HOUR))
    return Plan.synthetic(hours, 24 - hours)
