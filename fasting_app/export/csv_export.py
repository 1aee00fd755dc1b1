"""CSV rendering and file export of the history log."""

import csv
import io
from pathlib import Path
from typing import Iterable, Optional, Union

import structlog

from ..data.history import HistoryEntry
from ..utils.time import format_hm, now_ms, to_iso_utc, utc_date_key

logger = structlog.get_logger(__name__)

CSV_HEADER = ("start", "end", "duration_ms", "duration_hm")


def _row(entry: HistoryEntry) -> tuple[str, str, str, str]:
    return (
        to_iso_utc(entry.start),
        to_iso_utc(entry.end),
        str(entry.duration),
        format_hm(entry.duration),
    )


def render_csv(history: Iterable[HistoryEntry]) -> str:
    """
    Render the history as CSV text.

    Every field is quoted and rows are separated by a bare newline with no
    trailing newline. Rows keep history order (most recent first).
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    writer.writerows(_row(entry) for entry in history)
    return buffer.getvalue().rstrip("\n")


def export_filename(now: int) -> str:
    """File name for an export taken at ``now`` (UTC date)."""
    return f"fasting_history_{utc_date_key(now)}.csv"


def write_csv(
    history: Iterable[HistoryEntry],
    directory: Union[str, Path] = ".",
    now: Optional[int] = None
) -> Path:
    """
    Write the history CSV into ``directory``.

    Returns:
        Path of the written file

    Raises:
        OSError: if the file cannot be written
    """
    entries = list(history)
    output_dir = Path(directory)
    output_dir.mkdir(parents=True, exist_ok=True)

    path = output_dir / export_filename(now if now is not None else now_ms())
    path.write_text(render_csv(entries), encoding="utf-8")

    logger.info("History exported", output_path=str(path), rows=len(entries))
    return path
