"""Application state persistence in a SQLite key-value table."""

import json
import sqlite3
import threading
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from ..data.history import DEFAULT_HISTORY_LIMIT
from ..data.plans import FALLBACK_PLAN_ID
from ..errors import PersistenceReadError, PersistenceWriteError
from ..logging.config import get_logger
from ..state.models import AppState

STATE_KEY = "migtoonz-fasting-tracker-v1"


class StateStore:
    """
    Durable store for the whole application state.

    The state is kept as one opaque JSON blob under a fixed key. Writes are
    best-effort and reads treat malformed content exactly like absence; no
    persistence failure ever propagates to the caller.
    """

    def __init__(
        self,
        db_path: str = "fasting_tracker.db",
        key: str = STATE_KEY,
        default_plan: str = FALLBACK_PLAN_ID,
        history_limit: int = DEFAULT_HISTORY_LIMIT
    ):
        self.db_path = Path(db_path)
        self.key = key
        self.default_plan = default_plan
        self.history_limit = history_limit
        self.logger = get_logger("fasting.store")
        self._lock = threading.Lock()

    @contextmanager
    def _get_connection(self):
        """Get database connection with proper error handling."""
        conn = None
        try:
            if not self.db_path.parent.exists():
                self.db_path.parent.mkdir(parents=True, exist_ok=True)
            conn = sqlite3.connect(self.db_path, timeout=30.0)
            conn.execute("""
                CREATE TABLE IF NOT EXISTS state (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """)
            yield conn
        except sqlite3.Error:
            if conn:
                conn.rollback()
            raise
        finally:
            if conn:
                conn.close()

    def read_raw(self) -> Optional[str]:
        """
        Read the stored blob.

        Raises:
            PersistenceReadError: if the database cannot be read
        """
        try:
            with self._get_connection() as conn:
                row = conn.execute(
                    "SELECT value FROM state WHERE key = ?", (self.key,)
                ).fetchone()
        except (sqlite3.Error, OSError) as e:
            raise PersistenceReadError(
                f"Failed to read state: {e}", target=str(self.db_path)
            ) from e

        return row[0] if row else None

    def write_raw(self, value: str) -> None:
        """
        Replace the stored blob.

        Raises:
            PersistenceWriteError: if the database cannot be written
        """
        with self._lock:
            try:
                with self._get_connection() as conn:
                    conn.execute("""
                        INSERT OR REPLACE INTO state (key, value, updated_at)
                        VALUES (?, ?, ?)
                    """, (self.key, value, datetime.now(timezone.utc).isoformat()))
                    conn.commit()
            except (sqlite3.Error, OSError) as e:
                raise PersistenceWriteError(
                    f"Failed to write state: {e}", target=str(self.db_path)
                ) from e

    def save(self, state: AppState) -> None:
        """
        Snapshot the full application state.

        Failures are logged and swallowed.
        """
        try:
            self.write_raw(json.dumps(state.to_record()))
        except PersistenceWriteError as e:
            self.logger.warning(
                "State snapshot skipped",
                target=e.target,
                fallback=e.fallback_strategy,
                error=str(e)
            )
            return

        self.logger.debug(
            "State saved",
            is_fasting=state.is_fasting,
            history_size=len(state.history)
        )

    def load(self) -> Optional[AppState]:
        """
        Load the persisted state.

        Returns:
            AppState, or None when the record is missing or malformed
        """
        try:
            raw = self.read_raw()
            if raw is None:
                raise PersistenceReadError("No stored state", target=self.key)
            try:
                record = json.loads(raw)
            except json.JSONDecodeError as e:
                raise PersistenceReadError(
                    f"Malformed state record: {e}", target=self.key
                ) from e
            if not isinstance(record, dict):
                raise PersistenceReadError("State record is not an object", target=self.key)
            try:
                return AppState.from_record(
                    record,
                    default_plan=self.default_plan,
                    history_limit=self.history_limit
                )
            except (TypeError, ValueError, OverflowError) as e:
                raise PersistenceReadError(
                    f"Unusable state record: {e}", target=self.key
                ) from e
        except PersistenceReadError as e:
            self.logger.info(
                "Using default state",
                reason=str(e),
                fallback=e.fallback_strategy
            )
            return None
