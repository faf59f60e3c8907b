"""Durable storage for the meal schedule list.

The whole list is kept as one JSON document under a single key, mirroring the
key-value preferences file the mobile app writes. Reads never fail on bad data:
an unparsable document means "no schedules", and a bad entry is skipped.
"""

import json
import sqlite3
import threading
import time
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from logger import logger
from . import config
from .errors import ScheduleStoreError, ScheduleValidationError
from .models import MealSchedule


def encode_schedules(schedules: list[MealSchedule]) -> str:
    """Serialize schedules to the persisted JSON document."""
    return json.dumps([s.to_dict() for s in schedules])


def decode_schedules(raw: Optional[str]) -> list[MealSchedule]:
    """Decode a persisted document, tolerating malformed data.

    Returns:
        Valid schedules in stored order (empty if the document is unusable)
    """
    if not raw:
        return []

    try:
        data = json.loads(raw)
    except (json.JSONDecodeError, TypeError) as e:
        logger.error(f"Stored schedules are not valid JSON, treating as empty: {e}")
        return []

    if not isinstance(data, list):
        logger.error(f"Stored schedules must be a list, got {type(data).__name__}; treating as empty")
        return []

    schedules = []
    for index, entry in enumerate(data):
        try:
            schedules.append(MealSchedule.from_dict(entry))
        except ScheduleValidationError as e:
            logger.warning(f"Skipping malformed stored schedule at index {index}: {e}")
    return schedules


def parse_schedules(raw: str) -> list[MealSchedule]:
    """Strictly parse a serialized schedule list supplied by a caller.

    Raises:
        ScheduleValidationError: If the document or any entry is invalid
    """
    try:
        data = json.loads(raw)
    except (json.JSONDecodeError, TypeError) as e:
        raise ScheduleValidationError(f"schedules are not valid JSON: {e}") from e

    if not isinstance(data, list):
        raise ScheduleValidationError(f"schedules must be a list, got {type(data).__name__}")

    schedules = [MealSchedule.from_dict(entry) for entry in data]
    check_unique_ids(schedules)
    return schedules


def check_unique_ids(schedules: list[MealSchedule]) -> None:
    seen = set()
    for s in schedules:
        if s.id in seen:
            raise ScheduleValidationError(f"duplicate schedule id {s.id}")
        seen.add(s.id)


class ScheduleStore(ABC):
    """Authoritative list of meal schedules."""

    @abstractmethod
    def read(self) -> list[MealSchedule]:
        """Load all schedules.

        Raises:
            ScheduleStoreError: If the backing storage cannot be read
        """

    @abstractmethod
    def write(self, schedules: list[MealSchedule]) -> bool:
        """Replace the stored list. Returns True only once the write is durable."""


class InMemoryScheduleStore(ScheduleStore):
    """Process-local store, used by tests."""

    def __init__(self, schedules: Optional[list[MealSchedule]] = None):
        self.raw: Optional[str] = encode_schedules(schedules) if schedules else None
        self.writes = 0

    def read(self) -> list[MealSchedule]:
        return decode_schedules(self.raw)

    def write(self, schedules: list[MealSchedule]) -> bool:
        self.raw = encode_schedules(schedules)
        self.writes += 1
        return True


class SqliteScheduleStore(ScheduleStore):
    """Schedule list persisted in a local SQLite key-value table."""

    def __init__(self, db_path: Optional[str] = None, key: str = config.STORE_KEY):
        self.db_path = db_path or config.STORE_DB
        self.key = key
        self._connection: Optional[sqlite3.Connection] = None
        self._lock = threading.Lock()

    def _get_connection(self) -> sqlite3.Connection:
        """Get or create database connection with WAL mode."""
        if self._connection is not None:
            return self._connection

        Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)

        self._connection = sqlite3.connect(
            self.db_path,
            check_same_thread=False,
            timeout=10.0
        )
        self._connection.execute("PRAGMA journal_mode=WAL")
        self._connection.execute("PRAGMA synchronous=FULL")
        self._connection.execute("PRAGMA busy_timeout=5000")
        self._connection.execute("""
            CREATE TABLE IF NOT EXISTS kv_store (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL,
                updated_at INTEGER NOT NULL
            )
        """)
        self._connection.commit()
        return self._connection

    def read_raw(self) -> Optional[str]:
        """Get the stored document as-is."""
        try:
            with self._lock:
                row = self._get_connection().execute(
                    "SELECT value FROM kv_store WHERE key = ?", (self.key,)
                ).fetchone()
        except (sqlite3.Error, OSError) as e:
            raise ScheduleStoreError(f"Failed to read schedules from {self.db_path}: {e}") from e
        return row[0] if row else None

    def write_raw(self, raw: str) -> bool:
        """Store a document as-is. Returns True once committed."""
        try:
            with self._lock:
                conn = self._get_connection()
                with conn:
                    conn.execute(
                        """
                        INSERT INTO kv_store (key, value, updated_at) VALUES (?, ?, ?)
                        ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = excluded.updated_at
                        """,
                        (self.key, raw, int(time.time()))
                    )
        except (sqlite3.Error, OSError) as e:
            logger.error(f"Failed to write schedules to {self.db_path}: {e}")
            return False
        return True

    def read(self) -> list[MealSchedule]:
        return decode_schedules(self.read_raw())

    def write(self, schedules: list[MealSchedule]) -> bool:
        saved = self.write_raw(encode_schedules(schedules))
        if saved:
            logger.info(f"Saved {len(schedules)} meal schedules")
        return saved

    def close(self) -> None:
        """Close the database connection."""
        with self._lock:
            if self._connection is not None:
                self._connection.close()
                self._connection = None
