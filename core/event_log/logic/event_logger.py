"""
core/event_log/logic/event_logger.py
====================================

Thread-safe event logger with SQLite backend, one instance per database file.
"""

from __future__ import annotations

import threading
from pathlib import Path
from typing import List, Optional

from core.common.db_interface import DatabaseAccess, create_sqlite_connection
from core.config.config_service import config_service
from core.event_log.models.log_entry import LogEntry
from core.helpers.date_time_helper import utc_now_iso

_LEVELS = {"DEBUG": 10, "INFO": 20, "WARNING": 30, "ERROR": 40, "CRITICAL": 50}


class EventLogger(DatabaseAccess):
    """Persists ``feature/event`` entries; entries below *min_level* are dropped."""

    _instances: dict[Path, "EventLogger"] = {}
    _instances_lock = threading.Lock()

    def __init__(self, db_path: Path, *, min_level: str = "INFO") -> None:
        self._lock = threading.Lock()
        self._db_path = Path(db_path)
        self._min_level = _LEVELS.get(min_level.upper(), 20)
        self._ensure_db()

    # ------------------------------------------------------------------ #
    #  Instance accessor
    # ------------------------------------------------------------------ #
    @classmethod
    def instance(cls, db_path: Path | None = None, *, min_level: str | None = None) -> "EventLogger":
        """
        Returns the shared logger for *db_path* (default: configured events DB).
        *min_level* (default: configured level) only applies when the instance is created.
        """
        cfg = config_service.logging
        if db_path is None:
            db_path = cfg.events_db
        db_path = Path(db_path)

        with cls._instances_lock:
            if db_path not in cls._instances:
                cls._instances[db_path] = cls(db_path, min_level=min_level or cfg.level)
            return cls._instances[db_path]

    @property
    def db_path(self) -> Path:
        return self._db_path

    def connect(self):
        return create_sqlite_connection(self._db_path)

    # ------------------------------------------------------------------ #
    #  Public API: log                                                   #
    # ------------------------------------------------------------------ #
    def log(
        self,
        feature: str,
        event: str,
        *,
        level: str = "INFO",
        reference_id: Optional[str] = None,
        message: Optional[str] = None,
    ) -> None:
        level = level.upper()
        if _LEVELS.get(level, 20) < self._min_level:
            return

        entry = LogEntry.from_dict({
            "id": None,
            "timestamp": utc_now_iso(),
            "log_level": level,
            "feature": feature,
            "event": event,
            "reference_id": reference_id,
            "message": message,
        })
        with self._lock:
            self._insert_log(entry)

    # ------------------------------------------------------------------ #
    #  Fetch / Query / Clear                                             #
    # ------------------------------------------------------------------ #
    def fetch_logs(self, limit: int = 100) -> List[LogEntry]:
        return self.query_logs(limit=limit)

    def query_logs(
        self,
        *,
        feature: Optional[str] = None,
        event: Optional[str] = None,
        reference_id: Optional[str] = None,
        level: Optional[str] = None,
        start_time: Optional[str] = None,
        end_time: Optional[str] = None,
        limit: int = 1_000,
    ) -> List[LogEntry]:
        query = "SELECT * FROM logs WHERE 1=1"
        params: list[object] = []

        if feature is not None:
            query += " AND feature = ?"
            params.append(feature)
        if event is not None:
            query += " AND event = ?"
            params.append(event)
        if reference_id is not None:
            query += " AND reference_id = ?"
            params.append(reference_id)
        if level is not None:
            query += " AND log_level = ?"
            params.append(level.upper())
        if start_time is not None:
            query += " AND timestamp >= ?"
            params.append(start_time)
        if end_time is not None:
            query += " AND timestamp <= ?"
            params.append(end_time)

        # id breaks ties between entries written within the same second
        query += " ORDER BY timestamp DESC, id DESC LIMIT ?"
        params.append(limit)

        conn = self.connect()
        try:
            rows = conn.execute(query, params).fetchall()
        finally:
            conn.close()
        return [LogEntry.from_dict(dict(row)) for row in rows]

    def clear_logs(self) -> None:
        with self._lock:
            conn = self.connect()
            try:
                conn.execute("DELETE FROM logs")
                conn.commit()
            finally:
                conn.close()

    # ------------------------------------------------------------------ #
    #  Internal helpers                                                  #
    # ------------------------------------------------------------------ #
    def _ensure_db(self) -> None:
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = self.connect()
        try:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS logs (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    timestamp TEXT NOT NULL,
                    feature TEXT NOT NULL,
                    event TEXT NOT NULL,
                    reference_id TEXT,
                    message TEXT,
                    log_level TEXT NOT NULL DEFAULT 'INFO'
                )
                """
            )
            conn.commit()
        finally:
            conn.close()

    def _insert_log(self, entry: LogEntry) -> None:
        conn = self.connect()
        try:
            conn.execute(
                """
                INSERT INTO logs
                    (timestamp, feature, event, reference_id, message, log_level)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    entry.timestamp.isoformat(),
                    entry.feature,
                    entry.event,
                    entry.reference_id,
                    entry.message,
                    entry.log_level,
                ),
            )
            conn.commit()
        finally:
            conn.close()
