import sqlite3
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, List, Optional, Tuple

from ...domain.models import ConfigEntry, MessageStatus, QueueMessage, SettingType
from ...domain.ports.persistence import PersistenceGateway

# (type, data, enabled) rows the worker expects to find at startup.
DEFAULT_SETTINGS: Tuple[Tuple[str, str, bool], ...] = (
    (SettingType.TELEGRAM_BOT, "", True),
    (SettingType.TRADINGVIEW_SCREENSHOT, "1D", True),
    (SettingType.TRADINGVIEW_CREDENTIALS, "", False),
)


class SQLitePersistence(PersistenceGateway):
    """SQLite-backed implementation of the persistence gateway."""

    def __init__(self, path: Path, *, seed_defaults: bool = True) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(path, check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._lock = threading.Lock()
        self._initialize()
        if seed_defaults:
            self.seed_default_settings()

    def _initialize(self) -> None:
        with self._conn:
            self._conn.executescript(
                """
                CREATE TABLE IF NOT EXISTS settings (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    type TEXT NOT NULL,
                    data TEXT NOT NULL DEFAULT '',
                    enabled INTEGER NOT NULL DEFAULT 1,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                );

                CREATE INDEX IF NOT EXISTS idx_settings_type ON settings(type);

                CREATE TABLE IF NOT EXISTS messages (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    data TEXT NOT NULL,
                    timeframe TEXT,
                    channels TEXT NOT NULL,
                    status TEXT NOT NULL DEFAULT 'pending',
                    log TEXT,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                );

                CREATE INDEX IF NOT EXISTS idx_messages_status ON messages(status);
                """
            )

    def seed_default_settings(self) -> None:
        for setting_type, data, enabled in DEFAULT_SETTINGS:
            self.find_or_create_setting(setting_type, data, enabled)

    def close(self) -> None:
        self._conn.close()

    # SettingsRepository API -------------------------------------------------
    def list_settings(self) -> List[ConfigEntry]:
        with self._lock:
            cur = self._conn.execute("SELECT * FROM settings ORDER BY id ASC")
            rows = cur.fetchall()
        return [self._row_to_setting(row) for row in rows]

    def create_setting(self, setting_type: str, data: str, enabled: bool = True) -> ConfigEntry:
        now = self._now()
        with self._lock, self._conn:
            cur = self._conn.execute(
                """
                INSERT INTO settings (type, data, enabled, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?)
                """,
                (setting_type, data, int(enabled), now, now),
            )
            cur = self._conn.execute("SELECT * FROM settings WHERE id = ?", (cur.lastrowid,))
            row = cur.fetchone()
        if not row:
            raise RuntimeError("Failed to persist setting.")
        return self._row_to_setting(row)

    def find_setting(self, setting_type: str) -> Optional[ConfigEntry]:
        with self._lock:
            cur = self._conn.execute(
                "SELECT * FROM settings WHERE type = ? ORDER BY id ASC LIMIT 1",
                (setting_type,),
            )
            row = cur.fetchone()
        return self._row_to_setting(row) if row else None

    def find_or_create_setting(
        self, setting_type: str, data: str, enabled: bool = True
    ) -> ConfigEntry:
        existing = self.find_setting(setting_type)
        if existing is not None:
            return existing
        return self.create_setting(setting_type, data, enabled)

    def update_setting_data(self, setting_type: str, data: str) -> int:
        with self._lock, self._conn:
            cur = self._conn.execute(
                "UPDATE settings SET data = ?, updated_at = ? WHERE type = ?",
                (data, self._now(), setting_type),
            )
            return cur.rowcount

    # QueueRepository API ----------------------------------------------------
    def create_message(self, data: str, channels: str, timeframe: Optional[str]) -> QueueMessage:
        now = self._now()
        with self._lock, self._conn:
            cur = self._conn.execute(
                """
                INSERT INTO messages (data, timeframe, channels, status, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (data, timeframe, channels, MessageStatus.PENDING, now, now),
            )
            cur = self._conn.execute("SELECT * FROM messages WHERE id = ?", (cur.lastrowid,))
            row = cur.fetchone()
        if not row:
            raise RuntimeError("Failed to persist message.")
        return self._row_to_message(row)

    def get_message(self, message_id: int) -> Optional[QueueMessage]:
        with self._lock:
            cur = self._conn.execute("SELECT * FROM messages WHERE id = ?", (message_id,))
            row = cur.fetchone()
        return self._row_to_message(row) if row else None

    def get_messages_by_status(self, status: str) -> List[QueueMessage]:
        with self._lock:
            cur = self._conn.execute(
                "SELECT * FROM messages WHERE status = ? ORDER BY id ASC", (status,)
            )
            rows = cur.fetchall()
        return [self._row_to_message(row) for row in rows]

    def get_recent_messages(self, status: Optional[str], limit: int) -> List[QueueMessage]:
        query = "SELECT * FROM messages"
        params: List[Any] = []
        if status:
            query += " WHERE status = ?"
            params.append(status)
        query += " ORDER BY id DESC LIMIT ?"
        params.append(limit)
        with self._lock:
            cur = self._conn.execute(query, params)
            rows = cur.fetchall()
        return [self._row_to_message(row) for row in rows]

    def update_message(
        self,
        message_id: int,
        *,
        status: Optional[str] = None,
        log: Optional[str] = None,
    ) -> None:
        updates = []
        params: List[Any] = []
        if status is not None:
            updates.append("status = ?")
            params.append(status)
        if log is not None:
            updates.append("log = ?")
            params.append(log)
        if not updates:
            return
        updates.append("updated_at = ?")
        params.append(self._now())
        params.append(message_id)
        statement = f"UPDATE messages SET {', '.join(updates)} WHERE id = ?"
        with self._lock, self._conn:
            self._conn.execute(statement, params)

    # Helpers ----------------------------------------------------------------
    @staticmethod
    def _now() -> str:
        return datetime.now(timezone.utc).replace(microsecond=0).isoformat()

    @staticmethod
    def _parse_datetime(value: str) -> datetime:
        result = datetime.fromisoformat(value)
        if result.tzinfo is None:
            return result.replace(tzinfo=timezone.utc)
        return result.astimezone(timezone.utc)

    def _row_to_setting(self, row: sqlite3.Row) -> ConfigEntry:
        return ConfigEntry(
            id=row["id"],
            type=row["type"],
            data=row["data"],
            enabled=bool(row["enabled"]),
            created_at=self._parse_datetime(row["created_at"]),
            updated_at=self._parse_datetime(row["updated_at"]),
        )

    def _row_to_message(self, row: sqlite3.Row) -> QueueMessage:
        return QueueMessage(
            id=row["id"],
            data=row["data"],
            timeframe=row["timeframe"],
            channels=row["channels"],
            status=row["status"],
            log=row["log"],
            created_at=self._parse_datetime(row["created_at"]),
            updated_at=self._parse_datetime(row["updated_at"]),
        )
