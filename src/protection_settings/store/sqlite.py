"""Protection setting persistence backed by SQLite.

One row per ``(protection, setting)`` pair holding the setting's JSON
text.  Writes are single-statement upserts committed immediately, so a
key is either fully written or left at its previous value.  SQLite
errors are re-raised as ``OSError`` to match the store contract.
"""

from __future__ import annotations

import contextlib
import sqlite3
import threading
from datetime import datetime, timezone

_CREATE_SQL = """\
CREATE TABLE IF NOT EXISTS protection_settings (
    protection  TEXT NOT NULL,
    setting     TEXT NOT NULL,
    value       TEXT NOT NULL,
    updated_at  TEXT NOT NULL,
    PRIMARY KEY (protection, setting)
);
"""


class SQLiteSettingsStore:
    """Thread-safe settings persistence sharing an existing SQLite connection.

    Parameters
    ----------
    conn:
        An open ``sqlite3.Connection``.
    lock:
        Optional ``threading.RLock``.  One is created automatically if not
        supplied.
    """

    def __init__(
        self,
        conn: sqlite3.Connection,
        lock: threading.RLock | None = None,
    ) -> None:
        self._conn = conn
        self._lock = lock if lock is not None else threading.RLock()
        with self._lock:
            self._conn.executescript(_CREATE_SQL)

    @classmethod
    def open(cls, path: str) -> SQLiteSettingsStore:
        """Open (creating if needed) a database file and wrap it in a store."""
        try:
            return cls(sqlite3.connect(path))
        except sqlite3.Error as exc:
            raise OSError(f"Cannot open settings database {path}: {exc}") from exc

    async def load(self, protection_name: str, setting_name: str) -> str | None:
        with self._lock:
            try:
                row = self._conn.execute(
                    """SELECT value FROM protection_settings
                       WHERE protection = ? AND setting = ?""",
                    (protection_name, setting_name),
                ).fetchone()
            except sqlite3.Error as exc:
                raise OSError(
                    f"Failed to read {protection_name}.{setting_name}: {exc}"
                ) from exc
            return row[0] if row is not None else None

    async def load_all(self, protection_name: str) -> dict[str, str]:
        with self._lock:
            try:
                rows = self._conn.execute(
                    """SELECT setting, value FROM protection_settings
                       WHERE protection = ?""",
                    (protection_name,),
                ).fetchall()
            except sqlite3.Error as exc:
                raise OSError(f"Failed to read settings of {protection_name}: {exc}") from exc
            return {setting: value for setting, value in rows}

    async def store(
        self, protection_name: str, setting_name: str, serialized: str,
    ) -> None:
        now_iso = datetime.now(timezone.utc).isoformat()
        with self._lock:
            try:
                self._conn.execute(
                    """INSERT INTO protection_settings
                       (protection, setting, value, updated_at)
                       VALUES (?, ?, ?, ?)
                       ON CONFLICT (protection, setting)
                       DO UPDATE SET value = excluded.value,
                                     updated_at = excluded.updated_at""",
                    (protection_name, setting_name, serialized, now_iso),
                )
                self._conn.commit()
            except sqlite3.Error as exc:
                with contextlib.suppress(sqlite3.Error):
                    self._conn.rollback()
                raise OSError(
                    f"Failed to write {protection_name}.{setting_name}: {exc}"
                ) from exc

    def reset(self) -> None:
        """Clear all setting records.  Intended for tests."""
        with self._lock:
            self._conn.execute("DELETE FROM protection_settings")
            self._conn.commit()

    def close(self) -> None:
        with self._lock:
            self._conn.close()
