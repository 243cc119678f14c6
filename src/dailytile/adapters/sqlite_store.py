"""SQLite-backed durable key-value state, one namespace per role."""

import sqlite3
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from ..core.errors import StorageError
from ..core.ports import KeyValueStore

SENDER_NAMESPACE = "sender"
RECEIVER_NAMESPACE = "receiver"


@dataclass
class SQLiteStore(KeyValueStore):
    """
    Small crash-safe preference store.

    Values are stored as text; integers round-trip through ``str``. Every
    sqlite3 failure surfaces as StorageError so callers can degrade.
    """

    db_path: Path
    namespace: str

    def _conn(self) -> sqlite3.Connection:
        """Get a connection to the SQLite database."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(str(self.db_path), check_same_thread=False, timeout=5.0)
        conn.execute("PRAGMA journal_mode=WAL")
        conn.execute("PRAGMA synchronous=FULL")
        conn.execute("""
            CREATE TABLE IF NOT EXISTS prefs (
                namespace TEXT NOT NULL,
                key TEXT NOT NULL,
                value TEXT NOT NULL,
                PRIMARY KEY (namespace, key)
            )
        """)
        return conn

    def get(self, key: str) -> str | None:
        return self.get_many([key]).get(key)

    def get_many(self, keys: list[str]) -> dict[str, str]:
        if not keys:
            return {}
        placeholders = ",".join("?" for _ in keys)
        try:
            conn = self._conn()
            try:
                rows = conn.execute(
                    f"SELECT key, value FROM prefs WHERE namespace = ? AND key IN ({placeholders})",
                    (self.namespace, *keys),
                ).fetchall()
            finally:
                conn.close()
        except (sqlite3.Error, OSError) as e:
            raise StorageError(f"Reading {self.db_path} failed: {e}") from e
        return {k: v for k, v in rows}

    def put_many(self, values: Mapping[str, str | int]) -> None:
        rows = [(self.namespace, k, str(v)) for k, v in values.items()]
        try:
            conn = self._conn()
            try:
                with conn:
                    conn.executemany(
                        "INSERT INTO prefs (namespace, key, value) VALUES (?, ?, ?) "
                        "ON CONFLICT(namespace, key) DO UPDATE SET value = excluded.value",
                        rows,
                    )
            finally:
                conn.close()
        except (sqlite3.Error, OSError) as e:
            raise StorageError(f"Writing {self.db_path} failed: {e}") from e
