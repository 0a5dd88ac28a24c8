"""SQLite key-value store for settings and embedding cache snapshots."""
from __future__ import annotations

import json
import sqlite3
from pathlib import Path
from typing import Any

from domain.interfaces import SnapshotStore


class SqliteSnapshotStore(SnapshotStore):
    """Keeps one JSON document per key in a single table."""

    def __init__(self, db_path: str | Path = "notethread.db") -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()

    def _connect(self) -> sqlite3.Connection:
        return sqlite3.connect(self._db_path)

    def _ensure_schema(self) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS snapshots (
                    key TEXT PRIMARY KEY,
                    payload TEXT NOT NULL,
                    updated_at TEXT DEFAULT CURRENT_TIMESTAMP
                )
                """
            )

    def load_snapshot(self, key: str) -> dict[str, Any] | None:
        with self._connect() as conn:
            row = conn.execute(
                """
                SELECT payload FROM snapshots WHERE key = ?
                """,
                (key,),
            ).fetchone()
        if row is None:
            return None
        return json.loads(row[0])

    def save_snapshot(self, key: str, record: dict[str, Any]) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                REPLACE INTO snapshots (key, payload, updated_at)
                VALUES (?, ?, CURRENT_TIMESTAMP)
                """,
                (key, json.dumps(record, ensure_ascii=False)),
            )

    def keys(self) -> list[str]:
        with self._connect() as conn:
            rows = conn.execute("SELECT key FROM snapshots ORDER BY key").fetchall()
        return [row[0] for row in rows]


__all__ = ["SqliteSnapshotStore"]
