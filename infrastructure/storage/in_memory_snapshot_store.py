"""Snapshot store kept in memory for demos and tests."""
from __future__ import annotations

import copy
from typing import Any

from domain.interfaces import SnapshotStore


class InMemorySnapshotStore(SnapshotStore):
    """Stores deep copies so callers cannot mutate saved records."""

    def __init__(self) -> None:
        self._records: dict[str, dict[str, Any]] = {}

    def load_snapshot(self, key: str) -> dict[str, Any] | None:
        record = self._records.get(key)
        return copy.deepcopy(record) if record is not None else None

    def save_snapshot(self, key: str, record: dict[str, Any]) -> None:
        self._records[key] = copy.deepcopy(record)


__all__ = ["InMemorySnapshotStore"]
