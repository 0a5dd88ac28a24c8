"""In-memory embedding cache mirrored to a key-value snapshot."""
from __future__ import annotations

import logging
from typing import Any, Mapping, Sequence

from domain.entities import CacheEntry

logger = logging.getLogger(__name__)


class EmbeddingCache:
    """Maps document ids to their most recently computed embedding.

    Writes replace the whole entry for a key, so concurrent invocations that
    embed the same document simply leave the last result behind.
    """

    def __init__(self) -> None:
        self._entries: dict[str, CacheEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, document_id: object) -> bool:
        return document_id in self._entries

    def get(self, document_id: str) -> CacheEntry | None:
        return self._entries.get(document_id)

    def put(
        self,
        document_id: str,
        vector: Sequence[float],
        timestamp: float,
        backend: str | None = None,
        model_id: str | None = None,
    ) -> CacheEntry:
        entry = CacheEntry(
            document_id=document_id,
            vector=list(vector),
            computed_at=timestamp,
            backend=backend,
            model_id=model_id,
        )
        self._entries[document_id] = entry
        return entry

    def purge_expired(self, now: float, expiration_seconds: float) -> int:
        """Drop entries computed more than ``expiration_seconds`` before ``now``."""
        expired = [
            document_id
            for document_id, entry in list(self._entries.items())
            if now - entry.computed_at > expiration_seconds
        ]
        for document_id in expired:
            self._entries.pop(document_id, None)
        if expired:
            logger.info("Purged %d expired embeddings", len(expired))
        return len(expired)

    def clear(self) -> None:
        self._entries.clear()

    def snapshot(self) -> dict[str, CacheEntry]:
        return dict(self._entries)

    def restore(self, entries: Mapping[str, CacheEntry]) -> None:
        self._entries = dict(entries)

    def to_records(self) -> dict[str, dict[str, Any]]:
        """Serialise the cache into JSON-compatible records."""
        return {
            document_id: {
                "embedding": entry.vector,
                "timestamp": entry.computed_at,
                "backend": entry.backend,
                "model": entry.model_id,
                "dimension": entry.dimension,
            }
            for document_id, entry in self.snapshot().items()
        }

    @staticmethod
    def from_records(records: Mapping[str, Mapping[str, Any]]) -> dict[str, CacheEntry]:
        entries: dict[str, CacheEntry] = {}
        for document_id, record in records.items():
            try:
                vector = [float(value) for value in record["embedding"]]
                timestamp = float(record["timestamp"])
            except (KeyError, TypeError, ValueError):
                logger.warning("Skipping malformed cache record for %s", document_id)
                continue
            entries[document_id] = CacheEntry(
                document_id=document_id,
                vector=vector,
                computed_at=timestamp,
                backend=record.get("backend"),
                model_id=record.get("model"),
                dimension=len(vector),
            )
        return entries


__all__ = ["EmbeddingCache"]
