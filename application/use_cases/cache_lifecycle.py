"""Loading, saving and clearing the persisted embedding cache."""
from __future__ import annotations

import logging

from application.services.embedding_cache import EmbeddingCache
from domain.entities import SimilaritySettings
from domain.interfaces import Presenter, SnapshotStore

logger = logging.getLogger(__name__)

EMBEDDINGS_KEY = "embeddings"
SETTINGS_KEY = "settings"
CACHE_CLEARED_MESSAGE = "Embedding cache cleared"


def restore_cache(
    cache: EmbeddingCache,
    store: SnapshotStore,
    *,
    settings: SimilaritySettings,
    now: float,
) -> int:
    """Load the snapshot into ``cache`` and sweep expired entries.

    Returns the number of entries kept.
    """
    records = store.load_snapshot(EMBEDDINGS_KEY) or {}
    cache.restore(EmbeddingCache.from_records(records))
    cache.purge_expired(now, settings.cache_expiration_seconds)
    logger.info("Restored %d cached embeddings", len(cache))
    return len(cache)


def flush_cache(cache: EmbeddingCache, store: SnapshotStore) -> None:
    store.save_snapshot(EMBEDDINGS_KEY, cache.to_records())


def clear_cache(cache: EmbeddingCache, store: SnapshotStore, presenter: Presenter | None = None) -> None:
    cache.clear()
    flush_cache(cache, store)
    if presenter is not None:
        presenter.notify(CACHE_CLEARED_MESSAGE)


def load_settings(store: SnapshotStore) -> SimilaritySettings:
    return SimilaritySettings.from_mapping(store.load_snapshot(SETTINGS_KEY))


def save_settings(store: SnapshotStore, settings: SimilaritySettings) -> None:
    store.save_snapshot(SETTINGS_KEY, settings.to_mapping())


__all__ = [
    "CACHE_CLEARED_MESSAGE",
    "EMBEDDINGS_KEY",
    "SETTINGS_KEY",
    "clear_cache",
    "flush_cache",
    "load_settings",
    "restore_cache",
    "save_settings",
]
