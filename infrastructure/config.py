"""Dependency wiring for the NoteThread application."""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Literal

from application.services.embedding_cache import EmbeddingCache
from application.use_cases.cache_lifecycle import (
    clear_cache,
    flush_cache,
    load_settings,
    restore_cache,
    save_settings,
)
from application.use_cases.find_similar import find_similar, refresh_on_active_document
from application.use_cases.resolve_embedding import EmbeddingResolver
from domain.entities import SimilarityResult, SimilaritySettings
from domain.interfaces import Corpus, CredentialProvider, Embedder, Presenter, RemoteEmbedder, SnapshotStore
from infrastructure.corpus.filesystem_corpus import FileSystemCorpus
from infrastructure.corpus.in_memory_corpus import InMemoryCorpus
from infrastructure.credentials.api_key_providers import EnvCredentialProvider
from infrastructure.embedding.gemini_embedding_client import GeminiEmbeddingClient, GeminiEmbeddingConfig
from infrastructure.embedding.token_hash_embedder import TokenHashEmbedder
from infrastructure.storage.in_memory_snapshot_store import InMemorySnapshotStore
from infrastructure.storage.sqlite_snapshot_store import SqliteSnapshotStore

logger = logging.getLogger(__name__)

CorpusName = Literal["filesystem", "memory"]
SnapshotStoreName = Literal["sqlite", "memory"]


@dataclass(slots=True)
class ContainerConfig:
    """Configuration for selecting and tuning infrastructure components."""

    vault_root: str | Path = "."
    data_root: str | Path = ".notethread"
    db_name: str = "notethread.db"
    corpus: CorpusName = "filesystem"
    snapshot_store: SnapshotStoreName = "sqlite"
    embedding_dimension: int = 200
    remote: GeminiEmbeddingConfig = field(default_factory=GeminiEmbeddingConfig)
    max_workers: int = 4

    @property
    def db_path(self) -> Path:
        return Path(self.data_root).expanduser() / self.db_name


@dataclass(slots=True)
class Container:
    """Context object holding the cache, settings and collaborators of one host session."""

    corpus: Corpus
    snapshot_store: SnapshotStore
    cache: EmbeddingCache
    resolver: EmbeddingResolver
    local_embedder: Embedder
    remote_embedder: RemoteEmbedder | None
    credentials: CredentialProvider | None
    settings: SimilaritySettings
    presenter: Presenter | None = None
    max_workers: int = 1

    def find_similar(self, document_id: str) -> list[SimilarityResult]:
        return find_similar(document_id, **self._use_case_kwargs())

    def on_active_document_changed(self, document_id: str) -> list[SimilarityResult] | None:
        if self.presenter is None:
            return None
        kwargs = self._use_case_kwargs()
        kwargs.pop("presenter")
        return refresh_on_active_document(document_id, presenter=self.presenter, **kwargs)

    def update_settings(self, **changes: Any) -> SimilaritySettings:
        self.settings = self.settings.replace(**changes)
        save_settings(self.snapshot_store, self.settings)
        return self.settings

    def clear_cache(self) -> None:
        clear_cache(self.cache, self.snapshot_store, self.presenter)

    def close(self) -> None:
        flush_cache(self.cache, self.snapshot_store)

    def _use_case_kwargs(self) -> dict[str, Any]:
        return {
            "corpus": self.corpus,
            "resolver": self.resolver,
            "settings": self.settings,
            "credentials": self.credentials,
            "presenter": self.presenter,
            "snapshot_store": self.snapshot_store,
            "max_workers": self.max_workers,
        }


_CORPUS_FACTORIES: dict[CorpusName, Callable[[ContainerConfig], Corpus]] = {
    "filesystem": lambda cfg: FileSystemCorpus(cfg.vault_root),
    "memory": lambda cfg: InMemoryCorpus(),
}

_SNAPSHOT_STORE_FACTORIES: dict[SnapshotStoreName, Callable[[ContainerConfig], SnapshotStore]] = {
    "sqlite": lambda cfg: SqliteSnapshotStore(db_path=cfg.db_path),
    "memory": lambda cfg: InMemorySnapshotStore(),
}


def build_default_container(
    config: ContainerConfig | None = None,
    *,
    presenter: Presenter | None = None,
    credentials: CredentialProvider | None = None,
    corpus: Corpus | None = None,
    snapshot_store: SnapshotStore | None = None,
    clock: Callable[[], float] = time.time,
) -> Container:
    """Instantiate the default stack and restore persisted settings and cache."""

    cfg = config or ContainerConfig()
    if corpus is None:
        try:
            corpus = _CORPUS_FACTORIES[cfg.corpus](cfg)
        except KeyError as exc:
            raise ValueError(f"Unknown corpus '{cfg.corpus}'") from exc
    if snapshot_store is None:
        try:
            snapshot_store = _SNAPSHOT_STORE_FACTORIES[cfg.snapshot_store](cfg)
        except KeyError as exc:
            raise ValueError(f"Unknown snapshot store '{cfg.snapshot_store}'") from exc

    settings = load_settings(snapshot_store)
    cache = EmbeddingCache()
    restore_cache(cache, snapshot_store, settings=settings, now=clock())

    local_embedder = TokenHashEmbedder(dimension=cfg.embedding_dimension)
    progress = presenter.notify if presenter is not None else None
    remote_embedder = GeminiEmbeddingClient(cfg.remote, progress=progress)
    resolver = EmbeddingResolver(
        cache=cache,
        local_embedder=local_embedder,
        remote_embedder=remote_embedder,
        presenter=presenter,
        clock=clock,
    )
    logger.info("NoteThread ready: backend=%s, %d cached embeddings", settings.backend, len(cache))

    return Container(
        corpus=corpus,
        snapshot_store=snapshot_store,
        cache=cache,
        resolver=resolver,
        local_embedder=local_embedder,
        remote_embedder=remote_embedder,
        credentials=credentials if credentials is not None else EnvCredentialProvider(),
        settings=settings,
        presenter=presenter,
        max_workers=max(1, cfg.max_workers),
    )


__all__ = ["Container", "ContainerConfig", "build_default_container"]
