"""Cache-or-compute resolution of document embeddings."""
from __future__ import annotations

import logging
import time
from typing import Callable

from application.services.embedding_cache import EmbeddingCache
from application.use_cases.embedding_utils import BackendChoice
from domain.entities import NoteDocument
from domain.errors import ConfigError, RemoteEmbeddingError
from domain.interfaces import Corpus, Embedder, Presenter, RemoteEmbedder

logger = logging.getLogger(__name__)

FALLBACK_MESSAGE = "Failed to get remote embedding. Falling back to local method."
REMOTE_ERROR_MESSAGE = "Remote embedding error"


class EmbeddingResolver:
    """Returns a document's vector from the cache, computing it when stale."""

    def __init__(
        self,
        *,
        cache: EmbeddingCache,
        local_embedder: Embedder,
        remote_embedder: RemoteEmbedder | None = None,
        presenter: Presenter | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.cache = cache
        self._local = local_embedder
        self._remote = remote_embedder
        self._presenter = presenter
        self._clock = clock

    @property
    def remote_embedder(self) -> RemoteEmbedder | None:
        return self._remote

    def resolve(self, document: NoteDocument, *, corpus: Corpus, choice: BackendChoice) -> list[float]:
        entry = self.cache.get(document.id)
        if entry is not None and entry.is_fresh_for(document, *self._expected_tag(choice)):
            return entry.vector

        content = corpus.read_content(document.id)
        vector, backend, model_id = self._compute(document.id, content, choice)
        self.cache.put(document.id, vector, self._clock(), backend=backend, model_id=model_id)
        return vector

    def _expected_tag(self, choice: BackendChoice) -> tuple[str, str, int | None]:
        if choice.backend == "remote" and self._remote is not None:
            return self._remote.backend, self._remote.model_id, None
        return self._local.backend, self._local.model_id, self._local.dimension

    def _compute(self, document_id: str, content: str, choice: BackendChoice) -> tuple[list[float], str, str]:
        if choice.backend == "remote" and self._remote is not None:
            try:
                vector = self._remote.embed_text(content, choice.api_key)
                return vector, self._remote.backend, self._remote.model_id
            except (RemoteEmbeddingError, ConfigError) as exc:
                logger.warning("Remote embedding failed for %s: %s", document_id, exc)
                if self._presenter is not None:
                    self._presenter.notify(f"{REMOTE_ERROR_MESSAGE}: {exc}")
                    self._presenter.notify(FALLBACK_MESSAGE)
        logger.debug("Computing local embedding for %s", document_id)
        return self._local.embed_text(content), self._local.backend, self._local.model_id


__all__ = ["EmbeddingResolver", "FALLBACK_MESSAGE", "REMOTE_ERROR_MESSAGE"]
