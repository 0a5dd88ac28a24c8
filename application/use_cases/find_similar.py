"""Use case that ranks the notes most similar to a given note."""
from __future__ import annotations

import enum
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Sequence

from application.services.ranking import rank
from application.use_cases.cache_lifecycle import flush_cache
from application.use_cases.embedding_utils import MISSING_KEY_MESSAGE, BackendChoice, select_backend
from application.use_cases.resolve_embedding import EmbeddingResolver
from domain.entities import NoteDocument, SimilarityResult, SimilaritySettings
from domain.errors import DocumentNotFound
from domain.interfaces import Corpus, CredentialProvider, Presenter, SnapshotStore

logger = logging.getLogger(__name__)

SEARCHING_MESSAGE = "Finding similar notes..."
ERROR_MESSAGE = "Error finding similar notes"


class InvocationState(enum.Enum):
    RESOLVING_QUERY = "resolving_query"
    RESOLVING_CANDIDATES = "resolving_candidates"
    RANKING = "ranking"
    DONE = "done"
    FAILED = "failed"


class _Invocation:
    """Tracks the state of a single find_similar call for logging."""

    def __init__(self, query_document_id: str) -> None:
        self.query_document_id = query_document_id
        self.state = InvocationState.RESOLVING_QUERY

    def advance(self, state: InvocationState) -> None:
        logger.debug("find_similar(%s): %s -> %s", self.query_document_id, self.state.value, state.value)
        self.state = state


def find_similar(
    query_document_id: str,
    *,
    corpus: Corpus,
    resolver: EmbeddingResolver,
    settings: SimilaritySettings,
    credentials: CredentialProvider | None = None,
    presenter: Presenter | None = None,
    snapshot_store: SnapshotStore | None = None,
    max_workers: int = 1,
) -> list[SimilarityResult]:
    """Return the notes closest to ``query_document_id``, best first.

    ``settings`` is read once; callers pass the snapshot that was current when
    the request arrived. A failure on the query note aborts the whole call,
    while failures on other notes only drop those notes.
    """

    invocation = _Invocation(query_document_id)
    if presenter is not None:
        presenter.notify(SEARCHING_MESSAGE)

    choice = select_backend(settings, remote_embedder=resolver.remote_embedder, credentials=credentials)
    if choice.missing_key and presenter is not None:
        presenter.notify(MISSING_KEY_MESSAGE)

    try:
        documents = corpus.list_documents()
        query_document = next((doc for doc in documents if doc.id == query_document_id), None)
        if query_document is None:
            raise DocumentNotFound(query_document_id)
        query_vector = resolver.resolve(query_document, corpus=corpus, choice=choice)
    except Exception as exc:
        invocation.advance(InvocationState.FAILED)
        logger.exception("Failed to embed query note %s", query_document_id)
        if presenter is not None:
            presenter.notify(f"{ERROR_MESSAGE}: {exc}")
        raise

    invocation.advance(InvocationState.RESOLVING_CANDIDATES)
    candidates = sorted(
        (
            doc
            for doc in documents
            if doc.id != query_document_id and not settings.is_ignored(doc.id)
        ),
        key=lambda doc: doc.id,
    )
    resolved = _resolve_candidates(candidates, corpus=corpus, resolver=resolver, choice=choice, max_workers=max_workers)

    invocation.advance(InvocationState.RANKING)
    results = rank(query_vector, resolved, settings.similarity_floor, settings.result_cap)

    invocation.advance(InvocationState.DONE)
    logger.info("Found %d similar notes for %s", len(results), query_document_id)
    if presenter is not None:
        if not presenter.is_active:
            presenter.reveal()
        presenter.show(query_document_id, results)
    if snapshot_store is not None:
        try:
            flush_cache(resolver.cache, snapshot_store)
        except Exception:
            logger.exception("Failed to persist embedding cache.")
    return results


def _resolve_candidates(
    candidates: Sequence[NoteDocument],
    *,
    corpus: Corpus,
    resolver: EmbeddingResolver,
    choice: BackendChoice,
    max_workers: int,
) -> list[tuple[str, list[float]]]:
    def resolve_one(document: NoteDocument) -> list[float] | None:
        try:
            return resolver.resolve(document, corpus=corpus, choice=choice)
        except DocumentNotFound:
            logger.info("Skipping %s: document disappeared", document.id)
        except Exception:
            logger.exception("Skipping %s: embedding failed", document.id)
        return None

    if max_workers > 1 and len(candidates) > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            vectors = list(pool.map(resolve_one, candidates))
    else:
        vectors = [resolve_one(document) for document in candidates]

    return [
        (document.id, vector)
        for document, vector in zip(candidates, vectors)
        if vector is not None
    ]


def refresh_on_active_document(
    document_id: str,
    *,
    presenter: Presenter,
    **kwargs,
) -> list[SimilarityResult] | None:
    """Re-run find_similar after the host switched notes, if results are on screen."""
    if not presenter.is_active:
        return None
    return find_similar(document_id, presenter=presenter, **kwargs)


__all__ = ["InvocationState", "find_similar", "refresh_on_active_document"]
