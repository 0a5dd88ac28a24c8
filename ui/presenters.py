"""Presenters that render similarity results outside of a GUI host."""
from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Callable, Iterator, Sequence

from domain.entities import SimilarityResult
from domain.interfaces import Presenter

logger = logging.getLogger(__name__)

NO_RESULTS_MESSAGE = "No similar notes found matching your criteria."


def score_category(score: float) -> str:
    if score >= 0.85:
        return "high"
    if score >= 0.75:
        return "medium"
    return "low"


def format_score(score: float) -> str:
    return f"{score * 100:.0f}%"


def backend_label(backend: str) -> str:
    return "Using Gemini embeddings" if backend == "remote" else "Using local embeddings"


def render_results(query_document_id: str, results: Sequence[SimilarityResult], *, backend: str = "local") -> list[str]:
    """Return the plain-text lines of a results panel."""
    lines = [f"Notes similar to: {query_document_id}", backend_label(backend)]
    if not results:
        lines.append(NO_RESULTS_MESSAGE)
        return lines
    for result in results:
        lines.append(f"{format_score(result.score):>5}  [{score_category(result.score)}]  {result.document_id}")
    return lines


class LoggingPresenter(Presenter):
    """Writes notifications to the log and results through ``write``."""

    def __init__(self, write: Callable[[str], None] = print, *, backend: Callable[[], str] | None = None) -> None:
        self._write = write
        self._backend = backend or (lambda: "local")
        self._active = False

    @property
    def is_active(self) -> bool:
        return self._active

    def set_backend_source(self, backend: Callable[[], str]) -> None:
        self._backend = backend

    def reveal(self) -> None:
        self._active = True

    def notify(self, message: str) -> None:
        logger.info(message)

    def show(self, query_document_id: str, results: Sequence[SimilarityResult]) -> None:
        for line in render_results(query_document_id, results, backend=self._backend()):
            self._write(line)


class CollectingPresenter(Presenter):
    """Keeps the latest results and notifications in memory for the HTTP layer."""

    def __init__(self, *, active: bool = True) -> None:
        self._active = active
        self._lock = threading.Lock()
        self._request_lock = threading.Lock()
        self.notifications: list[str] = []
        self.last_query: str | None = None
        self.last_results: list[SimilarityResult] = []

    @property
    def is_active(self) -> bool:
        return self._active

    def reveal(self) -> None:
        self._active = True

    def notify(self, message: str) -> None:
        with self._lock:
            self.notifications.append(message)

    def show(self, query_document_id: str, results: Sequence[SimilarityResult]) -> None:
        with self._lock:
            self.last_query = query_document_id
            self.last_results = list(results)

    def drain_notifications(self) -> list[str]:
        with self._lock:
            messages, self.notifications = self.notifications, []
        return messages

    @contextmanager
    def collect(self) -> Iterator[list[str]]:
        """Gather the notifications raised while the block runs.

        Blocks are serialised so each caller only sees its own messages; anything
        queued beforehand is discarded. The list is filled when the block exits,
        including when it raises.
        """
        messages: list[str] = []
        with self._request_lock:
            self.drain_notifications()
            try:
                yield messages
            finally:
                messages.extend(self.drain_notifications())


__all__ = [
    "CollectingPresenter",
    "LoggingPresenter",
    "NO_RESULTS_MESSAGE",
    "backend_label",
    "format_score",
    "render_results",
    "score_category",
]
