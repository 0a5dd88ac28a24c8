"""Abstract interfaces for the NoteThread system."""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Sequence

from domain.entities import NoteDocument, SimilarityResult


class Embedder(ABC):
    """Turns note text into a vector without external help."""

    backend: str = "local"

    @property
    @abstractmethod
    def model_id(self) -> str:
        """Return the stable identifier for this embedding model."""

    @property
    @abstractmethod
    def dimension(self) -> int:
        """Return the embedding dimension for this model."""

    @abstractmethod
    def embed_text(self, text: str) -> list[float]:
        """Embed a single text into a dense vector."""


class RemoteEmbedder(ABC):
    """Embedding service reached over the network with an API key."""

    backend: str = "remote"

    @property
    @abstractmethod
    def model_id(self) -> str:
        """Return the remote model name."""

    @abstractmethod
    def embed_text(self, text: str, api_key: str) -> list[float]:
        """Embed a text remotely; raises a RemoteEmbeddingError subclass or ConfigError."""


class Corpus(ABC):
    """Read-only access to the notes owned by the host."""

    @abstractmethod
    def list_documents(self) -> list[NoteDocument]:
        """Return every document with its current modification time."""

    @abstractmethod
    def read_content(self, document_id: str) -> str:
        """Return the text of a document or raise DocumentNotFound."""


class SnapshotStore(ABC):
    """Persists opaque JSON-compatible records under a key."""

    @abstractmethod
    def load_snapshot(self, key: str) -> dict[str, Any] | None:
        """Return the stored record or None."""

    @abstractmethod
    def save_snapshot(self, key: str, record: dict[str, Any]) -> None:
        """Replace the record stored under ``key``."""


class Presenter(ABC):
    """Receives ranked results and transient status messages."""

    @property
    @abstractmethod
    def is_active(self) -> bool:
        """Whether the results view is currently visible."""

    @abstractmethod
    def show(self, query_document_id: str, results: Sequence[SimilarityResult]) -> None:
        """Render the neighbours of the query document."""

    @abstractmethod
    def notify(self, message: str) -> None:
        """Display a transient status notification."""

    def reveal(self) -> None:
        """Bring the results view to the front."""


class CredentialProvider(ABC):
    """Supplies the API key for the remote backend at call time."""

    @abstractmethod
    def get_api_key(self) -> str:
        """Return the key, or an empty string when none is configured."""


__all__ = [
    "Corpus",
    "CredentialProvider",
    "Embedder",
    "Presenter",
    "RemoteEmbedder",
    "SnapshotStore",
]
