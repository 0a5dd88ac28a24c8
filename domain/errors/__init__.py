"""Error taxonomy shared by every layer."""
from __future__ import annotations


class NoteThreadError(Exception):
    """Base class for all errors raised by NoteThread."""


class ConfigError(NoteThreadError):
    """A setting or credential is missing or invalid; the user has to fix it."""


class RemoteEmbeddingError(NoteThreadError):
    """The remote embedding service could not produce a vector."""


class TransportError(RemoteEmbeddingError):
    """The request never got a response (connection failure, timeout)."""


class ServiceError(RemoteEmbeddingError):
    """The service answered with a non-success status."""

    def __init__(self, status: int, message: str) -> None:
        super().__init__(f"{message} (HTTP {status})")
        self.status = status
        self.message = message


class FormatError(RemoteEmbeddingError):
    """The response could not be parsed into an embedding vector."""


class DocumentNotFound(NoteThreadError):
    """A document vanished between listing and reading."""

    def __init__(self, document_id: str) -> None:
        super().__init__(f"Document not found: {document_id}")
        self.document_id = document_id


__all__ = [
    "ConfigError",
    "DocumentNotFound",
    "FormatError",
    "NoteThreadError",
    "RemoteEmbeddingError",
    "ServiceError",
    "TransportError",
]
