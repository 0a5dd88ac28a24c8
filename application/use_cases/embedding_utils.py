"""Helpers for choosing which embedding backend serves an invocation."""
from __future__ import annotations

import logging
from dataclasses import dataclass

from domain.entities import SimilaritySettings
from domain.interfaces import CredentialProvider, RemoteEmbedder

logger = logging.getLogger(__name__)

MISSING_KEY_MESSAGE = "Missing Gemini API key. Using local embeddings."


@dataclass(slots=True, frozen=True)
class BackendChoice:
    """The backend an invocation will actually use, with its key."""

    backend: str
    api_key: str = ""
    missing_key: bool = False


def select_backend(
    settings: SimilaritySettings,
    *,
    remote_embedder: RemoteEmbedder | None,
    credentials: CredentialProvider | None,
) -> BackendChoice:
    """Return ``remote`` only when it is configured, available and has a key."""
    if settings.backend != "remote":
        return BackendChoice(backend="local")
    if remote_embedder is None:
        logger.warning("Remote backend selected but no remote embedder is configured")
        return BackendChoice(backend="local")
    api_key = credentials.get_api_key() if credentials is not None else ""
    if not api_key or not api_key.strip():
        logger.warning("Remote backend selected but no API key is available")
        return BackendChoice(backend="local", missing_key=True)
    return BackendChoice(backend="remote", api_key=api_key.strip())


__all__ = ["BackendChoice", "MISSING_KEY_MESSAGE", "select_backend"]
