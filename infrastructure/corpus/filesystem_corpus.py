"""Corpus backed by a directory of Markdown notes."""
from __future__ import annotations

import logging
from pathlib import Path

from domain.entities import NoteDocument
from domain.errors import DocumentNotFound
from domain.interfaces import Corpus

logger = logging.getLogger(__name__)

NOTE_EXTENSIONS = (".md",)


class FileSystemCorpus(Corpus):
    """Lists ``*.md`` files under ``root``; ids are POSIX paths relative to it."""

    def __init__(self, root: str | Path, *, encoding: str = "utf-8") -> None:
        self._root = Path(root).expanduser()
        self._encoding = encoding

    @property
    def root(self) -> Path:
        return self._root

    def list_documents(self) -> list[NoteDocument]:
        if not self._root.is_dir():
            logger.warning("Vault directory does not exist: %s", self._root)
            return []
        documents: list[NoteDocument] = []
        for path in self._root.rglob("*"):
            if not path.is_file() or path.suffix.lower() not in NOTE_EXTENSIONS:
                continue
            try:
                modified_at = path.stat().st_mtime
            except OSError:
                continue
            documents.append(NoteDocument(id=path.relative_to(self._root).as_posix(), modified_at=modified_at))
        documents.sort(key=lambda document: document.id)
        return documents

    def read_content(self, document_id: str) -> str:
        path = self._resolve(document_id)
        try:
            raw = path.read_bytes()
        except OSError as exc:
            raise DocumentNotFound(document_id) from exc
        return raw.decode(self._encoding, errors="ignore")

    def _resolve(self, document_id: str) -> Path:
        path = (self._root / document_id).resolve()
        if not path.is_relative_to(self._root.resolve()):
            raise DocumentNotFound(document_id)
        return path


__all__ = ["FileSystemCorpus", "NOTE_EXTENSIONS"]
