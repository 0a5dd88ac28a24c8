"""Corpus kept in Python dictionaries, for hosts that own the text themselves."""
from __future__ import annotations

import time

from domain.entities import NoteDocument
from domain.errors import DocumentNotFound
from domain.interfaces import Corpus


class InMemoryCorpus(Corpus):
    """Stores note text and modification times in memory."""

    def __init__(self, notes: dict[str, str] | None = None, *, modified_at: float = 0.0) -> None:
        self._content: dict[str, str] = {}
        self._modified: dict[str, float] = {}
        for document_id, text in (notes or {}).items():
            self.write(document_id, text, modified_at=modified_at)

    def write(self, document_id: str, text: str, *, modified_at: float | None = None) -> NoteDocument:
        self._content[document_id] = text
        self._modified[document_id] = time.time() if modified_at is None else modified_at
        return NoteDocument(id=document_id, modified_at=self._modified[document_id])

    def delete(self, document_id: str) -> None:
        self._content.pop(document_id, None)
        self._modified.pop(document_id, None)

    def list_documents(self) -> list[NoteDocument]:
        return [
            NoteDocument(id=document_id, modified_at=self._modified[document_id])
            for document_id in sorted(self._content)
        ]

    def read_content(self, document_id: str) -> str:
        try:
            return self._content[document_id]
        except KeyError as exc:
            raise DocumentNotFound(document_id) from exc


__all__ = ["InMemoryCorpus"]
