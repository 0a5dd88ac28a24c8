"""Local embedder that hashes token frequencies into a fixed-size vector.

The vector is split into two halves: Latin-script tokens land in the first
half, CJK characters in the second. A small bilingual concept table then adds
half-weight features into the other script's half so that English and Chinese
notes about the same topic share a few dimensions. This is a fallback for when
the remote model is unavailable, not a semantic model.
"""
from __future__ import annotations

import math
import re
from collections import Counter
from typing import Mapping

from domain.interfaces import Embedder
from infrastructure.embedding.concept_table import CONCEPTS, REVERSE_CONCEPTS

_CJK_RANGES = r"\u4e00-\u9fff\u3040-\u309f\u30a0-\u30ff\uac00-\ud7af"
_LATIN_TOKEN = re.compile(r"[a-z0-9]+")
_CJK_CHAR = re.compile(f"[{_CJK_RANGES}]")
_CHINESE_CHAR = re.compile(r"[\u4e00-\u9fff]")

CROSS_SCRIPT_WEIGHT = 0.5


def string_hash(text: str) -> int:
    """32-bit signed polynomial hash (``h * 31 + unit``) over UTF-16 code units, absolute value."""
    value = 0
    units = text.encode("utf-16-le")
    for index in range(0, len(units), 2):
        unit = units[index] | (units[index + 1] << 8)
        value = (value * 31 + unit) & 0xFFFFFFFF
    if value >= 0x80000000:
        value -= 0x100000000
    return abs(value)


def tokenize(text: str) -> list[str]:
    """Return Latin word tokens followed by individual CJK characters."""
    latin = _LATIN_TOKEN.findall(text.lower())
    cjk = _CJK_CHAR.findall(text)
    return latin + cjk


def is_cjk(token: str) -> bool:
    return _CJK_CHAR.search(token) is not None


class TokenHashEmbedder(Embedder):
    """Deterministic term-frequency hashing embedder with cross-script features."""

    backend = "local"

    def __init__(self, dimension: int = 200) -> None:
        if dimension < 100 or dimension % 2:
            raise ValueError("dimension must be an even number >= 100")
        self._dimension = dimension
        self._half = dimension // 2
        self._model_id = f"token-hash-{dimension}"

    @property
    def model_id(self) -> str:
        return self._model_id

    @property
    def dimension(self) -> int:
        return self._dimension

    def latin_slot(self, token: str) -> int:
        return string_hash(token) % self._half

    def cjk_slot(self, token: str) -> int:
        return self._half + string_hash(token) % self._half

    def embed_text(self, text: str) -> list[float]:
        frequencies = Counter(tokenize(text))
        vector = [0.0] * self._dimension
        for token, count in frequencies.items():
            slot = self.cjk_slot(token) if is_cjk(token) else self.latin_slot(token)
            vector[slot] += count
        self._add_cross_script_features(vector, frequencies)
        return _normalize(vector)

    def _add_cross_script_features(self, vector: list[float], frequencies: Mapping[str, int]) -> None:
        for token, count in frequencies.items():
            weight = count * CROSS_SCRIPT_WEIGHT
            if _CHINESE_CHAR.search(token):
                for english in REVERSE_CONCEPTS.get(token, ()):
                    vector[self.latin_slot(english)] += weight
            else:
                for equivalent in CONCEPTS.get(token, ()):
                    vector[self.cjk_slot(equivalent)] += weight


def _normalize(vector: list[float]) -> list[float]:
    norm = math.sqrt(sum(value * value for value in vector))
    if norm == 0:
        return vector
    return [value / norm for value in vector]


__all__ = ["TokenHashEmbedder", "string_hash", "tokenize", "is_cjk"]
