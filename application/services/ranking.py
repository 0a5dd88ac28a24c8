"""Cosine similarity and top-K selection."""
from __future__ import annotations

import math
from typing import Iterable, Sequence

from domain.entities import SimilarityResult


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Cosine of the angle between ``a`` and ``b``.

    Vectors of different length come from different backends and are not
    comparable, so they score 0, as does any zero vector.
    """
    if len(a) != len(b):
        return 0.0
    dot = 0.0
    norm_a = 0.0
    norm_b = 0.0
    for x, y in zip(a, b):
        dot += x * y
        norm_a += x * x
        norm_b += y * y
    if norm_a == 0 or norm_b == 0:
        return 0.0
    return dot / (math.sqrt(norm_a) * math.sqrt(norm_b))


def rank(
    query: Sequence[float],
    candidates: Iterable[tuple[str, Sequence[float]]],
    floor: float,
    cap: int,
) -> list[SimilarityResult]:
    """Return at most ``cap`` candidates scoring at least ``floor``, best first.

    Ties keep the candidates' input order.
    """
    if cap < 1:
        return []
    scored: list[SimilarityResult] = []
    for document_id, vector in candidates:
        score = cosine_similarity(query, vector)
        if score >= floor:
            scored.append(SimilarityResult(document_id=document_id, score=score))
    scored.sort(key=lambda result: result.score, reverse=True)
    return scored[:cap]


__all__ = ["cosine_similarity", "rank"]
