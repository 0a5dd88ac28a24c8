"""Domain entities for the NoteThread system."""
from __future__ import annotations

from dataclasses import asdict, dataclass, field, replace
from typing import Any, Literal, Mapping

from domain.errors import ConfigError

EmbeddingBackend = Literal["local", "remote"]
EmbeddingVector = list[float]

BACKENDS: tuple[EmbeddingBackend, ...] = ("local", "remote")


@dataclass(slots=True)
class NoteDocument:
    """A note in the corpus, identified by its vault-relative path."""

    id: str
    modified_at: float = 0.0


@dataclass(slots=True)
class CacheEntry:
    """A computed embedding together with when and how it was produced."""

    document_id: str
    vector: EmbeddingVector
    computed_at: float
    backend: str | None = None
    model_id: str | None = None
    dimension: int = 0

    def __post_init__(self) -> None:
        if not self.dimension:
            self.dimension = len(self.vector)

    def is_fresh_for(
        self,
        document: NoteDocument,
        backend: str,
        model_id: str,
        dimension: int | None = None,
    ) -> bool:
        """Return True if the entry may be reused for ``document``.

        The entry must come from the same backend and model, have the expected
        dimension when one is given, and be at least as new as the document.
        """
        if self.backend != backend or self.model_id != model_id:
            return False
        if dimension is not None and self.dimension != dimension:
            return False
        return self.computed_at >= document.modified_at


@dataclass(slots=True, frozen=True)
class SimilarityResult:
    """A neighbour of the query document and its cosine score."""

    document_id: str
    score: float


@dataclass(slots=True, frozen=True)
class SimilaritySettings:
    """User facing configuration read at the start of every invocation."""

    backend: EmbeddingBackend = "local"
    result_cap: int = 5
    similarity_floor: float = 0.7
    ignored_path_prefixes: tuple[str, ...] = field(default_factory=tuple)
    cache_expiration_days: int = 7

    def __post_init__(self) -> None:
        if self.backend not in BACKENDS:
            raise ConfigError(f"Unknown embedding backend '{self.backend}'")
        if isinstance(self.result_cap, bool) or not isinstance(self.result_cap, int) or self.result_cap < 1:
            raise ConfigError(f"result_cap must be an integer >= 1, got {self.result_cap!r}")
        try:
            floor = float(self.similarity_floor)
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"similarity_floor must be a number, got {self.similarity_floor!r}") from exc
        if isinstance(self.similarity_floor, bool) or not 0.0 <= floor <= 1.0:
            raise ConfigError(f"similarity_floor must be within [0, 1], got {self.similarity_floor!r}")
        object.__setattr__(self, "similarity_floor", floor)
        if (
            isinstance(self.cache_expiration_days, bool)
            or not isinstance(self.cache_expiration_days, int)
            or self.cache_expiration_days < 1
        ):
            raise ConfigError(
                f"cache_expiration_days must be an integer >= 1, got {self.cache_expiration_days!r}"
            )
        prefixes = tuple(prefix for prefix in self.ignored_path_prefixes if prefix)
        object.__setattr__(self, "ignored_path_prefixes", prefixes)

    @property
    def cache_expiration_seconds(self) -> float:
        return self.cache_expiration_days * 24 * 60 * 60

    def is_ignored(self, document_id: str) -> bool:
        return any(document_id.startswith(prefix) for prefix in self.ignored_path_prefixes)

    def replace(self, **changes: Any) -> "SimilaritySettings":
        return replace(self, **changes)

    def to_mapping(self) -> dict[str, Any]:
        data = asdict(self)
        data["ignored_path_prefixes"] = list(self.ignored_path_prefixes)
        return data

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> "SimilaritySettings":
        """Build settings from a persisted record, ignoring unknown keys."""
        if not data:
            return cls()
        known = {name: data[name] for name in cls.__dataclass_fields__ if name in data}
        prefixes = known.get("ignored_path_prefixes")
        if isinstance(prefixes, str):
            known["ignored_path_prefixes"] = parse_prefixes(prefixes)
        elif prefixes is not None:
            known["ignored_path_prefixes"] = tuple(str(prefix).strip() for prefix in prefixes)
        return cls(**known)


def parse_prefixes(raw: str) -> tuple[str, ...]:
    """Split a comma separated folder list, dropping blanks."""
    return tuple(part.strip() for part in raw.split(",") if part.strip())


__all__ = [
    "BACKENDS",
    "CacheEntry",
    "EmbeddingBackend",
    "EmbeddingVector",
    "NoteDocument",
    "SimilarityResult",
    "SimilaritySettings",
    "parse_prefixes",
]
