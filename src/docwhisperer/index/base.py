"""Vector index interface shared by the in-memory and SQLite backends."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from docwhisperer.db.models import SearchHit
from docwhisperer.errors import DimensionMismatch


@dataclass(frozen=True)
class IndexEntry:
    """A (vector, text, scope tag) triple waiting to be inserted."""

    vector: Sequence[float]
    text: str
    scope_tag: str


class VectorIndex(ABC):
    """Abstract base for vector indexes.

    Every entry carries exactly one scope tag (a document identifier).
    Search is exact cosine similarity, ``1 - cosine_distance``, ranked
    best-first with ties broken by insertion order.

    Subclasses must make each public operation atomic with respect to the
    others: a search never observes a half-applied insert_many or delete.
    """

    def __init__(self, dimensions: int) -> None:
        if dimensions < 1:
            raise ValueError(f"dimensions must be >= 1, got {dimensions}")
        self.dimensions = dimensions

    def insert(self, vector: Sequence[float], text: str, scope_tag: str) -> None:
        """Append one entry.

        Raises:
            DimensionMismatch: If ``len(vector)`` differs from ``dimensions``.
        """
        self.insert_many([IndexEntry(vector=vector, text=text, scope_tag=scope_tag)])

    @abstractmethod
    def insert_many(self, entries: Iterable[IndexEntry]) -> int:
        """Append *entries* atomically; return the number inserted.

        Every vector is validated before anything is written, so a
        DimensionMismatch leaves the index unchanged.
        """

    @abstractmethod
    def search(
        self,
        query_vector: Sequence[float],
        scope_tag: str | None = None,
        max_results: int = 5,
        min_score: float = 0.0,
    ) -> list[SearchHit]:
        """Return up to *max_results* hits with ``score >= min_score``, best-first.

        Args:
            query_vector: Query embedding; must have ``dimensions`` elements.
            scope_tag: Restrict results to this scope when given.
            max_results: Maximum number of hits (>= 1).
            min_score: Hits scoring below this are dropped.

        Raises:
            DimensionMismatch: If the query vector has the wrong length.
            ValueError: If *max_results* < 1.
        """

    @abstractmethod
    def delete_by_scope(self, scope_tag: str) -> int:
        """Remove every entry tagged *scope_tag*; return how many were removed.

        Idempotent: an unknown or already-deleted scope returns 0.
        """

    @abstractmethod
    def count(self, scope_tag: str | None = None) -> int:
        """Return the number of entries, optionally restricted to *scope_tag*."""

    def close(self) -> None:
        """Release backend resources. No-op unless the backend holds any."""

    # ------------------------------------------------------------------
    # Validation helpers
    # ------------------------------------------------------------------

    def _check_dimensions(self, vector: Sequence[float]) -> None:
        if len(vector) != self.dimensions:
            raise DimensionMismatch(expected=self.dimensions, actual=len(vector))

    @staticmethod
    def _check_max_results(max_results: int) -> None:
        if max_results < 1:
            raise ValueError(f"max_results must be >= 1, got {max_results}")
