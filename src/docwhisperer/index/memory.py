"""In-process vector index with exact brute-force cosine scoring."""

from __future__ import annotations

import logging
import math
import threading
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from docwhisperer.db.models import SearchHit
from docwhisperer.index.base import IndexEntry, VectorIndex

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _StoredEntry:
    vector: tuple[float, ...]
    norm: float
    text: str
    scope_tag: str


def _norm(vector: Sequence[float]) -> float:
    return math.sqrt(math.fsum(x * x for x in vector))


class InMemoryVectorIndex(VectorIndex):
    """Vector index held in a Python list, guarded by a single lock.

    Entries are kept in insertion order; search scores every candidate and
    relies on a stable sort so equal scores keep that order.
    """

    def __init__(self, dimensions: int) -> None:
        super().__init__(dimensions)
        self._entries: list[_StoredEntry] = []
        self._lock = threading.Lock()

    def insert_many(self, entries: Iterable[IndexEntry]) -> int:
        batch = list(entries)
        for entry in batch:
            self._check_dimensions(entry.vector)
        stored = [
            _StoredEntry(
                vector=tuple(float(x) for x in e.vector),
                norm=_norm([float(x) for x in e.vector]),
                text=e.text,
                scope_tag=e.scope_tag,
            )
            for e in batch
        ]
        with self._lock:
            self._entries.extend(stored)
        return len(stored)

    def search(
        self,
        query_vector: Sequence[float],
        scope_tag: str | None = None,
        max_results: int = 5,
        min_score: float = 0.0,
    ) -> list[SearchHit]:
        self._check_dimensions(query_vector)
        self._check_max_results(max_results)

        query = [float(x) for x in query_vector]
        query_norm = _norm(query)

        with self._lock:
            candidates = [
                e for e in self._entries if scope_tag is None or e.scope_tag == scope_tag
            ]

        hits: list[SearchHit] = []
        for entry in candidates:
            if query_norm == 0.0 or entry.norm == 0.0:
                score = 0.0
            else:
                dot = math.fsum(x * y for x, y in zip(query, entry.vector))
                score = max(-1.0, min(1.0, dot / (query_norm * entry.norm)))
            if score >= min_score:
                hits.append(SearchHit(text=entry.text, score=score))

        # list.sort is stable: equal scores keep insertion order.
        hits.sort(key=lambda h: h.score, reverse=True)
        return hits[:max_results]

    def delete_by_scope(self, scope_tag: str) -> int:
        with self._lock:
            before = len(self._entries)
            self._entries = [e for e in self._entries if e.scope_tag != scope_tag]
            removed = before - len(self._entries)
        logger.debug("Deleted %d entries for scope %s", removed, scope_tag)
        return removed

    def count(self, scope_tag: str | None = None) -> int:
        with self._lock:
            if scope_tag is None:
                return len(self._entries)
            return sum(1 for e in self._entries if e.scope_tag == scope_tag)
