"""SQLite-backed vector index using sqlite-vec for exact cosine scoring.

Vectors are stored as float32 BLOBs in the ``chunks`` table. Search runs
``vec_distance_cosine()`` over every candidate row (optionally restricted
to one document), so results are exact and deterministic:

  score = clamp(1 - vec_distance_cosine(embedding, :query), -1, 1)
  ORDER BY score DESC, id ASC     -- id is AUTOINCREMENT, i.e. insertion order

``vec_distance_cosine`` is NULL when either vector has zero norm; such rows
score 0.0, the same as in the in-memory index.
"""

from __future__ import annotations

import logging
import sqlite3
import threading
from collections.abc import Iterable, Sequence
from pathlib import Path

from docwhisperer.db.connection import Database
from docwhisperer.db.models import SearchHit
from docwhisperer.db.schema import initialize
from docwhisperer.db.vectors import ensure_index_config, serialize_vector
from docwhisperer.index.base import IndexEntry, VectorIndex

logger = logging.getLogger(__name__)

_SCORE = "MAX(-1.0, MIN(1.0, COALESCE(1.0 - vec_distance_cosine(embedding, ?), 0.0)))"

_SEARCH_ALL = f"""
SELECT text, score FROM (
    SELECT id, text, {_SCORE} AS score
    FROM chunks
)
WHERE score >= ?
ORDER BY score DESC, id ASC
LIMIT ?
"""

_SEARCH_SCOPED = f"""
SELECT text, score FROM (
    SELECT id, text, {_SCORE} AS score
    FROM chunks
    WHERE document_id = ?
)
WHERE score >= ?
ORDER BY score DESC, id ASC
LIMIT ?
"""


class SqliteVectorIndex(VectorIndex):
    """Persistent vector index on an open sqlite-vec connection.

    Every operation holds an internal lock, and mutations run inside a
    single transaction, so concurrent callers never observe a partial
    batch insert or delete.

    Args:
        conn: Open connection with sqlite-vec loaded and schema initialised.
            Use ``check_same_thread=False`` if it is shared across threads.
        dimensions: Embedding dimensionality for this index.
        model: Embedding model name recorded alongside the dimensionality.

    Raises:
        IndexConfigMismatch: If the database was built with a different
            dimensionality or embedding model.
    """

    def __init__(self, conn: sqlite3.Connection, dimensions: int, model: str = "") -> None:
        super().__init__(dimensions)
        self._conn = conn
        self._lock = threading.RLock()
        with self._lock:
            ensure_index_config(conn, dimensions, model)

    @classmethod
    def open(cls, db_path: Path | str, dimensions: int, model: str = "") -> SqliteVectorIndex:
        """Open (or create) a database file and return an index over it."""
        conn = Database(db_path).connect(check_same_thread=False)
        initialize(conn)
        return cls(conn, dimensions, model)

    @property
    def connection(self) -> sqlite3.Connection:
        return self._conn

    def close(self) -> None:
        with self._lock:
            self._conn.close()

    def insert_many(self, entries: Iterable[IndexEntry]) -> int:
        batch = list(entries)
        for entry in batch:
            self._check_dimensions(entry.vector)
        rows = [(e.scope_tag, e.text, serialize_vector(e.vector)) for e in batch]
        with self._lock, self._conn:
            self._conn.executemany(
                "INSERT INTO chunks (document_id, text, embedding) VALUES (?, ?, ?)",
                rows,
            )
        return len(rows)

    def search(
        self,
        query_vector: Sequence[float],
        scope_tag: str | None = None,
        max_results: int = 5,
        min_score: float = 0.0,
    ) -> list[SearchHit]:
        self._check_dimensions(query_vector)
        self._check_max_results(max_results)

        blob = serialize_vector(query_vector)
        with self._lock:
            if scope_tag is None:
                rows = self._conn.execute(
                    _SEARCH_ALL, (blob, min_score, max_results)
                ).fetchall()
            else:
                rows = self._conn.execute(
                    _SEARCH_SCOPED, (blob, scope_tag, min_score, max_results)
                ).fetchall()
        return [SearchHit(text=r["text"], score=float(r["score"])) for r in rows]

    def delete_by_scope(self, scope_tag: str) -> int:
        with self._lock, self._conn:
            cur = self._conn.execute(
                "DELETE FROM chunks WHERE document_id = ?", (scope_tag,)
            )
        logger.debug("Deleted %d entries for scope %s", cur.rowcount, scope_tag)
        return cur.rowcount

    def count(self, scope_tag: str | None = None) -> int:
        with self._lock:
            if scope_tag is None:
                return self._conn.execute("SELECT COUNT(*) FROM chunks").fetchone()[0]
            return self._conn.execute(
                "SELECT COUNT(*) FROM chunks WHERE document_id = ?", (scope_tag,)
            ).fetchone()[0]
