"""Vector serialization and persisted index configuration.

Chunk vectors are stored as little-endian float32 BLOBs, the format
sqlite-vec's scalar functions (``vec_distance_cosine``, ``vec_length``)
accept directly.
"""

from __future__ import annotations

import sqlite3
from collections.abc import Sequence

import sqlite_vec

from docwhisperer.errors import IndexConfigMismatch


def serialize_vector(vector: Sequence[float]) -> bytes:
    """Pack *vector* into the float32 BLOB format used by sqlite-vec."""
    return sqlite_vec.serialize_float32(list(vector))


def read_index_config(conn: sqlite3.Connection) -> dict[str, str]:
    """Return the stored index configuration as a plain dict (may be empty)."""
    rows = conn.execute("SELECT key, value FROM index_config").fetchall()
    return {r["key"]: r["value"] for r in rows}


def ensure_index_config(
    conn: sqlite3.Connection, dimensions: int, model: str = ""
) -> None:
    """Record *dimensions* and *model* on first use; verify them afterwards.

    An index only ever holds vectors from one embedding model, so reopening
    it with a different dimensionality or model is an error rather than a
    silent mix of incomparable vectors.

    Raises:
        ValueError: If *dimensions* < 1.
        IndexConfigMismatch: If the stored configuration differs.
    """
    if dimensions < 1:
        raise ValueError(f"dimensions must be >= 1, got {dimensions}")

    stored = read_index_config(conn)
    if not stored:
        conn.executemany(
            "INSERT INTO index_config (key, value) VALUES (?, ?)",
            [("dimensions", str(dimensions)), ("model", model)],
        )
        conn.commit()
        return

    if int(stored.get("dimensions", dimensions)) != dimensions:
        raise IndexConfigMismatch(
            f"Index was created with {stored['dimensions']} dimensions, "
            f"requested {dimensions}."
        )
    stored_model = stored.get("model", "")
    if model and stored_model and stored_model != model:
        raise IndexConfigMismatch(
            f"Index was built with embedding model '{stored_model}', "
            f"requested '{model}'."
        )
