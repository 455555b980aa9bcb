"""Forward-only migration runner for the docwhisperer database schema."""

from __future__ import annotations

import sqlite3

# schema_version is the bootstrap table, created before migrations run.
_CREATE_SCHEMA_VERSION = """
CREATE TABLE IF NOT EXISTS schema_version (
    version     INTEGER NOT NULL,
    applied_at  DATETIME NOT NULL DEFAULT (datetime('now'))
)
"""

# chunks.document_id is a tag, not a foreign key: the vector index does not
# own the document lifecycle.
_V1_SQL = """
CREATE TABLE IF NOT EXISTS documents (
    id              TEXT PRIMARY KEY,
    name            TEXT NOT NULL,
    content_type    TEXT NOT NULL,
    size            INTEGER NOT NULL,
    page_count      INTEGER NOT NULL DEFAULT 1,
    uploaded_at     DATETIME NOT NULL DEFAULT (datetime('now'))
);

CREATE TABLE IF NOT EXISTS chunks (
    id              INTEGER PRIMARY KEY AUTOINCREMENT,
    document_id     TEXT NOT NULL,
    text            TEXT NOT NULL,
    embedding       BLOB NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_chunks_document_id ON chunks(document_id);

CREATE TABLE IF NOT EXISTS index_config (
    key             TEXT PRIMARY KEY,
    value           TEXT NOT NULL
);
"""

# (version, script) pairs in ascending order; never edit an applied entry.
MIGRATIONS: list[tuple[int, str]] = [
    (1, _V1_SQL),
]


def current_version(conn: sqlite3.Connection) -> int:
    """Return the highest applied schema version (0 for a fresh database)."""
    (version,) = conn.execute("SELECT COALESCE(MAX(version), 0) FROM schema_version").fetchone()
    return version


def run_migrations(conn: sqlite3.Connection) -> None:
    """Bring *conn* up to the latest schema version; a no-op when current."""
    conn.execute(_CREATE_SCHEMA_VERSION)
    conn.commit()

    applied = current_version(conn)
    for version, script in MIGRATIONS:
        if version <= applied:
            continue
        # executescript() commits any open transaction first.
        conn.executescript(script)
        conn.execute("INSERT INTO schema_version (version) VALUES (?)", (version,))
        conn.commit()
