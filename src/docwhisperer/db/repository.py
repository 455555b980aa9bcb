"""Repository for document metadata records.

Chunk vectors live in the vector index (docwhisperer.index); this module only
handles the name/size/type/timestamp bookkeeping for uploaded documents.
"""

from __future__ import annotations

import sqlite3

from docwhisperer.db.models import Document

_COLUMNS = "id, name, content_type, size, page_count, uploaded_at"


class Repository:
    """Data access layer for document records.

    Wraps an open sqlite3.Connection. The connection is owned by the caller
    and must be closed after use.
    """

    def __init__(self, conn: sqlite3.Connection) -> None:
        """Initialise with an open database connection.

        Args:
            conn: An open sqlite3.Connection with the schema initialised
                (see docwhisperer.db.schema.initialize).
        """
        self._conn = conn

    def add_document(self, document: Document) -> Document:
        """Insert a new document record and return it with ``uploaded_at`` set."""
        self._conn.execute(
            """
            INSERT INTO documents (id, name, content_type, size, page_count)
            VALUES (?, ?, ?, ?, ?)
            """,
            (
                document.id,
                document.name,
                document.content_type,
                document.size,
                document.page_count,
            ),
        )
        self._conn.commit()
        return self.get_document(document.id) or document

    def get_document(self, document_id: str) -> Document | None:
        """Return a document by ID, or None if not found."""
        row = self._conn.execute(
            f"SELECT {_COLUMNS} FROM documents WHERE id = ?", (document_id,)
        ).fetchone()
        return _row_to_document(row) if row else None

    def list_documents(self) -> list[Document]:
        """Return all documents ordered by upload time (oldest first)."""
        rows = self._conn.execute(
            f"SELECT {_COLUMNS} FROM documents ORDER BY uploaded_at, rowid"
        ).fetchall()
        return [_row_to_document(r) for r in rows]

    def delete_document(self, document_id: str) -> bool:
        """Delete a document record. Does not touch the vector index.

        Returns:
            True if a record was deleted, False if none existed.
        """
        cur = self._conn.execute("DELETE FROM documents WHERE id = ?", (document_id,))
        self._conn.commit()
        return cur.rowcount > 0


def _row_to_document(row: sqlite3.Row) -> Document:
    return Document(
        id=row["id"],
        name=row["name"],
        content_type=row["content_type"],
        size=row["size"],
        page_count=row["page_count"],
        uploaded_at=row["uploaded_at"],
    )
