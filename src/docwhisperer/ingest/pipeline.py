"""Ingestion pipeline: chunk → embed → index-insert, all or nothing.

Every chunk is embedded before anything is written. The buffered
(vector, text) pairs are then inserted in one atomic ``insert_many`` call
tagged with the document identifier, so a failure at any chunk leaves no
entries for the document in the index.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence

from docwhisperer.errors import IngestionFailed
from docwhisperer.index.base import IndexEntry, VectorIndex
from docwhisperer.ingest.chunker import DEFAULT_MAX_LEN, DEFAULT_OVERLAP, TextChunker

logger = logging.getLogger(__name__)

Embedder = Callable[[str], Sequence[float]]


class IngestionPipeline:
    """Index a document's extracted text under its identifier.

    Args:
        index:   Vector index to write to.
        embed:   Embedding function, ``text -> vector``.
        max_len: Chunk length in characters.
        overlap: Overlap between consecutive chunks in characters.
        on_progress: Optional callback invoked with ``(embedded, total)``
            after each chunk is embedded.
    """

    def __init__(
        self,
        index: VectorIndex,
        embed: Embedder,
        max_len: int = DEFAULT_MAX_LEN,
        overlap: int = DEFAULT_OVERLAP,
        on_progress: Callable[[int, int], None] | None = None,
    ) -> None:
        self._index = index
        self._embed = embed
        self._chunker = TextChunker(max_len=max_len, overlap=overlap)
        self._on_progress = on_progress

    def ingest(self, document_id: str, text: str) -> int:
        """Chunk, embed and index *text*; return the number of chunks created.

        Empty text yields zero chunks and is not an error.

        Raises:
            IngestionFailed: The embedding function failed for some chunk.
            DimensionMismatch: A returned vector has the wrong length.
        """
        chunks = self._chunker.chunk(document_id, text)
        if not chunks:
            logger.info("Document %s has no text; nothing to index", document_id)
            return 0

        logger.info("Embedding %d chunks for document %s", len(chunks), document_id)
        entries: list[IndexEntry] = []
        for chunk in chunks:
            try:
                vector = self._embed(chunk.text)
            except Exception as exc:
                logger.error(
                    "Embedding failed for document %s at chunk %d: %s",
                    document_id,
                    chunk.chunk_index,
                    exc,
                )
                raise IngestionFailed(document_id, chunk.chunk_index, str(exc)) from exc
            entries.append(IndexEntry(vector=vector, text=chunk.text, scope_tag=document_id))
            if self._on_progress is not None:
                self._on_progress(chunk.chunk_index + 1, len(chunks))

        inserted = self._index.insert_many(entries)
        logger.info("Indexed %d chunks for document %s", inserted, document_id)
        return inserted
