"""Document library: upload, list and delete documents with their chunks.

Upload:  extract text → ingest under a fresh (or caller-supplied) id →
         record metadata. If recording fails the freshly indexed chunks
         are deleted again.
Delete:  chunks first (delete_by_scope), then the metadata record, so a
         deleted document never leaves searchable vectors behind.

build_library() / build_chat_service() wire the concrete collaborators
from a DocWhispererConfig.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable

from docwhisperer.config import DocWhispererConfig
from docwhisperer.db.models import Document
from docwhisperer.db.repository import Repository
from docwhisperer.errors import DocumentNotFound
from docwhisperer.index.base import VectorIndex
from docwhisperer.index.sqlite import SqliteVectorIndex
from docwhisperer.ingest.extract import extract, guess_content_type
from docwhisperer.ingest.pipeline import Embedder, IngestionPipeline
from docwhisperer.rag.chat import ChatService, Generator
from docwhisperer.rag.llm_client import LiteLLMEmbedder, LiteLLMGenerator
from docwhisperer.rag.retriever import Retriever, RetrieverConfig

logger = logging.getLogger(__name__)


class DocumentLibrary:
    """Documents plus their indexed chunks.

    Args:
        repo:     Metadata repository.
        index:    Vector index holding the chunks.
        pipeline: Ingestion pipeline writing to *index*.
    """

    def __init__(
        self,
        repo: Repository,
        index: VectorIndex,
        pipeline: IngestionPipeline,
    ) -> None:
        self._repo = repo
        self._index = index
        self._pipeline = pipeline

    @property
    def index(self) -> VectorIndex:
        return self._index

    def close(self) -> None:
        self._index.close()

    def upload(
        self,
        raw: bytes,
        name: str,
        content_type: str | None = None,
        document_id: str | None = None,
    ) -> tuple[Document, int]:
        """Extract, index and record an uploaded file.

        Returns:
            (stored Document, number of chunks indexed).

        Raises:
            ValueError: *document_id* is already in use.
            ExtractionFailed: The file could not be parsed.
            IngestionFailed: Embedding failed; nothing was indexed.
        """
        doc_id = document_id or str(uuid.uuid4())
        if self._repo.get_document(doc_id) is not None:
            raise ValueError(f"Document '{doc_id}' already exists.")

        logger.info("Processing upload for file: %s", name)
        extracted = extract(raw, name, content_type)
        chunk_count = self.ingest(doc_id, extracted.text)
        if chunk_count == 0:
            logger.warning("Document %s (%s) produced no chunks", doc_id, name)

        document = Document(
            id=doc_id,
            name=name,
            content_type=content_type or guess_content_type(name),
            size=len(raw),
            page_count=extracted.page_count,
        )
        try:
            stored = self._repo.add_document(document)
        except Exception:
            self._index.delete_by_scope(doc_id)
            raise
        return stored, chunk_count

    def ingest(self, document_id: str, text: str) -> int:
        """Index *text* under *document_id*; return the chunk count."""
        return self._pipeline.ingest(document_id, text)

    def list_documents(self) -> list[Document]:
        return self._repo.list_documents()

    def get_document(self, document_id: str) -> Document:
        """Return the document record.

        Raises:
            DocumentNotFound: No such document.
        """
        document = self._repo.get_document(document_id)
        if document is None:
            raise DocumentNotFound(document_id)
        return document

    def chunk_count(self, document_id: str) -> int:
        return self._index.count(document_id)

    def delete_scope(self, document_id: str) -> int:
        """Remove every indexed chunk of *document_id*; idempotent."""
        return self._index.delete_by_scope(document_id)

    def delete(self, document_id: str) -> int:
        """Delete a document and all of its chunks.

        Returns:
            Number of chunks removed.

        Raises:
            DocumentNotFound: No such document record (chunks tagged with
                the id are still removed).
        """
        removed = self.delete_scope(document_id)
        if not self._repo.delete_document(document_id):
            raise DocumentNotFound(document_id)
        logger.info("Deleted document %s and %d chunks", document_id, removed)
        return removed


def build_library(
    cfg: DocWhispererConfig,
    embed: Embedder | None = None,
    on_progress: Callable[[int, int], None] | None = None,
) -> DocumentLibrary:
    """Open the configured database and return a ready DocumentLibrary.

    The metadata repository shares the index's connection, so
    ``library.close()`` releases both.
    """
    index = SqliteVectorIndex.open(
        cfg.storage.db_path,
        dimensions=cfg.embedding.dimensions,
        model=cfg.embedding.model,
    )
    embed = embed or LiteLLMEmbedder(cfg.embedding.model)
    pipeline = IngestionPipeline(
        index,
        embed,
        max_len=cfg.chunking.max_len,
        overlap=cfg.chunking.overlap,
        on_progress=on_progress,
    )
    return DocumentLibrary(Repository(index.connection), index, pipeline)


def build_chat_service(
    cfg: DocWhispererConfig,
    index: VectorIndex,
    embed: Embedder | None = None,
    generate: Generator | None = None,
) -> ChatService:
    """Wire a Retriever and generation function into a ChatService."""
    retriever = Retriever(
        index,
        embed or LiteLLMEmbedder(cfg.embedding.model),
        RetrieverConfig(
            max_results=cfg.retrieval.max_results,
            min_score=cfg.retrieval.min_score,
        ),
    )
    generate = generate or LiteLLMGenerator(
        cfg.generation.model,
        num_retries=cfg.generation.num_retries,
        max_tokens=cfg.generation.max_tokens,
    )
    return ChatService(retriever, generate)
