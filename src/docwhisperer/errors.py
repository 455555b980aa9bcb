"""Exception hierarchy for the retrieval pipeline.

Business outcomes ("empty document", "no relevant match") are returned as
data by the retriever and never raised. Everything here is a failure that
aborts the operation it occurred in.
"""

from __future__ import annotations


class DocWhispererError(Exception):
    """Base class for all errors raised by docwhisperer."""


class DimensionMismatch(DocWhispererError):
    """A vector's length differs from the index's configured dimensionality."""

    def __init__(self, expected: int, actual: int) -> None:
        super().__init__(
            f"Vector has {actual} dimensions, index expects {expected}."
        )
        self.expected = expected
        self.actual = actual


class IndexConfigMismatch(DocWhispererError):
    """The stored index configuration differs from the one requested."""


class IngestionFailed(DocWhispererError):
    """Embedding failed part-way through ingesting a document."""

    def __init__(self, document_id: str, chunk_index: int, reason: str = "") -> None:
        message = f"Ingestion of document '{document_id}' failed at chunk {chunk_index}"
        if reason:
            message += f": {reason}"
        super().__init__(message)
        self.document_id = document_id
        self.chunk_index = chunk_index


class EmbeddingFailed(DocWhispererError):
    """The embedding function failed for a query."""


class GenerationFailed(DocWhispererError):
    """The generation function failed; the provider error is the cause."""


class ExtractionFailed(DocWhispererError):
    """Text could not be extracted from an uploaded document."""

    def __init__(self, name: str, reason: str = "") -> None:
        message = f"Could not extract text from '{name}'"
        if reason:
            message += f": {reason}"
        super().__init__(message)
        self.name = name


class DocumentNotFound(DocWhispererError):
    """No document record exists for the given identifier."""

    def __init__(self, document_id: str) -> None:
        super().__init__(f"Document '{document_id}' not found.")
        self.document_id = document_id
