"""Domain models for the docwhisperer storage layer."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class Document:
    id: str
    name: str
    content_type: str
    size: int
    page_count: int = 1
    uploaded_at: str | None = None


@dataclass(frozen=True)
class Chunk:
    document_id: str
    chunk_index: int
    text: str


@dataclass(frozen=True)
class SearchHit:
    """One search result: chunk text and its cosine similarity to the query."""

    text: str
    score: float
