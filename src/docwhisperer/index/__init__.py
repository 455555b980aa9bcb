"""Vector index backends: in-memory (tests, scratch use) and SQLite (persistent)."""

from docwhisperer.index.base import IndexEntry, VectorIndex
from docwhisperer.index.memory import InMemoryVectorIndex
from docwhisperer.index.sqlite import SqliteVectorIndex

__all__ = [
    "IndexEntry",
    "VectorIndex",
    "InMemoryVectorIndex",
    "SqliteVectorIndex",
]
