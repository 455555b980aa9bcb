"""docwhisperer ingest pipeline: text extraction, chunking, embedding and indexing."""

from docwhisperer.ingest.chunker import TextChunker, split
from docwhisperer.ingest.extract import ExtractedText, extract
from docwhisperer.ingest.pipeline import IngestionPipeline

__all__ = [
    "ExtractedText",
    "IngestionPipeline",
    "TextChunker",
    "extract",
    "split",
]
