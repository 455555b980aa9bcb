"""Dense retriever: embed the question, exact cosine search, min-score filter.

Two "nothing to show" outcomes are kept apart because they mean different
things to the user:

  EmptyScope: the requested document has no indexed chunks at all
    (likely an ingestion problem upstream). Detected before the question
    is embedded.
  []: the document has content but no chunk clears min_score.

Neither is an exception.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from docwhisperer.db.models import SearchHit
from docwhisperer.errors import EmbeddingFailed
from docwhisperer.index.base import VectorIndex
from docwhisperer.ingest.pipeline import Embedder

logger = logging.getLogger(__name__)


@dataclass
class RetrieverConfig:
    """Default search parameters.

    Attributes:
        max_results: Maximum number of chunks returned per question.
        min_score: Minimum cosine similarity a chunk needs to be returned.
    """

    max_results: int = 5
    min_score: float = 0.0


@dataclass(frozen=True)
class EmptyScope:
    """Returned when a scoped query targets a document with no indexed chunks."""

    scope_tag: str


class Retriever:
    """Find the chunks most similar to a question.

    Args:
        index:  Vector index to search.
        embed:  Embedding function; must be the one used at ingestion time.
        config: Default ``max_results`` / ``min_score``.
    """

    def __init__(
        self,
        index: VectorIndex,
        embed: Embedder,
        config: RetrieverConfig | None = None,
    ) -> None:
        self._index = index
        self._embed = embed
        self._config = config or RetrieverConfig()

    def retrieve(
        self,
        question: str,
        scope_tag: str | None = None,
        max_results: int | None = None,
        min_score: float | None = None,
    ) -> list[str] | EmptyScope:
        """Return chunk texts in rank order, or EmptyScope.

        Raises:
            EmbeddingFailed: The embedding function raised; not retried.
            DimensionMismatch: The question vector has the wrong length.
        """
        result = self.retrieve_hits(question, scope_tag, max_results, min_score)
        if isinstance(result, EmptyScope):
            return result
        return [hit.text for hit in result]

    def retrieve_hits(
        self,
        question: str,
        scope_tag: str | None = None,
        max_results: int | None = None,
        min_score: float | None = None,
    ) -> list[SearchHit] | EmptyScope:
        """Like retrieve() but keeps the similarity score of every hit."""
        max_results = self._config.max_results if max_results is None else max_results
        min_score = self._config.min_score if min_score is None else min_score

        if scope_tag is not None:
            available = self._index.count(scope_tag)
            logger.debug("Scope %s holds %d chunks", scope_tag, available)
            if available == 0:
                logger.warning("No chunks indexed for document %s", scope_tag)
                return EmptyScope(scope_tag)

        try:
            query_vector = self._embed(question)
        except Exception as exc:
            raise EmbeddingFailed(f"Could not embed question: {exc}") from exc

        hits = self._index.search(
            query_vector,
            scope_tag=scope_tag,
            max_results=max_results,
            min_score=min_score,
        )
        logger.info(
            "Retrieved %d chunks (scope=%s, min_score=%.2f)", len(hits), scope_tag, min_score
        )
        for hit in hits:
            logger.debug("  score=%.4f  %s...", hit.score, hit.text[:50])
        return hits
