"""Fixed-window character chunker with overlap.

Windows start at ``0, step, 2*step, ...`` where ``step = max_len - overlap``
and are at most ``max_len`` characters long, so a text of length ``n``
yields exactly ``ceil(n / step)`` windows. Every window starts inside the
text, so none is empty.

Splits are character-based and may fall mid-word. Text is never stripped
or normalised, so dropping the first ``overlap`` characters of every chunk
after the first and concatenating reconstructs the input exactly.
"""

from __future__ import annotations

from docwhisperer.db.models import Chunk

DEFAULT_MAX_LEN = 500
DEFAULT_OVERLAP = 50


def split(text: str, max_len: int, overlap: int) -> list[str]:
    """Split *text* into overlapping windows of at most *max_len* characters.

    Args:
        text: Extracted document text (may be empty).
        max_len: Maximum window length in characters (>= 1).
        overlap: Characters shared by consecutive windows (0 <= overlap < max_len).

    Returns:
        Ordered list of windows; empty if *text* is empty.

    Raises:
        ValueError: If the overlap constraint is violated.
    """
    if max_len < 1:
        raise ValueError(f"max_len must be >= 1, got {max_len}")
    if not 0 <= overlap < max_len:
        raise ValueError(
            f"overlap must be in [0, max_len), got overlap={overlap}, max_len={max_len}"
        )

    step = max_len - overlap
    return [text[pos : pos + max_len] for pos in range(0, len(text), step)]


class TextChunker:
    """Turn a document's text into sequentially indexed Chunk records.

    Default: 500 characters / 50 characters overlap.
    """

    def __init__(self, max_len: int = DEFAULT_MAX_LEN, overlap: int = DEFAULT_OVERLAP) -> None:
        split("", max_len, overlap)  # validates the parameters
        self.max_len = max_len
        self.overlap = overlap

    def chunk(self, document_id: str, text: str) -> list[Chunk]:
        return [
            Chunk(document_id=document_id, chunk_index=i, text=segment)
            for i, segment in enumerate(split(text, self.max_len, self.overlap))
        ]
