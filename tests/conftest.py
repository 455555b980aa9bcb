"""Shared pytest fixtures."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest

from docwhisperer.db.connection import Database
from docwhisperer.db.schema import initialize

# Words the keyword embedder knows about; one dimension each plus a bias
# dimension so that no text maps to the zero vector.
VOCAB = ("cat", "dog", "car", "engine", "tree", "river")
DIMS = len(VOCAB) + 1


class KeywordEmbedder:
    """Deterministic fake embedding function: keyword counts + small bias.

    Records every text it was asked to embed in ``calls``. Set ``fail_on``
    to a 1-based call number to make that call raise RuntimeError.
    """

    def __init__(self, fail_on: int | None = None) -> None:
        self.calls: list[str] = []
        self.fail_on = fail_on

    def __call__(self, text: str) -> list[float]:
        self.calls.append(text)
        if self.fail_on is not None and len(self.calls) == self.fail_on:
            raise RuntimeError("embedding backend unavailable")
        words = text.lower().split()
        return [float(words.count(w)) for w in VOCAB] + [0.01]


@pytest.fixture
def tmp_db(tmp_path):
    """File-based DB in tmp_path with schema initialized, closed after test."""
    db = Database(tmp_path / ".docwhisperer.db")
    conn = db.connect()
    initialize(conn)
    yield conn
    conn.close()


@pytest.fixture
def embedder():
    return KeywordEmbedder()


@pytest.fixture
def cli_project(tmp_path, monkeypatch):
    """Run CLI commands inside tmp_path with fake embedding and generation.

    Writes a docwhisperer.yaml sized for KeywordEmbedder and patches the
    LiteLLM adapters so no model is contacted. Yields the generation mock.
    """
    for var in (
        "DOCWHISPERER_EMBEDDING_MODEL",
        "DOCWHISPERER_GENERATION_MODEL",
        "DOCWHISPERER_DB",
    ):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr("docwhisperer.config.GLOBAL_CONFIG_PATH", tmp_path / "home" / "config.yaml")
    (tmp_path / "docwhisperer.yaml").write_text(
        f"embedding:\n  model: ollama/all-minilm\n  dimensions: {DIMS}\n",
        encoding="utf-8",
    )
    generate = MagicMock(return_value="Grounded answer.")
    with (
        patch("docwhisperer.library.LiteLLMEmbedder", return_value=KeywordEmbedder()),
        patch("docwhisperer.library.LiteLLMGenerator", return_value=generate),
    ):
        yield generate
