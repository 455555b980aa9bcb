"""Tests for DocumentLibrary upload / list / delete."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from conftest import DIMS, KeywordEmbedder
from docwhisperer.config import DocWhispererConfig
from docwhisperer.db.repository import Repository
from docwhisperer.errors import DocumentNotFound, ExtractionFailed, IngestionFailed
from docwhisperer.index import SqliteVectorIndex
from docwhisperer.ingest.pipeline import IngestionPipeline
from docwhisperer.library import DocumentLibrary, build_chat_service, build_library
from docwhisperer.rag.chat import ANSWERED


@pytest.fixture
def cfg(tmp_path) -> DocWhispererConfig:
    cfg = DocWhispererConfig()
    cfg.embedding.dimensions = DIMS
    cfg.storage.db_path = str(tmp_path / ".docwhisperer.db")
    return cfg


@pytest.fixture
def library(cfg, embedder):
    lib = build_library(cfg, embed=embedder)
    yield lib
    lib.close()


def test_upload_indexes_and_records(library):
    doc, chunks = library.upload(b"the cat and the dog", "pets.txt", document_id="pets")

    assert doc.id == "pets"
    assert doc.name == "pets.txt"
    assert doc.content_type == "text/plain"
    assert doc.size == len(b"the cat and the dog")
    assert doc.page_count == 1
    assert doc.uploaded_at is not None
    assert chunks == 1
    assert library.chunk_count("pets") == 1


def test_upload_generates_id(library):
    doc, _ = library.upload(b"text", "a.txt")
    assert len(doc.id) == 36
    assert library.get_document(doc.id).name == "a.txt"


def test_upload_keeps_declared_content_type(library):
    doc, _ = library.upload(b"hello", "a", content_type="text/markdown")
    assert doc.content_type == "text/markdown"


def test_upload_duplicate_id_rejected(library):
    library.upload(b"one", "a.txt", document_id="dup")
    with pytest.raises(ValueError, match="already exists"):
        library.upload(b"two", "b.txt", document_id="dup")
    assert library.chunk_count("dup") == 1


def test_upload_empty_file_records_document_without_chunks(library):
    doc, chunks = library.upload(b"", "empty.txt", document_id="empty")
    assert chunks == 0
    assert library.get_document("empty") == doc
    assert library.chunk_count("empty") == 0


def test_upload_extraction_failure_records_nothing(library):
    with pytest.raises(ExtractionFailed):
        library.upload(b"\x89PNG", "image.png", document_id="img")
    assert library.list_documents() == []
    assert library.chunk_count("img") == 0


def test_upload_embedding_failure_records_nothing(cfg):
    lib = build_library(cfg, embed=KeywordEmbedder(fail_on=2))
    try:
        with pytest.raises(IngestionFailed):
            lib.upload(b"x" * 1200, "big.txt", document_id="big")
        assert lib.list_documents() == []
        assert lib.chunk_count("big") == 0
    finally:
        lib.close()


def test_upload_rolls_back_chunks_when_record_fails(tmp_db, embedder):
    index = SqliteVectorIndex(tmp_db, DIMS)
    repo = Repository(tmp_db)
    lib = DocumentLibrary(repo, index, IngestionPipeline(index, embedder))

    with patch.object(repo, "add_document", side_effect=RuntimeError("disk full")):
        with pytest.raises(RuntimeError):
            lib.upload(b"the cat", "cat.txt", document_id="cat")

    assert index.count("cat") == 0


def test_list_documents(library):
    library.upload(b"a", "a.txt", document_id="a")
    library.upload(b"b", "b.txt", document_id="b")
    assert [d.id for d in library.list_documents()] == ["a", "b"]


def test_get_document_missing(library):
    with pytest.raises(DocumentNotFound):
        library.get_document("nope")


def test_delete_removes_chunks_and_record(library):
    library.upload(b"x" * 1200, "big.txt", document_id="big")
    library.upload(b"the dog", "dog.txt", document_id="dog")

    assert library.delete("big") == 3

    assert library.chunk_count("big") == 0
    assert library.chunk_count("dog") == 1
    assert [d.id for d in library.list_documents()] == ["dog"]


def test_delete_missing_document(library):
    with pytest.raises(DocumentNotFound):
        library.delete("nope")


def test_delete_scope_idempotent(library):
    library.upload(b"the cat", "cat.txt", document_id="cat")
    assert library.delete_scope("cat") == 1
    assert library.delete_scope("cat") == 0


def test_library_persists_across_reopen(cfg, embedder):
    lib = build_library(cfg, embed=embedder)
    lib.upload(b"the river", "river.txt", document_id="river")
    lib.close()

    reopened = build_library(cfg, embed=embedder)
    try:
        assert reopened.chunk_count("river") == 1
        assert reopened.get_document("river").name == "river.txt"
    finally:
        reopened.close()


def test_build_library_defaults_to_litellm_embedder(cfg):
    with patch("docwhisperer.library.LiteLLMEmbedder") as mock_embedder:
        lib = build_library(cfg)
        lib.close()
    mock_embedder.assert_called_once_with(cfg.embedding.model)


def test_chat_service_end_to_end(library, embedder, cfg):
    library.upload(b"the car engine is red", "car.txt", document_id="car")
    library.upload(b"a tree by the river", "tree.txt", document_id="tree")
    generate = lambda messages: "Red."  # noqa: E731

    service = build_chat_service(cfg, library.index, embed=embedder, generate=generate)
    answer = service.answer("car engine", document_id="car")

    assert answer.status == ANSWERED
    assert answer.text == "Red."
    assert answer.contexts == ["the car engine is red"]
