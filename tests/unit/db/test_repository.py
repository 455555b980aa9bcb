"""Tests for the document metadata repository."""

from __future__ import annotations

import sqlite3

import pytest

from docwhisperer.db.models import Document
from docwhisperer.db.repository import Repository


@pytest.fixture
def repo(tmp_db):
    return Repository(tmp_db)


def _doc(doc_id: str = "doc-1", **kwargs) -> Document:
    fields = {"name": "manual.pdf", "content_type": "application/pdf", "size": 2048}
    fields.update(kwargs)
    return Document(id=doc_id, **fields)


def test_add_document_sets_uploaded_at(repo):
    stored = repo.add_document(_doc(page_count=4))
    assert stored.id == "doc-1"
    assert stored.page_count == 4
    assert stored.uploaded_at is not None


def test_get_document(repo):
    repo.add_document(_doc())
    doc = repo.get_document("doc-1")
    assert doc is not None
    assert doc.name == "manual.pdf"
    assert doc.size == 2048


def test_get_document_missing(repo):
    assert repo.get_document("nope") is None


def test_add_duplicate_id_raises(repo):
    repo.add_document(_doc())
    with pytest.raises(sqlite3.IntegrityError):
        repo.add_document(_doc(name="other.pdf"))


def test_list_documents_in_upload_order(repo):
    for i in range(3):
        repo.add_document(_doc(f"doc-{i}", name=f"f{i}.txt"))
    assert [d.id for d in repo.list_documents()] == ["doc-0", "doc-1", "doc-2"]


def test_list_documents_empty(repo):
    assert repo.list_documents() == []


def test_delete_document(repo):
    repo.add_document(_doc())
    assert repo.delete_document("doc-1") is True
    assert repo.get_document("doc-1") is None
    assert repo.delete_document("doc-1") is False


def test_delete_document_leaves_chunks(repo, tmp_db):
    repo.add_document(_doc())
    tmp_db.execute(
        "INSERT INTO chunks (document_id, text, embedding) VALUES ('doc-1', 't', x'00')"
    )
    tmp_db.commit()
    repo.delete_document("doc-1")
    assert tmp_db.execute("SELECT COUNT(*) FROM chunks").fetchone()[0] == 1
