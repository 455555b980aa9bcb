"""Tests for docwhisperer rich error messages."""

from __future__ import annotations

import pytest

from docwhisperer.cli.errors import (
    err_config,
    err_document_not_found,
    err_embedding_failed,
    err_generation_failed,
    err_extraction_failed,
    err_file_not_found,
    err_index_mismatch,
    err_ingestion_failed,
    err_no_api_key,
    err_no_db,
)


def _has_what_and_action(msg: str) -> bool:
    """Every message has a cause line followed by an indented action line."""
    lines = msg.splitlines()
    return len(lines) >= 2 and lines[-1].startswith("  ")


@pytest.mark.parametrize(
    "msg",
    [
        err_no_api_key("openai"),
        err_no_db(),
        err_config("chunking.overlap must be in [0, max_len)"),
        err_index_mismatch("Index was created with 384 dimensions, requested 1536."),
        err_file_not_found("report.pdf"),
        err_extraction_failed("Could not extract text from 'x.png'"),
        err_ingestion_failed("Ingestion of document 'd' failed at chunk 2"),
        err_embedding_failed("Could not embed question"),
        err_generation_failed("Could not generate an answer: timeout"),
        err_document_not_found("abc"),
    ],
)
def test_messages_have_cause_and_action(msg: str) -> None:
    assert _has_what_and_action(msg)


def test_no_api_key_known_provider() -> None:
    assert "OPENAI_API_KEY" in err_no_api_key("openai")
    assert "ANTHROPIC_API_KEY" in err_no_api_key("anthropic")


def test_no_api_key_unknown_provider() -> None:
    assert "GROQ_API_KEY" in err_no_api_key("groq")


def test_no_db_mentions_path_and_init() -> None:
    msg = err_no_db("lib.db")
    assert "lib.db" in msg
    assert "docwhisperer init" in msg


def test_document_not_found_suggests_list() -> None:
    assert "docwhisperer list" in err_document_not_found("abc")
