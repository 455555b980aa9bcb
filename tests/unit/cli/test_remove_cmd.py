"""Tests for the docwhisperer remove command."""

from __future__ import annotations

from pathlib import Path

from typer.testing import CliRunner

from docwhisperer.cli.main import app
from docwhisperer.db.connection import Database

runner = CliRunner()


def _ingest(tmp_path: Path, name: str, text: str, doc_id: str) -> None:
    (tmp_path / name).write_text(text, encoding="utf-8")
    result = runner.invoke(app, ["ingest", "--file", name, "--id", doc_id])
    assert result.exit_code == 0, result.output


def _count(tmp_path: Path, table: str) -> int:
    with Database(tmp_path / ".docwhisperer.db") as conn:
        return conn.execute(f"SELECT COUNT(*) FROM {table}").fetchone()[0]


def test_remove_no_db_exits_1(tmp_path: Path, cli_project) -> None:
    result = runner.invoke(app, ["remove", "--document", "x", "--db", "missing.db", "--yes"])
    assert result.exit_code == 1
    assert "docwhisperer init" in result.output


def test_remove_deletes_document_and_chunks(tmp_path: Path, cli_project) -> None:
    _ingest(tmp_path, "big.txt", "z" * 1200, "big")
    _ingest(tmp_path, "small.txt", "the cat", "small")

    result = runner.invoke(app, ["remove", "--document", "big", "--yes"])

    assert result.exit_code == 0, result.output
    assert "Removed: big.txt" in result.output
    assert "3 chunks deleted" in result.output
    assert _count(tmp_path, "documents") == 1
    assert _count(tmp_path, "chunks") == 1


def test_remove_unknown_document(tmp_path: Path, cli_project) -> None:
    _ingest(tmp_path, "a.txt", "the cat", "a")
    result = runner.invoke(app, ["remove", "-d", "nope", "--yes"])
    assert result.exit_code == 0
    assert "not in the library" in result.output
    assert _count(tmp_path, "documents") == 1


def test_remove_confirm_declined(tmp_path: Path, cli_project) -> None:
    _ingest(tmp_path, "a.txt", "the cat", "a")
    result = runner.invoke(app, ["remove", "-d", "a"], input="n\n")
    assert result.exit_code == 0
    assert "Cancelled" in result.output
    assert _count(tmp_path, "chunks") == 1


def test_remove_confirm_accepted(tmp_path: Path, cli_project) -> None:
    _ingest(tmp_path, "a.txt", "the cat", "a")
    result = runner.invoke(app, ["remove", "-d", "a"], input="y\n")
    assert result.exit_code == 0, result.output
    assert _count(tmp_path, "chunks") == 0
