"""Tests for vector serialization and persisted index configuration."""

from __future__ import annotations

import struct

import pytest

from docwhisperer.db.vectors import ensure_index_config, read_index_config, serialize_vector
from docwhisperer.errors import IndexConfigMismatch


def test_serialize_vector_is_float32_little_endian():
    blob = serialize_vector([1.0, -2.5, 0.0])
    assert blob == struct.pack("<3f", 1.0, -2.5, 0.0)


def test_serialize_vector_accepts_tuples():
    assert serialize_vector((0.5, 0.25)) == struct.pack("<2f", 0.5, 0.25)


def test_read_index_config_empty(tmp_db):
    assert read_index_config(tmp_db) == {}


def test_ensure_index_config_stores_first_time(tmp_db):
    ensure_index_config(tmp_db, 384, "ollama/all-minilm")
    assert read_index_config(tmp_db) == {"dimensions": "384", "model": "ollama/all-minilm"}


def test_ensure_index_config_same_values_ok(tmp_db):
    ensure_index_config(tmp_db, 384, "ollama/all-minilm")
    ensure_index_config(tmp_db, 384, "ollama/all-minilm")


def test_ensure_index_config_dimension_mismatch(tmp_db):
    ensure_index_config(tmp_db, 384, "ollama/all-minilm")
    with pytest.raises(IndexConfigMismatch, match="384"):
        ensure_index_config(tmp_db, 1536, "ollama/all-minilm")


def test_ensure_index_config_model_mismatch(tmp_db):
    ensure_index_config(tmp_db, 384, "ollama/all-minilm")
    with pytest.raises(IndexConfigMismatch, match="all-minilm"):
        ensure_index_config(tmp_db, 384, "openai/text-embedding-3-small")


def test_ensure_index_config_blank_model_skips_model_check(tmp_db):
    ensure_index_config(tmp_db, 384)
    ensure_index_config(tmp_db, 384, "ollama/all-minilm")


def test_ensure_index_config_rejects_non_positive_dimensions(tmp_db):
    with pytest.raises(ValueError):
        ensure_index_config(tmp_db, 0)
