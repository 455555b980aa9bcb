"""Tests for grounded prompt assembly."""

from __future__ import annotations

from docwhisperer.rag.assembler import CONTEXT_SEPARATOR, build_context, build_prompt


def test_build_context_joins_in_rank_order():
    assert build_context(["first", "second", "third"]) == "first\n\nsecond\n\nthird"


def test_build_context_single():
    assert build_context(["only"]) == "only"


def test_build_prompt_user_message_is_question():
    _, user = build_prompt("What color is the car?", ["The car is red."])
    assert user == "What color is the car?"


def test_build_prompt_contains_instruction_and_context():
    system, _ = build_prompt("q", ["Chunk A.", "Chunk B."])
    assert "ONLY" in system
    assert "say so explicitly" in system
    assert system.endswith("Context:\nChunk A." + CONTEXT_SEPARATOR + "Chunk B.")


def test_build_prompt_preserves_context_order():
    system, _ = build_prompt("q", ["zeta", "alpha"])
    assert system.index("zeta") < system.index("alpha")


def test_build_prompt_is_deterministic():
    assert build_prompt("q", ["a", "b"]) == build_prompt("q", ["a", "b"])
