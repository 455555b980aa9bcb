"""Prompt assembly: grounding instruction + retrieved context + question.

The assembler never calls the language model; it returns the two message
parts for the caller to send.
"""

from __future__ import annotations

from collections.abc import Sequence

CONTEXT_SEPARATOR = "\n\n"

_GROUNDING_INSTRUCTION = (
    "You are a helpful document assistant. Answer the user's question based ONLY "
    "on the provided context below. If the context doesn't contain the answer, "
    "say so explicitly instead of guessing."
)


def build_context(contexts: Sequence[str]) -> str:
    """Join retrieved chunk texts in rank order (highest similarity first)."""
    return CONTEXT_SEPARATOR.join(contexts)


def build_prompt(question: str, contexts: Sequence[str]) -> tuple[str, str]:
    """Return ``(system_instruction, user_message)`` for *question*.

    Args:
        question: The user's question, passed through as the user message.
        contexts: Retrieved chunk texts in rank order.
    """
    system_instruction = (
        f"{_GROUNDING_INSTRUCTION}\n\nContext:\n{build_context(contexts)}"
    )
    return system_instruction, question
