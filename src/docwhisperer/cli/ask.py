"""docwhisperer ask — answer a question from the uploaded documents.

Usage:
  docwhisperer ask "What is the warranty period?"
  docwhisperer ask "Summarise section 2" --document 3f2a... --show-context
  docwhisperer ask --interactive --document 3f2a...
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.panel import Panel

from docwhisperer.cli.common import console, open_library, require_api_key, resolve_config
from docwhisperer.cli.errors import (
    err_embedding_failed,
    err_generation_failed,
    err_index_mismatch,
)
from docwhisperer.errors import DimensionMismatch, EmbeddingFailed, GenerationFailed
from docwhisperer.library import build_chat_service
from docwhisperer.rag.chat import ANSWERED, ChatService, ConversationMemory

_EXIT_WORDS = {"exit", "quit", ":q"}


def ask_cmd(
    question: Annotated[
        str | None,
        typer.Argument(help="Question to answer (omit with --interactive)."),
    ] = None,
    document: Annotated[
        str | None,
        typer.Option("--document", "-d", help="Restrict the search to one document id."),
    ] = None,
    max_results: Annotated[
        int | None,
        typer.Option("--max-results", "-k", min=1, help="Chunks to retrieve."),
    ] = None,
    min_score: Annotated[
        float | None,
        typer.Option("--min-score", help="Minimum cosine similarity (-1.0 to 1.0)."),
    ] = None,
    show_context: Annotated[
        bool,
        typer.Option("--show-context", help="Print the retrieved chunks."),
    ] = False,
    interactive: Annotated[
        bool,
        typer.Option("--interactive", "-i", help="Keep asking; earlier turns are remembered."),
    ] = False,
    db: Annotated[
        Path | None,
        typer.Option("--db", help="Path to the database."),
    ] = None,
) -> None:
    """Answer a question using the uploaded documents as context."""
    if not interactive and not (question and question.strip()):
        console.print("[red]Error:[/] Question cannot be empty.")
        raise typer.Exit(1)

    cfg = resolve_config(db)
    require_api_key(cfg.embedding.model)
    require_api_key(cfg.generation.model)
    library = open_library(cfg)

    try:
        service = build_chat_service(cfg, library.index)
        if not interactive:
            _answer_once(service, question, document, max_results, min_score, show_context)
            return

        memory = ConversationMemory(max_messages=cfg.memory.max_messages)
        if question and question.strip():
            _answer_once(service, question, document, max_results, min_score, show_context, memory)
        while True:
            text = typer.prompt("\nYou", default="", show_default=False)
            if not text.strip() or text.strip().lower() in _EXIT_WORDS:
                break
            _answer_once(service, text, document, max_results, min_score, show_context, memory)
    finally:
        library.close()


def _answer_once(
    service: ChatService,
    question: str,
    document: str | None,
    max_results: int | None,
    min_score: float | None,
    show_context: bool,
    memory: ConversationMemory | None = None,
) -> None:
    try:
        answer = service.answer(
            question,
            document_id=document,
            memory=memory,
            max_results=max_results,
            min_score=min_score,
        )
    except EmbeddingFailed as exc:
        console.print(err_embedding_failed(str(exc)))
        raise typer.Exit(1)
    except GenerationFailed as exc:
        console.print(err_generation_failed(str(exc)))
        raise typer.Exit(1)
    except DimensionMismatch as exc:
        console.print(err_index_mismatch(str(exc)))
        raise typer.Exit(1)

    if show_context:
        for i, text in enumerate(answer.contexts, start=1):
            console.print(Panel(text, title=f"context {i}", border_style="dim"))

    style = "green" if answer.status == ANSWERED else "yellow"
    console.print(Panel(answer.text, title="Answer", border_style=style))
