"""docwhisperer list — show uploaded documents and their chunk counts."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.table import Table

from docwhisperer.cli.common import console, open_library, resolve_config


def list_cmd(
    db: Annotated[
        Path | None,
        typer.Option("--db", help="Path to the database."),
    ] = None,
) -> None:
    """List all documents in the library."""
    cfg = resolve_config(db)
    library = open_library(cfg)

    try:
        documents = library.list_documents()
        if not documents:
            console.print(
                "[dim]No documents uploaded yet.[/]  Run:  docwhisperer ingest --file PATH"
            )
            return

        table = Table(title="Documents")
        table.add_column("Id", style="bold")
        table.add_column("Name")
        table.add_column("Type", style="dim")
        table.add_column("Size", justify="right")
        table.add_column("Pages", justify="right")
        table.add_column("Chunks", justify="right")
        table.add_column("Uploaded", style="dim")

        for doc in documents:
            chunks = library.chunk_count(doc.id)
            table.add_row(
                doc.id,
                doc.name,
                doc.content_type,
                _format_size(doc.size),
                str(doc.page_count),
                str(chunks) if chunks else "[yellow]0[/]",
                doc.uploaded_at or "",
            )
        console.print(table)
    finally:
        library.close()


def _format_size(size: int) -> str:
    if size < 1024:
        return f"{size} B"
    if size < 1024 * 1024:
        return f"{size / 1024:.1f} KB"
    return f"{size / (1024 * 1024):.1f} MB"
