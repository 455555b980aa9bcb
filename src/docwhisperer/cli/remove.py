"""docwhisperer remove — delete a document and every chunk it owns.

Usage:
  docwhisperer remove --document 3f2a...
  docwhisperer remove --document 3f2a... --yes
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from docwhisperer.cli.common import console, open_library, resolve_config
from docwhisperer.cli.errors import err_document_not_found
from docwhisperer.errors import DocumentNotFound


def remove_cmd(
    document: Annotated[
        str,
        typer.Option("--document", "-d", help="Id of the document to remove."),
    ],
    db: Annotated[
        Path | None,
        typer.Option("--db", help="Path to the database."),
    ] = None,
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Skip confirmation prompt."),
    ] = False,
) -> None:
    """Remove a document and all its chunks from the library."""
    cfg = resolve_config(db)
    library = open_library(cfg)

    try:
        try:
            existing = library.get_document(document)
        except DocumentNotFound:
            console.print(err_document_not_found(document))
            raise typer.Exit(0)

        chunk_count = library.chunk_count(existing.id)
        console.print(f"\nRemove document: [bold]{existing.name}[/] ({existing.id})")
        console.print(f"  Chunks: {chunk_count}")

        if not yes:
            if not typer.confirm("Confirm removal?", default=False):
                console.print("[dim]Cancelled.[/]")
                raise typer.Exit(0)

        removed = library.delete(existing.id)
        console.print(f"\n[green]✓[/] Removed: {existing.name}")
        console.print(f"  {removed} chunks deleted")
    finally:
        library.close()
