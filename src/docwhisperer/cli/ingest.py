"""docwhisperer ingest — upload a document into the library.

Extracts text (PDF, DOCX, HTML, Markdown, plain text), splits it into
500-character chunks with 50 characters overlap, embeds every chunk and
stores it under a new document id. Ingestion is all or nothing: if any
chunk fails to embed, nothing is stored.

Usage:
  docwhisperer ingest --file report.pdf
  docwhisperer ingest --file notes.md --id notes-2024
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.progress import BarColumn, Progress, SpinnerColumn, TaskProgressColumn, TextColumn

from docwhisperer.cli.common import console, open_library, require_api_key, resolve_config
from docwhisperer.cli.errors import (
    err_extraction_failed,
    err_file_not_found,
    err_index_mismatch,
    err_ingestion_failed,
)
from docwhisperer.errors import (
    DimensionMismatch,
    ExtractionFailed,
    IngestionFailed,
)


def ingest_cmd(
    file: Annotated[
        Path,
        typer.Option("--file", "-f", help="Document to upload."),
    ],
    document_id: Annotated[
        str | None,
        typer.Option("--id", help="Document id to use (default: new UUID)."),
    ] = None,
    content_type: Annotated[
        str | None,
        typer.Option("--content-type", help="MIME type (default: guessed from extension)."),
    ] = None,
    db: Annotated[
        Path | None,
        typer.Option("--db", help="Path to the database (created if missing)."),
    ] = None,
) -> None:
    """Upload a document: extract, chunk, embed and index it."""
    if not file.is_file():
        console.print(err_file_not_found(str(file)))
        raise typer.Exit(1)

    cfg = resolve_config(db)
    require_api_key(cfg.embedding.model)

    def _on_chunk(done: int, total: int) -> None:
        prog.update(task, completed=done, total=total)

    library = open_library(cfg, must_exist=False, on_progress=_on_chunk)
    console.print(f"\n[bold]→ {file}[/]")

    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
            transient=True,
            console=console,
        ) as prog:
            task = prog.add_task("Embedding…", total=None)
            document, chunk_count = library.upload(
                file.read_bytes(),
                name=file.name,
                content_type=content_type,
                document_id=document_id,
            )
    except ExtractionFailed as exc:
        console.print(err_extraction_failed(str(exc)))
        raise typer.Exit(1)
    except IngestionFailed as exc:
        console.print(err_ingestion_failed(str(exc)))
        raise typer.Exit(1)
    except DimensionMismatch as exc:
        console.print(err_index_mismatch(str(exc)))
        raise typer.Exit(1)
    except ValueError as exc:
        console.print(f"[red]Error:[/] {exc}")
        raise typer.Exit(1)
    finally:
        library.close()

    if chunk_count == 0:
        console.print("  [yellow]⚠ No text extracted; document stored with 0 chunks[/]")
    else:
        console.print(f"  [green]✓[/] {chunk_count} chunks indexed")
    console.print(f"  Document id: [bold]{document.id}[/]")
