"""docwhisperer init — create the database and the global config file."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from docwhisperer.cli.common import console, open_library, resolve_config
from docwhisperer.config import ensure_global_config


def init_cmd(
    db: Annotated[
        Path | None,
        typer.Option("--db", help="Path to the database to create."),
    ] = None,
    global_config: Annotated[
        Path | None,
        typer.Option("--global-config", hidden=True, help="Override the global config path."),
    ] = None,
) -> None:
    """Initialise a docwhisperer library in the current directory."""
    cfg_path = ensure_global_config(global_config)
    cfg = resolve_config(db)

    existed = Path(cfg.storage.db_path).exists()
    library = open_library(cfg, must_exist=False)
    library.close()

    if existed:
        console.print(f"[dim]Database already initialised:[/] {cfg.storage.db_path}")
    else:
        console.print(f"[green]✓[/] Created database: {cfg.storage.db_path}")
    console.print(
        f"  Embedding model: {cfg.embedding.model} ({cfg.embedding.dimensions} dimensions)"
    )
    console.print(f"  Generation model: {cfg.generation.model}")
    console.print(f"  Global config: {cfg_path}")
