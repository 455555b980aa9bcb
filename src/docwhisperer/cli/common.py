"""Helpers shared by the CLI commands: config resolution, library opening."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import typer
from rich.console import Console

from docwhisperer.cli.errors import err_config, err_index_mismatch, err_no_api_key, err_no_db
from docwhisperer.config import ConfigError, DocWhispererConfig, load_config
from docwhisperer.errors import IndexConfigMismatch
from docwhisperer.library import DocumentLibrary, build_library
from docwhisperer.rag.llm_client import provider_of, validate_api_key

console = Console()


def resolve_config(db: Path | None) -> DocWhispererConfig:
    """Load config; a ``--db`` flag overrides ``storage.db_path``."""
    try:
        cfg = load_config()
    except ConfigError as exc:
        console.print(err_config(str(exc)))
        raise typer.Exit(1)
    if db is not None:
        cfg.storage.db_path = str(db)
    return cfg


def require_api_key(model: str) -> None:
    try:
        validate_api_key(model)
    except EnvironmentError:
        console.print(err_no_api_key(provider_of(model)))
        raise typer.Exit(1)


def open_library(
    cfg: DocWhispererConfig,
    *,
    must_exist: bool = True,
    on_progress: Callable[[int, int], None] | None = None,
) -> DocumentLibrary:
    """Open the library at ``cfg.storage.db_path`` or exit with an error."""
    if must_exist and not Path(cfg.storage.db_path).exists():
        console.print(err_no_db(cfg.storage.db_path))
        raise typer.Exit(1)
    try:
        return build_library(cfg, on_progress=on_progress)
    except IndexConfigMismatch as exc:
        console.print(err_index_mismatch(str(exc)))
        raise typer.Exit(1)
