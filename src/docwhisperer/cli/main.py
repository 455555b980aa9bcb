"""docwhisperer CLI entry point."""

from __future__ import annotations

import importlib.metadata
import logging
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler

from docwhisperer.cli.ask import ask_cmd
from docwhisperer.cli.documents import list_cmd
from docwhisperer.cli.ingest import ingest_cmd
from docwhisperer.cli.init import init_cmd
from docwhisperer.cli.remove import remove_cmd


def _version() -> str:
    try:
        return importlib.metadata.version("docwhisperer")
    except importlib.metadata.PackageNotFoundError:
        return "dev"


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"docwhisperer {_version()}")
        raise typer.Exit()


def configure_logging(verbose: bool = False) -> None:
    """Route library log records through rich on stderr.

    WARNING and above by default; ``--verbose`` shows DEBUG.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )
    # LiteLLM and HTTP clients are chatty at DEBUG.
    for name in ("LiteLLM", "httpx", "httpcore"):
        logging.getLogger(name).setLevel(logging.WARNING)


app = typer.Typer(
    name="docwhisperer",
    help=(
        "docwhisperer — ask questions about your documents.\n\n"
        "  docwhisperer ingest  Upload a document (PDF, DOCX, HTML, Markdown, text).\n"
        "  docwhisperer ask     Answer a question grounded in the uploaded documents."
    ),
    add_completion=False,
)


@app.callback()
def main_callback(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=_version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show debug logging."),
    ] = False,
) -> None:
    """docwhisperer — ask questions about your documents."""
    configure_logging(verbose)


app.command("init")(init_cmd)
app.command("ingest")(ingest_cmd)
app.command("list")(list_cmd)
app.command("ask")(ask_cmd)
app.command("remove")(remove_cmd)


@app.command("version")
def version_cmd() -> None:
    """Show the installed docwhisperer version."""
    typer.echo(f"docwhisperer {_version()}")


if __name__ == "__main__":
    app()
