"""User-facing error messages for the CLI, formatted with rich markup.

Each message states the cause on its first line and, indented below it,
the command or change that fixes it. Callers print the message and exit.
"""

from __future__ import annotations

from docwhisperer.rag.llm_client import api_key_env


def err_no_api_key(provider: str) -> str:
    """The model's provider needs a key that is not exported."""
    env_var = api_key_env(provider) or f"{provider.upper()}_API_KEY"
    return (
        f"[red]Error:[/] No API key for '{provider}'.\n"
        f"  Set:  export {env_var}=...  (or configure a local ollama/... model)"
    )


def err_no_db(db_path: str = ".docwhisperer.db") -> str:
    """No database found at *db_path*."""
    return (
        f"[red]Error:[/] No database found at '{db_path}'.\n"
        "  Run:  docwhisperer init"
    )


def err_config(message: str) -> str:
    """Config file could not be loaded."""
    return (
        f"[red]Error:[/] Invalid configuration.\n"
        f"  {message}\n"
        "  Fix docwhisperer.yaml or ~/.docwhisperer/config.yaml."
    )


def err_index_mismatch(message: str) -> str:
    """Database was built with a different embedding model or dimensionality."""
    return (
        f"[red]Error:[/] Embedding configuration mismatch.\n"
        f"  {message}\n"
        "  Re-ingest your documents into a new database or restore the original "
        "embedding settings."
    )


def err_file_not_found(path: str) -> str:
    """Upload path does not exist."""
    return (
        f"[red]Error:[/] File not found: '{path}'\n"
        "  Check the path and try again."
    )


def err_extraction_failed(message: str) -> str:
    """Text could not be extracted from the uploaded file."""
    return (
        f"[red]Error:[/] {message}\n"
        "  Supported formats: PDF, DOCX, HTML, Markdown, plain text."
    )


def err_ingestion_failed(message: str) -> str:
    """Embedding failed mid-ingestion; nothing was stored."""
    return (
        f"[red]Error:[/] {message}\n"
        "  Nothing was stored. Check that the embedding model is reachable and retry."
    )


def err_embedding_failed(message: str) -> str:
    """The question could not be embedded."""
    return (
        f"[red]Error:[/] {message}\n"
        "  Check that the embedding model is reachable and retry."
    )


def err_generation_failed(message: str) -> str:
    """The language model call failed after LiteLLM's retries."""
    return (
        f"[red]Error:[/] {message}\n"
        "  Check that the generation model is reachable, or pick another with\n"
        "  DOCWHISPERER_GENERATION_MODEL."
    )


def err_document_not_found(document_id: str) -> str:
    """Document id not in the library."""
    return (
        f"[yellow]Document not found:[/] '{document_id}' is not in the library.\n"
        "  Run:  docwhisperer list  to see all uploaded documents."
    )
