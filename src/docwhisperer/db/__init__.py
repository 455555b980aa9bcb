"""docwhisperer database layer."""

from docwhisperer.db.connection import Database
from docwhisperer.db.migrations import MIGRATIONS, run_migrations
from docwhisperer.db.schema import initialize
from docwhisperer.db.vectors import ensure_index_config, serialize_vector

__all__ = [
    "Database",
    "initialize",
    "run_migrations",
    "MIGRATIONS",
    "ensure_index_config",
    "serialize_vector",
]
