"""Storage layer for the content index."""

from folio.storage.database import Database, get_db, reset_db
from folio.storage.repositories import (
    DocumentRepository,
    NavigationRepository,
    TagRepository,
)

__all__ = [
    "Database",
    "get_db",
    "reset_db",
    "DocumentRepository",
    "NavigationRepository",
    "TagRepository",
]
