"""Database models for the content index."""

from folio.models.document import Document, document_tags
from folio.models.navigation import NavigationEntry
from folio.models.tag import Tag

__all__ = ["Document", "NavigationEntry", "Tag", "document_tags"]
