"""Model serialization for MCP and HTTP responses."""

from typing import Any

from pydantic_core import to_jsonable_python

from folio.frontmatter import ParsedDocument
from folio.models.document import Document
from folio.models.navigation import NavigationEntry


def serialize_document(document: Document, include_body: bool = True) -> dict[str, Any]:
    """
    Serialize an indexed document to a dictionary.

    Args:
        document: Document model instance
        include_body: Include the Markdown body

    Returns:
        Dictionary representation of the document
    """
    result = {
        "slug": document.slug,
        "source_path": document.source_path,
        "title": document.title,
        "description": document.description,
        "date": document.date.isoformat() if document.date else None,
        "tags": sorted(document.tags),
        "draft": document.draft,
        "nav": serialize_navigation(document.navigation) if document.navigation else None,
        "metadata": document.meta or {},
    }
    if include_body:
        result["body"] = document.body
    return result


def serialize_navigation(entry: NavigationEntry) -> dict[str, Any]:
    return {"key": entry.key, "order": entry.order, "slug": entry.document_id}


def serialize_parsed(parsed: ParsedDocument) -> dict[str, Any]:
    """Serialize a freshly parsed document (not yet indexed)."""
    front_matter = parsed.front_matter
    return {
        "format": parsed.format,
        "title": front_matter.title,
        "description": front_matter.description,
        "date": front_matter.date.isoformat() if front_matter.date else None,
        "tags": sorted(front_matter.tags),
        "draft": front_matter.draft,
        "nav": front_matter.nav.model_dump() if front_matter.nav else None,
        "slug": front_matter.slug,
        "params": to_jsonable_python(front_matter.params),
        "body": parsed.body,
    }
