"""Service layer: indexing, listing and export."""

from folio.services.content_service import ContentService, ScanResult
from folio.services.export_service import ExportService
from folio.services.listing import navigation_menu, published_listing, tag_index

__all__ = [
    "ContentService",
    "ScanResult",
    "ExportService",
    "navigation_menu",
    "published_listing",
    "tag_index",
]
