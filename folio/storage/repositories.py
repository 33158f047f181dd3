"""Repository pattern implementation for the content index."""

from __future__ import annotations

from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from folio.models.document import Document, document_tags
from folio.models.navigation import NavigationEntry
from folio.models.tag import Tag


def _listing_order():
    # Newest first, undated last, title as tie-breaker
    return (Document.date.is_(None), Document.date.desc(), Document.title.asc())


class DocumentRepository:
    """Repository for document operations."""

    def __init__(self, session: Session):
        self.session = session

    def create(self, document: Document) -> Document:
        """Add a new document."""
        self.session.add(document)
        self.session.flush()
        return document

    def get_by_id(self, document_id: str) -> Optional[Document]:
        """Get document by slug."""
        return self.session.get(Document, document_id)

    def get_all(self) -> list[Document]:
        """Get every indexed document, drafts included, in listing order."""
        stmt = (
            select(Document)
            .options(selectinload(Document.tag_rows), selectinload(Document.navigation))
            .order_by(*_listing_order())
        )
        return list(self.session.scalars(stmt))

    def list(
        self,
        include_drafts: bool = False,
        tag: str | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[Document]:
        """
        List documents newest first.

        Args:
            include_drafts: Include documents flagged as drafts
            tag: Only documents carrying this tag
            limit: Maximum number of results
            offset: Number of results to skip

        Returns:
            List of documents
        """
        stmt = select(Document).options(
            selectinload(Document.tag_rows), selectinload(Document.navigation)
        )
        if not include_drafts:
            stmt = stmt.where(Document.draft.is_(False))
        if tag:
            stmt = stmt.where(Document.tag_rows.any(Tag.name == tag))
        stmt = stmt.order_by(*_listing_order()).limit(limit).offset(offset)
        return list(self.session.scalars(stmt))

    def search_by_title(self, title_pattern: str, limit: int = 100) -> list[Document]:
        """Search published documents by case-insensitive title substring."""
        stmt = (
            select(Document)
            .where(Document.title.ilike(f"%{title_pattern}%"))
            .where(Document.draft.is_(False))
            .order_by(*_listing_order())
            .limit(limit)
        )
        return list(self.session.scalars(stmt))

    def update(self, document: Document) -> Document:
        """Flush changes made to a document."""
        self.session.flush()
        return document

    def delete(self, document: Document) -> None:
        """Remove a document; its navigation entry and tag links go with it."""
        self.session.delete(document)


class TagRepository:
    """Repository for tag operations."""

    def __init__(self, session: Session):
        self.session = session

    def get_or_create(self, names: frozenset[str] | set[str]) -> list[Tag]:
        """Return Tag rows for the given names, creating missing ones."""
        if not names:
            return []
        stmt = select(Tag).where(Tag.name.in_(names))
        existing = {tag.name: tag for tag in self.session.scalars(stmt)}
        tags = []
        created = False
        for name in sorted(names):
            tag = existing.get(name)
            if tag is None:
                tag = Tag(name=name)
                self.session.add(tag)
                created = True
            tags.append(tag)
        if created:
            # Later lookups in the same scan must see these rows
            self.session.flush()
        return tags

    def counts(self, include_drafts: bool = False) -> list[tuple[str, int]]:
        """Tag names with their document counts, most used first."""
        stmt = (
            select(Tag.name, func.count(document_tags.c.document_id))
            .join(document_tags, document_tags.c.tag_name == Tag.name)
            .join(Document, Document.id == document_tags.c.document_id)
        )
        if not include_drafts:
            stmt = stmt.where(Document.draft.is_(False))
        stmt = stmt.group_by(Tag.name).order_by(
            func.count(document_tags.c.document_id).desc(), Tag.name.asc()
        )
        return [(name, count) for name, count in self.session.execute(stmt)]

    def delete_unused(self) -> int:
        """Remove tags no document refers to."""
        used = select(document_tags.c.tag_name)
        orphans = list(self.session.scalars(select(Tag).where(Tag.name.not_in(used))))
        for tag in orphans:
            self.session.delete(tag)
        self.session.flush()
        return len(orphans)


class NavigationRepository:
    """Repository for navigation entries."""

    def __init__(self, session: Session):
        self.session = session

    def get_menu(self, include_drafts: bool = False) -> list[NavigationEntry]:
        """Navigation entries ordered by rank then label."""
        stmt = (
            select(NavigationEntry)
            .join(Document, Document.id == NavigationEntry.document_id)
            .options(selectinload(NavigationEntry.document))
            .order_by(NavigationEntry.order.asc(), NavigationEntry.key.asc())
        )
        if not include_drafts:
            stmt = stmt.where(Document.draft.is_(False))
        return list(self.session.scalars(stmt))
