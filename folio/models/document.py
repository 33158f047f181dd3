"""Document model for indexed Markdown files."""

import datetime
from typing import Any, Optional

from sqlalchemy import JSON, Boolean, Column, Date, ForeignKey, String, Table, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from folio.models.base import Base, TimestampMixin

document_tags = Table(
    "document_tags",
    Base.metadata,
    Column(
        "document_id",
        String(255),
        ForeignKey("documents.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "tag_name",
        String(255),
        ForeignKey("tags.name", ondelete="CASCADE"),
        primary_key=True,
    ),
)


class Document(Base, TimestampMixin):
    """A Markdown document: front-matter fields plus its body."""

    __tablename__ = "documents"

    # The slug: path relative to the content directory without its suffix
    id: Mapped[str] = mapped_column(String(255), primary_key=True)
    source_path: Mapped[str] = mapped_column(String(1024), nullable=False, unique=True)
    title: Mapped[str] = mapped_column(String(500), nullable=False, index=True)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    date: Mapped[Optional[datetime.date]] = mapped_column(Date, nullable=True, index=True)
    draft: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, index=True)
    body: Mapped[str] = mapped_column(Text, nullable=False, default="")
    content_hash: Mapped[str] = mapped_column(String(64), nullable=False)
    # Unrecognised front-matter keys. Column is 'metadata', which SQLAlchemy
    # reserves as an attribute name.
    meta: Mapped[Optional[dict[str, Any]]] = mapped_column(
        "metadata", JSON, nullable=True, default=dict
    )

    tag_rows: Mapped[list["Tag"]] = relationship(
        "Tag", secondary=document_tags, back_populates="documents"
    )
    navigation: Mapped[Optional["NavigationEntry"]] = relationship(
        "NavigationEntry",
        back_populates="document",
        uselist=False,
        cascade="all, delete-orphan",
    )

    @property
    def slug(self) -> str:
        return self.id

    @property
    def tags(self) -> frozenset[str]:
        return frozenset(tag.name for tag in self.tag_rows)

    @property
    def nav(self) -> Optional["NavigationEntry"]:
        return self.navigation

    def __repr__(self) -> str:
        return f"<Document(id={self.id!r}, title={self.title!r})>"
