"""Tag model shared between documents."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from folio.models.base import Base
from folio.models.document import document_tags


class Tag(Base):
    """A text label attached to any number of documents."""

    __tablename__ = "tags"

    name: Mapped[str] = mapped_column(String(255), primary_key=True)

    documents: Mapped[list["Document"]] = relationship(
        "Document", secondary=document_tags, back_populates="tag_rows"
    )

    def __repr__(self) -> str:
        return f"<Tag(name={self.name!r})>"
