"""Navigation entry placing a document in the site menu."""

from sqlalchemy import ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from folio.models.base import Base, TimestampMixin


class NavigationEntry(Base, TimestampMixin):
    """Menu label and sort rank for one navigable document."""

    __tablename__ = "navigation_entries"

    document_id: Mapped[str] = mapped_column(
        String(255), ForeignKey("documents.id", ondelete="CASCADE"), primary_key=True
    )
    key: Mapped[str] = mapped_column(String(255), nullable=False)
    # 'order' is an SQL keyword
    order: Mapped[int] = mapped_column("sort_order", Integer, nullable=False, default=0, index=True)

    document: Mapped["Document"] = relationship("Document", back_populates="navigation")

    def __repr__(self) -> str:
        return f"<NavigationEntry(key={self.key!r}, order={self.order!r})>"
