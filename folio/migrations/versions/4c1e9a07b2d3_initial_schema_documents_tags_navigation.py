"""Initial schema: documents, tags, navigation entries

Revision ID: 4c1e9a07b2d3
Revises:
Create Date: 2026-10-18 12:00:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "4c1e9a07b2d3"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    bind = op.get_bind()
    is_postgresql = bind.dialect.name == "postgresql"

    # JSONB for PostgreSQL, JSON elsewhere
    if is_postgresql:
        metadata_type = postgresql.JSONB(astext_type=sa.Text())
    else:
        metadata_type = sa.JSON()

    timestamp_type = sa.DateTime(timezone=True)
    now = sa.func.now()

    op.create_table(
        "documents",
        sa.Column("id", sa.String(length=255), nullable=False),
        sa.Column("source_path", sa.String(length=1024), nullable=False),
        sa.Column("title", sa.String(length=500), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("date", sa.Date(), nullable=True),
        sa.Column("draft", sa.Boolean(), nullable=False),
        sa.Column("body", sa.Text(), nullable=False),
        sa.Column("content_hash", sa.String(length=64), nullable=False),
        sa.Column("metadata", metadata_type, nullable=True),
        sa.Column("created_at", timestamp_type, server_default=now, nullable=False),
        sa.Column("updated_at", timestamp_type, server_default=now, nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("source_path"),
    )
    op.create_index(op.f("ix_documents_title"), "documents", ["title"], unique=False)
    op.create_index(op.f("ix_documents_date"), "documents", ["date"], unique=False)
    op.create_index(op.f("ix_documents_draft"), "documents", ["draft"], unique=False)

    op.create_table(
        "tags",
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.PrimaryKeyConstraint("name"),
    )

    op.create_table(
        "document_tags",
        sa.Column("document_id", sa.String(length=255), nullable=False),
        sa.Column("tag_name", sa.String(length=255), nullable=False),
        sa.ForeignKeyConstraint(["document_id"], ["documents.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["tag_name"], ["tags.name"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("document_id", "tag_name"),
    )

    op.create_table(
        "navigation_entries",
        sa.Column("document_id", sa.String(length=255), nullable=False),
        sa.Column("key", sa.String(length=255), nullable=False),
        sa.Column("sort_order", sa.Integer(), nullable=False),
        sa.Column("created_at", timestamp_type, server_default=now, nullable=False),
        sa.Column("updated_at", timestamp_type, server_default=now, nullable=False),
        sa.ForeignKeyConstraint(["document_id"], ["documents.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("document_id"),
    )
    op.create_index(
        op.f("ix_navigation_entries_sort_order"),
        "navigation_entries",
        ["sort_order"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index(op.f("ix_navigation_entries_sort_order"), table_name="navigation_entries")
    op.drop_table("navigation_entries")
    op.drop_table("document_tags")
    op.drop_table("tags")
    op.drop_index(op.f("ix_documents_draft"), table_name="documents")
    op.drop_index(op.f("ix_documents_date"), table_name="documents")
    op.drop_index(op.f("ix_documents_title"), table_name="documents")
    op.drop_table("documents")
