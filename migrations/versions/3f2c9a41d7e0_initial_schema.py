"""initial_schema

Create the schema for the discussion engine:
- Comments (threaded via parent public id, moderated via status)
- Comment attachments (file metadata, files live in blob storage)

Revision ID: 3f2c9a41d7e0
Revises:
Create Date: 2026-10-18 09:12:44.310512

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = "3f2c9a41d7e0"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    # Create ENUM types (idempotent)
    op.execute("""
        DO $$ BEGIN
            CREATE TYPE comment_status AS ENUM ('pending', 'approved', 'rejected');
        EXCEPTION
            WHEN duplicate_object THEN null;
        END $$;
    """)

    # ========================================================================
    # COMMENTS table
    # ========================================================================
    op.create_table(
        "comments",
        sa.Column("id", sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column("public_id", sa.String(32), nullable=False),
        sa.Column("page_id", sa.String(255), nullable=False),
        sa.Column("author", sa.String(80), nullable=True),
        sa.Column("body", sa.Text(), nullable=False),
        # Parent public id, no foreign key so replies survive corrupt pointers
        sa.Column("parent_id", sa.String(32), nullable=True),
        sa.Column(
            "status",
            postgresql.ENUM(
                "pending",
                "approved",
                "rejected",
                name="comment_status",
                create_type=False,
            ),
            nullable=False,
            server_default="pending",
        ),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.Column("updated_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("submitter_address", sa.String(64), nullable=True),
        sa.Column("possession_token", sa.String(128), nullable=True),
        sa.Column(
            "is_privileged_author",
            sa.Boolean(),
            nullable=False,
            server_default="false",
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("public_id", name="uq_comments_public_id"),
        sa.CheckConstraint("length(body) > 0", name="body_not_empty"),
    )
    op.create_index(
        "idx_comments_page_status_created",
        "comments",
        ["page_id", "status", "created_at"],
    )
    op.create_index("idx_comments_parent_id", "comments", ["parent_id"])
    op.create_index(
        "idx_comments_status_created", "comments", ["status", "created_at"]
    )

    # ========================================================================
    # COMMENT ATTACHMENTS table
    # ========================================================================
    op.create_table(
        "comment_attachments",
        sa.Column("id", sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column("public_id", sa.String(32), nullable=False),
        # Purged by the application together with the stored files
        sa.Column("comment_id", sa.String(32), nullable=False),
        sa.Column("relative_path", sa.Text(), nullable=False),
        sa.Column("mime_type", sa.String(100), nullable=False),
        sa.Column("size_bytes", sa.BigInteger(), nullable=False, server_default="0"),
        sa.Column("original_name", sa.String(255), nullable=False),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("public_id", name="uq_comment_attachments_public_id"),
        sa.CheckConstraint("size_bytes >= 0", name="size_non_negative"),
    )
    op.create_index(
        "idx_comment_attachments_comment_id", "comment_attachments", ["comment_id"]
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table("comment_attachments")
    op.drop_table("comments")

    op.execute("DROP TYPE IF EXISTS comment_status")
