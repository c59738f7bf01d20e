"""SQLAlchemy table definitions for the discussion engine.

These table definitions are used for Core queries and manual mapping.
They match the schema defined in Alembic migrations.
"""

from sqlalchemy import (
    BigInteger,
    Boolean,
    CheckConstraint,
    Column,
    Index,
    MetaData,
    String,
    Table,
    Text,
)
from sqlalchemy.dialects import postgresql
from sqlalchemy.dialects.postgresql import TIMESTAMP

# Metadata object for all tables
metadata = MetaData()

# ============================================================================
# COMMENTS TABLE
# ============================================================================
comments_table = Table(
    "comments",
    metadata,
    Column("id", BigInteger, primary_key=True, autoincrement=True),  # Internal only
    Column("public_id", String(32), nullable=False, unique=True),  # Snowflake
    Column("page_id", String(255), nullable=False),
    Column("author", String(80), nullable=True),
    Column("body", Text, nullable=False),
    # No foreign key: pointers are validated on write and tolerated on read
    Column("parent_id", String(32), nullable=True),
    Column(
        "status",
        postgresql.ENUM(
            "pending", "approved", "rejected", name="comment_status", create_type=False
        ),
        nullable=False,
        server_default="pending",
    ),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    Column("updated_at", TIMESTAMP(timezone=True), nullable=True),
    Column("submitter_address", String(64), nullable=True),
    Column("possession_token", String(128), nullable=True),
    Column("is_privileged_author", Boolean, nullable=False, server_default="false"),
    CheckConstraint("length(body) > 0", name="body_not_empty"),
)

Index(
    "idx_comments_page_status_created",
    comments_table.c.page_id,
    comments_table.c.status,
    comments_table.c.created_at,
)
Index("idx_comments_parent_id", comments_table.c.parent_id)
Index("idx_comments_status_created", comments_table.c.status, comments_table.c.created_at)

# ============================================================================
# COMMENT ATTACHMENTS TABLE
# ============================================================================
comment_attachments_table = Table(
    "comment_attachments",
    metadata,
    Column("id", BigInteger, primary_key=True, autoincrement=True),
    Column("public_id", String(32), nullable=False, unique=True),
    # Rows are purged by the application after the comment row is gone
    Column("comment_id", String(32), nullable=False),
    Column("relative_path", Text, nullable=False),
    Column("mime_type", String(100), nullable=False),
    Column("size_bytes", BigInteger, nullable=False, server_default="0"),
    Column("original_name", String(255), nullable=False),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    CheckConstraint("size_bytes >= 0", name="size_non_negative"),
)

Index("idx_comment_attachments_comment_id", comment_attachments_table.c.comment_id)
