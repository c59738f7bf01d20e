"""PostgreSQL repository implementations."""

from discuss.persistence.repository.attachment import PostgresAttachmentRepository
from discuss.persistence.repository.comment import PostgresCommentRepository

__all__ = [
    "PostgresAttachmentRepository",
    "PostgresCommentRepository",
]
