"""In-memory repository implementations for testing."""

from .attachment import InMemoryAttachmentRepository
from .comment import InMemoryCommentRepository

__all__ = [
    "InMemoryAttachmentRepository",
    "InMemoryCommentRepository",
]
