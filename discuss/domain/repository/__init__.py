"""Repository interfaces for the discussion domain.

Repository interfaces are defined in the domain layer (dependency inversion).
Implementations live in the persistence layer.
"""

from discuss.domain.repository.attachment import AttachmentRepository
from discuss.domain.repository.comment import CommentRepository

__all__ = [
    "AttachmentRepository",
    "CommentRepository",
]
