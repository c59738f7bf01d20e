"""Domain value objects for discussion threads."""

from discuss.domain.value.identifiers import AttachmentId, CommentId, PageId
from discuss.domain.value.types import (
    Capability,
    CommentStatus,
    ModerationDecision,
    Principal,
    UploadedFile,
)

__all__ = [
    # Identifiers
    "PageId",
    "CommentId",
    "AttachmentId",
    # Types
    "CommentStatus",
    "ModerationDecision",
    "Capability",
    "Principal",
    "UploadedFile",
]
