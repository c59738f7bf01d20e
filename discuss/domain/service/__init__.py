"""Domain services."""

from .attachment_service import AttachmentService
from .base import Service
from .capability import CapabilityResolver, ClaimsCapabilityResolver
from .comment_service import CommentService
from .ownership_service import OwnershipService
from .reparent_service import ReparentService
from .session_service import SessionService
from .thread_service import ThreadService

__all__ = [
    "AttachmentService",
    "CapabilityResolver",
    "ClaimsCapabilityResolver",
    "CommentService",
    "OwnershipService",
    "ReparentService",
    "Service",
    "SessionService",
    "ThreadService",
]
