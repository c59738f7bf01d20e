"""Domain value objects for discussion threads.

Value objects are immutable and defined by their values, not identity.
"""

from enum import Enum

from discuss.domain.value.common import ValueObject


class CommentStatus(str, Enum):
    """Moderation status of a comment.

    Only approved comments are ever shown to ordinary readers.
    """

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class ModerationDecision(str, Enum):
    """Decision a moderator can take on a pending comment."""

    APPROVE = "approve"
    REJECT = "reject"

    @property
    def target_status(self) -> CommentStatus:
        """Status a comment ends up in after this decision."""
        if self is ModerationDecision.APPROVE:
            return CommentStatus.APPROVED
        return CommentStatus.REJECTED


class Capability(str, Enum):
    """Comment moderation capabilities granted by the role collaborator."""

    MODERATE_COMMENTS = "can_moderate_comments"
    DELETE_COMMENTS = "can_delete_comments"
    APPROVE_COMMENTS = "can_approve_comments"
    REJECT_COMMENTS = "can_reject_comments"


class Principal(ValueObject):
    """Caller identity as seen by the discussion engine.

    Roles and capabilities are resolved outside the engine and handed in as
    plain flags. Anonymous readers are principals with no flags at all.
    """

    principal_id: str | None = None
    address: str | None = None  # Submitter IP, kept for audit
    capabilities: frozenset[str] = frozenset()
    is_admin: bool = False
    is_moderator: bool = False
    is_contributor: bool = False
    is_helper: bool = False

    @classmethod
    def anonymous(cls, address: str | None = None) -> "Principal":
        """Principal for an unauthenticated caller."""
        return cls(address=address)

    @property
    def is_privileged(self) -> bool:
        """Whether submissions from this principal skip the moderation queue."""
        return self.is_admin or self.is_moderator or self.is_contributor or self.is_helper


class UploadedFile(ValueObject):
    """A file the transport already wrote to the blob store.

    Fields are unchecked here; the attachment service validates them and
    reports every problem at once.
    """

    stored_name: str | None
    mime_type: str
    size: int
    original_name: str | None = None
