"""Comment entity.

Comments are threaded discussions attached to a page. Each comment points at
its parent through ``parent_id`` (None for a root). Depth is not stored;
it is derived from the parent chain when a thread is assembled.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from discuss.domain.model.common import DomainModel
from discuss.domain.value import CommentId, CommentStatus, PageId


class Comment(DomainModel):
    """Comment entity.

    Lifecycle:
    - created by a submission, approved straight away for privileged submitters
    - every edit demotes it back to pending
    - moderation moves pending comments to approved or rejected
    - deletion removes the row (and its replies) for good
    """

    public_id: CommentId
    internal_id: Optional[int] = None  # Store-local surrogate, never exposed
    page_id: PageId
    author: Optional[str] = None
    body: str = Field(min_length=1)
    parent_id: Optional[CommentId] = None
    status: CommentStatus = CommentStatus.PENDING
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: Optional[datetime] = None
    submitter_address: Optional[str] = None
    possession_token: Optional[str] = None  # Issued once at creation
    is_privileged_author: bool = False  # Display flag, grants nothing

    @property
    def is_root(self) -> bool:
        """Whether this comment is a top-level reply to the page."""
        return self.parent_id is None

    @property
    def is_approved(self) -> bool:
        """Whether ordinary readers may see this comment."""
        return self.status == CommentStatus.APPROVED
