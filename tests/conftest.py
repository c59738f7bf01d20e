"""Test configuration and fixtures."""

from datetime import datetime, timedelta
from itertools import count

import logfire

from discuss.domain.model.comment import Comment
from discuss.domain.value import CommentId, CommentStatus, PageId

# Keep spans local during tests
logfire.configure(send_to_logfire=False, console=False)

_sequence = count(1)
_base_time = datetime(2024, 6, 1, 12, 0, 0)


def make_comment(
    public_id: str,
    page_id: str = "page-1",
    parent_id: str | None = None,
    status: CommentStatus = CommentStatus.APPROVED,
    body: str | None = None,
    possession_token: str | None = None,
    created_at: datetime | None = None,
) -> Comment:
    """Helper to build comments with strictly increasing creation times.

    Args:
        public_id: Comment ID
        page_id: Page the comment belongs to
        parent_id: Parent comment ID (None for a root)
        status: Moderation status
        body: Message (defaults to a text naming the comment)
        possession_token: Token proving authorship
        created_at: Creation time (defaults to the next tick)

    Returns:
        Unsaved Comment
    """
    return Comment(
        public_id=CommentId(public_id),
        page_id=PageId(page_id),
        author="Reader",
        body=body or f"Comment {public_id}",
        parent_id=CommentId(parent_id) if parent_id else None,
        status=status,
        created_at=created_at or _base_time + timedelta(seconds=next(_sequence)),
        possession_token=possession_token,
    )
