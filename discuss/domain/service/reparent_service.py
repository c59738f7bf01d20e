"""Reparent validation domain service."""

from typing import Optional

import logfire

from discuss.config import CommentSettings
from discuss.domain.model.comment import Comment
from discuss.domain.repository import CommentRepository
from discuss.domain.value import CommentId, PageId

from .base import Service

PARENT_NOT_FOUND = "The comment you are replying to does not exist on this page."
PARENT_NOT_APPROVED = "You can only reply to published comments."
SELF_PARENT = "A comment cannot reply to itself."
PARENT_IS_DESCENDANT = "Cannot move this comment beneath one of its own replies."
MAX_DEPTH_REACHED = "The maximum reply depth has been reached for this thread."


class ReparentService(Service):
    """Decides whether a comment may hang below a proposed parent.

    Used for replies at submission time (no existing comment) and for parent
    changes at edit time.
    """

    def __init__(
        self,
        comment_repository: CommentRepository,
        comment_settings: CommentSettings,
    ) -> None:
        """Initialize reparent service.

        Args:
            comment_repository: Comment repository
            comment_settings: Depth and hop limits
        """
        self.comment_repository = comment_repository
        self.comment_settings = comment_settings

    async def validate_parent(
        self,
        comment_id: Optional[CommentId],
        proposed_parent_id: Optional[CommentId],
        page_id: PageId,
    ) -> list[str]:
        """Check a proposed parent, stopping at the first failing check.

        Checks, in order:
        1. No parent (root) is always accepted
        2. Parent exists on the same page and is approved
        3. Parent is not the comment itself
        4. Parent is not one of the comment's own descendants
        5. Neither the comment nor any reply it carries along would end up
           at or below the maximum depth

        Args:
            comment_id: Comment being moved, None for a new reply
            proposed_parent_id: Requested parent, None for a root
            page_id: Page the comment belongs to

        Returns:
            User-facing reasons, empty when the parent is acceptable
        """
        with logfire.span(
            "reparent_service.validate_parent",
            comment_id=str(comment_id) if comment_id else None,
            proposed_parent_id=str(proposed_parent_id) if proposed_parent_id else None,
            page_id=str(page_id),
        ):
            if proposed_parent_id is None:
                return []

            parent = await self.comment_repository.find_by_id(proposed_parent_id)
            if parent is None or parent.page_id != page_id:
                return self._reject(PARENT_NOT_FOUND, comment_id, proposed_parent_id)
            if not parent.is_approved:
                return self._reject(
                    PARENT_NOT_APPROVED, comment_id, proposed_parent_id
                )

            if comment_id is not None and proposed_parent_id == comment_id:
                return self._reject(SELF_PARENT, comment_id, proposed_parent_id)

            ancestry = await self.comment_repository.find_ancestry(
                proposed_parent_id, self.comment_settings.ancestor_hop_limit
            )
            if comment_id is not None and any(
                ancestor.public_id == comment_id for ancestor in ancestry
            ):
                return self._reject(
                    PARENT_IS_DESCENDANT, comment_id, proposed_parent_id
                )

            parent_depth = max(len(ancestry) - 1, 0)
            carried_height = 0
            if comment_id is not None:
                descendants = await self.comment_repository.find_descendants(
                    comment_id
                )
                carried_height = subtree_height(comment_id, descendants)

            if parent_depth + 1 + carried_height >= self.comment_settings.max_depth:
                logfire.info(
                    "Reply depth limit reached",
                    parent_depth=parent_depth,
                    carried_height=carried_height,
                    max_depth=self.comment_settings.max_depth,
                )
                return self._reject(MAX_DEPTH_REACHED, comment_id, proposed_parent_id)

            return []

    @staticmethod
    def _reject(
        reason: str,
        comment_id: Optional[CommentId],
        proposed_parent_id: CommentId,
    ) -> list[str]:
        logfire.info(
            "Parent rejected",
            reason=reason,
            comment_id=str(comment_id) if comment_id else None,
            proposed_parent_id=str(proposed_parent_id),
        )
        return [reason]


def subtree_height(root_id: CommentId, descendants: list[Comment]) -> int:
    """Number of levels below ``root_id`` among the given descendants.

    A leaf has height 0. Pointers that do not lead back to ``root_id`` are
    ignored.
    """
    children: dict[CommentId, list[CommentId]] = {}
    for comment in descendants:
        if comment.parent_id is not None:
            children.setdefault(comment.parent_id, []).append(comment.public_id)

    height = 0
    visited = {root_id}
    level = [root_id]
    while level:
        next_level = []
        for comment_id in level:
            for child_id in children.get(comment_id, []):
                if child_id not in visited:
                    visited.add(child_id)
                    next_level.append(child_id)
        if next_level:
            height += 1
        level = next_level
    return height
