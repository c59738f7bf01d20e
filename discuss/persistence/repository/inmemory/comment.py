"""In-memory comment repository for testing."""

from datetime import datetime
from itertools import count
from typing import Optional, Sequence

from discuss.domain.model.comment import Comment
from discuss.domain.repository.comment import CommentRepository
from discuss.domain.value import CommentId, CommentStatus, PageId


class InMemoryCommentRepository(CommentRepository):
    """In-memory implementation of CommentRepository for testing.

    The thread closure is computed over a per-page scan instead of a
    recursive query.
    """

    def __init__(self) -> None:
        self._comments: dict[CommentId, Comment] = {}
        self._ids = count(1)

    @staticmethod
    def _order(comment: Comment) -> tuple:
        return (comment.created_at, comment.internal_id or 0)

    async def find_by_id(self, comment_id: CommentId) -> Optional[Comment]:
        """Find a comment by public ID."""
        return self._comments.get(comment_id)

    async def find_root_ids(self, page_id: PageId) -> list[CommentId]:
        """Find approved root comment IDs for a page, oldest first."""
        roots = [
            c
            for c in self._comments.values()
            if c.page_id == page_id and c.is_approved and c.parent_id is None
        ]
        roots.sort(key=self._order)
        return [c.public_id for c in roots]

    async def find_thread_rows(
        self, page_id: PageId, root_ids: Sequence[CommentId]
    ) -> list[Comment]:
        """Fetch the approved closure seeded at the given roots."""
        approved = [
            c for c in self._comments.values() if c.page_id == page_id and c.is_approved
        ]
        by_parent: dict[CommentId, list[Comment]] = {}
        for comment in approved:
            if comment.parent_id is not None:
                by_parent.setdefault(comment.parent_id, []).append(comment)

        seeds = set(root_ids)
        included: dict[CommentId, Comment] = {
            c.public_id: c for c in approved if c.public_id in seeds
        }
        frontier = list(included)
        while frontier:
            next_frontier = []
            for parent_id in frontier:
                for child in by_parent.get(parent_id, []):
                    if child.public_id not in included:
                        included[child.public_id] = child
                        next_frontier.append(child.public_id)
            frontier = next_frontier

        return sorted(included.values(), key=self._order)

    async def find_ancestry(
        self, comment_id: CommentId, max_hops: int
    ) -> list[Comment]:
        """Walk up the parent chain."""
        chain: list[Comment] = []
        seen: set[CommentId] = set()
        current = self._comments.get(comment_id)
        while current is not None and current.public_id not in seen:
            chain.append(current)
            seen.add(current.public_id)
            if current.parent_id is None or len(chain) > max_hops:
                break
            current = self._comments.get(current.parent_id)
        return chain

    async def find_descendants(self, comment_id: CommentId) -> list[Comment]:
        """Find every comment transitively replying to a comment, any status."""
        root = self._comments.get(comment_id)
        if root is None:
            return []

        same_page = [c for c in self._comments.values() if c.page_id == root.page_id]
        found: dict[CommentId, Comment] = {}
        frontier = [comment_id]
        while frontier:
            next_frontier = []
            for parent_id in frontier:
                for comment in same_page:
                    if (
                        comment.parent_id == parent_id
                        and comment.public_id != comment_id
                        and comment.public_id not in found
                    ):
                        found[comment.public_id] = comment
                        next_frontier.append(comment.public_id)
            frontier = next_frontier

        return sorted(found.values(), key=self._order)

    async def find_by_status(
        self,
        status: CommentStatus,
        limit: int = 30,
        offset: int = 0,
    ) -> list[Comment]:
        """Find comments in a given status, oldest first."""
        comments = [c for c in self._comments.values() if c.status == status]
        comments.sort(key=self._order)
        return comments[offset : offset + limit]

    async def count_by_status(self, status: CommentStatus) -> int:
        """Count comments in a given status."""
        return sum(1 for c in self._comments.values() if c.status == status)

    async def save(self, comment: Comment) -> Comment:
        """Save a comment (create or update)."""
        existing = self._comments.get(comment.public_id)
        if existing is not None:
            comment = comment.model_copy(update={"internal_id": existing.internal_id})
        elif comment.internal_id is None:
            comment = comment.model_copy(update={"internal_id": next(self._ids)})
        self._comments[comment.public_id] = comment
        return comment

    async def update_status(
        self, comment_id: CommentId, status: CommentStatus
    ) -> Optional[Comment]:
        """Set a comment's status."""
        comment = self._comments.get(comment_id)
        if comment is None:
            return None
        updated = comment.model_copy(
            update={"status": status, "updated_at": datetime.now()}
        )
        self._comments[comment_id] = updated
        return updated

    async def delete(self, comment_id: CommentId) -> int:
        """Delete a comment (hard delete)."""
        return 1 if self._comments.pop(comment_id, None) is not None else 0
