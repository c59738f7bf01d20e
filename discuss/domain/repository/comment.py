"""Comment repository interface."""

from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from discuss.domain.model.comment import Comment
from discuss.domain.value import CommentId, CommentStatus, PageId


class CommentRepository(ABC):
    """Repository for Comment entity.

    Defines the contract for comment persistence operations.
    Implementations live in the persistence layer.
    """

    @abstractmethod
    async def find_by_id(self, comment_id: CommentId) -> Optional[Comment]:
        """Find a comment by public ID.

        Args:
            comment_id: The comment's public identifier

        Returns:
            The comment if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_root_ids(self, page_id: PageId) -> List[CommentId]:
        """Find approved root comment IDs for a page, oldest first.

        Args:
            page_id: The page ID

        Returns:
            Public IDs of approved comments without a parent
        """
        pass

    @abstractmethod
    async def find_thread_rows(
        self, page_id: PageId, root_ids: Sequence[CommentId]
    ) -> List[Comment]:
        """Fetch the approved closure seeded at the given roots, oldest first.

        One logical bulk operation: the seeds plus every approved comment of
        the same page transitively replying to them. Rows come back flat;
        the caller rebuilds the tree.

        Args:
            page_id: The page ID
            root_ids: Seed comment IDs

        Returns:
            Flat list of candidate rows
        """
        pass

    @abstractmethod
    async def find_ancestry(
        self, comment_id: CommentId, max_hops: int
    ) -> List[Comment]:
        """Walk up the parent chain starting at a comment.

        The walk stops at a root, at a missing parent, at a revisited id or
        after ``max_hops`` parent hops, whichever comes first.

        Args:
            comment_id: Starting comment
            max_hops: Safety ceiling on parent hops

        Returns:
            The starting comment followed by its ancestors, nearest first.
            Empty if the starting comment does not exist.
        """
        pass

    @abstractmethod
    async def find_descendants(self, comment_id: CommentId) -> List[Comment]:
        """Find every comment transitively replying to a comment, any status.

        Args:
            comment_id: Subtree root (not included in the result)

        Returns:
            Descendants on the same page, each listed once
        """
        pass

    @abstractmethod
    async def find_by_status(
        self,
        status: CommentStatus,
        limit: int = 30,
        offset: int = 0,
    ) -> List[Comment]:
        """Find comments in a given status across all pages, oldest first.

        Args:
            status: Status to filter on
            limit: Maximum number of comments to return
            offset: Number of comments to skip

        Returns:
            Comments in the status
        """
        pass

    @abstractmethod
    async def count_by_status(self, status: CommentStatus) -> int:
        """Count comments in a given status across all pages."""
        pass

    @abstractmethod
    async def save(self, comment: Comment) -> Comment:
        """Save a comment (create or update).

        Creating assigns the internal surrogate id.

        Args:
            comment: The comment to save

        Returns:
            The saved comment
        """
        pass

    @abstractmethod
    async def update_status(
        self, comment_id: CommentId, status: CommentStatus
    ) -> Optional[Comment]:
        """Set a comment's status, leaving everything else untouched.

        Args:
            comment_id: The comment ID
            status: New status

        Returns:
            Updated comment, None if it no longer exists
        """
        pass

    @abstractmethod
    async def delete(self, comment_id: CommentId) -> int:
        """Hard delete a single comment row.

        Args:
            comment_id: The comment ID to delete

        Returns:
            Number of rows removed (0 when already gone)
        """
        pass
