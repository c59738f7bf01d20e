"""Attachment repository interface."""

from abc import ABC, abstractmethod
from typing import Iterable, List

from discuss.domain.model.attachment import Attachment
from discuss.domain.value import CommentId


class AttachmentRepository(ABC):
    """Repository for Attachment entity."""

    @abstractmethod
    async def find_by_comments(
        self, comment_ids: Iterable[CommentId]
    ) -> List[Attachment]:
        """Batch-fetch attachments owned by any of the given comments.

        Args:
            comment_ids: Owning comment IDs

        Returns:
            Attachments in creation order
        """
        pass

    @abstractmethod
    async def save_all(self, attachments: List[Attachment]) -> List[Attachment]:
        """Insert attachment rows.

        Args:
            attachments: Attachments to persist

        Returns:
            The saved attachments
        """
        pass

    @abstractmethod
    async def delete_by_comments(self, comment_ids: Iterable[CommentId]) -> int:
        """Delete all attachment rows owned by the given comments.

        Returns:
            Number of rows removed
        """
        pass
