"""In-memory attachment repository for testing."""

from typing import Iterable

from discuss.domain.model.attachment import Attachment
from discuss.domain.repository.attachment import AttachmentRepository
from discuss.domain.value import AttachmentId, CommentId


class InMemoryAttachmentRepository(AttachmentRepository):
    """In-memory implementation of AttachmentRepository for testing."""

    def __init__(self) -> None:
        # Insertion order doubles as creation order
        self._attachments: dict[AttachmentId, Attachment] = {}

    async def find_by_comments(
        self, comment_ids: Iterable[CommentId]
    ) -> list[Attachment]:
        """Batch-fetch attachments owned by any of the given comments."""
        ids = set(comment_ids)
        return [a for a in self._attachments.values() if a.comment_id in ids]

    async def save_all(self, attachments: list[Attachment]) -> list[Attachment]:
        """Insert attachment rows."""
        for attachment in attachments:
            self._attachments[attachment.public_id] = attachment
        return attachments

    async def delete_by_comments(self, comment_ids: Iterable[CommentId]) -> int:
        """Delete all attachment rows owned by the given comments."""
        ids = set(comment_ids)
        doomed = [a.public_id for a in self._attachments.values() if a.comment_id in ids]
        for attachment_id in doomed:
            del self._attachments[attachment_id]
        return len(doomed)
