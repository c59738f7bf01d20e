"""PostgreSQL implementation of Attachment repository."""

from typing import Iterable, List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from discuss.domain.model import Attachment
from discuss.domain.repository import AttachmentRepository
from discuss.domain.value import CommentId
from discuss.persistence.mappers import attachment_to_dict, row_to_attachment
from discuss.persistence.tables import comment_attachments_table


class PostgresAttachmentRepository(AttachmentRepository):
    """PostgreSQL implementation of AttachmentRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def find_by_comments(
        self, comment_ids: Iterable[CommentId]
    ) -> List[Attachment]:
        """Batch-fetch attachments owned by any of the given comments."""
        ids = list(comment_ids)
        if not ids:
            return []

        stmt = (
            select(comment_attachments_table)
            .where(comment_attachments_table.c.comment_id.in_(ids))
            .order_by(comment_attachments_table.c.id)
        )
        result = await self.session.execute(stmt)
        return [row_to_attachment(row._asdict()) for row in result.fetchall()]

    async def save_all(self, attachments: List[Attachment]) -> List[Attachment]:
        """Insert attachment rows."""
        if not attachments:
            return []

        stmt = comment_attachments_table.insert().values(
            [attachment_to_dict(attachment) for attachment in attachments]
        )
        await self.session.execute(stmt)
        await self.session.flush()
        return attachments

    async def delete_by_comments(self, comment_ids: Iterable[CommentId]) -> int:
        """Delete all attachment rows owned by the given comments."""
        ids = list(comment_ids)
        if not ids:
            return 0

        stmt = comment_attachments_table.delete().where(
            comment_attachments_table.c.comment_id.in_(ids)
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount or 0
