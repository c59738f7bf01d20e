"""PostgreSQL implementation of Comment repository."""

from datetime import datetime
from typing import List, Optional, Sequence

from sqlalchemy import func, literal, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from discuss.domain.model import Comment
from discuss.domain.repository import CommentRepository
from discuss.domain.value import CommentId, CommentStatus, PageId
from discuss.persistence.mappers import comment_to_dict, row_to_comment
from discuss.persistence.tables import comments_table

APPROVED = CommentStatus.APPROVED.value


class PostgresCommentRepository(CommentRepository):
    """PostgreSQL implementation of CommentRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def find_by_id(self, comment_id: CommentId) -> Optional[Comment]:
        """Find a comment by public ID."""
        stmt = select(comments_table).where(comments_table.c.public_id == comment_id)
        result = await self.session.execute(stmt)
        row = result.fetchone()
        return row_to_comment(row._asdict()) if row else None

    async def find_root_ids(self, page_id: PageId) -> List[CommentId]:
        """Find approved root comment IDs for a page, oldest first."""
        stmt = (
            select(comments_table.c.public_id)
            .where(comments_table.c.page_id == page_id)
            .where(comments_table.c.status == APPROVED)
            .where(comments_table.c.parent_id.is_(None))
            .order_by(comments_table.c.created_at, comments_table.c.id)
        )
        result = await self.session.execute(stmt)
        return [CommentId(public_id) for public_id in result.scalars().all()]

    async def find_thread_rows(
        self, page_id: PageId, root_ids: Sequence[CommentId]
    ) -> List[Comment]:
        """Fetch the approved closure seeded at the given roots.

        Uses a recursive CTE. UNION (not UNION ALL) discards rows already
        produced, so a cyclic parent chain terminates.
        """
        if not root_ids:
            return []

        thread = (
            select(comments_table)
            .where(comments_table.c.page_id == page_id)
            .where(comments_table.c.status == APPROVED)
            .where(comments_table.c.public_id.in_(list(root_ids)))
            .cte("thread", recursive=True)
        )
        child = comments_table.alias("child")
        thread = thread.union(
            select(child)
            .join(thread, child.c.parent_id == thread.c.public_id)
            .where(child.c.page_id == page_id)
            .where(child.c.status == APPROVED)
        )

        stmt = select(thread).order_by(thread.c.created_at, thread.c.id)
        result = await self.session.execute(stmt)
        return [row_to_comment(row._asdict()) for row in result.fetchall()]

    async def find_ancestry(
        self, comment_id: CommentId, max_hops: int
    ) -> List[Comment]:
        """Walk up the parent chain in one recursive query."""
        ancestors = select(comments_table, literal(0).label("hops")).where(
            comments_table.c.public_id == comment_id
        ).cte("ancestors", recursive=True)
        parent = comments_table.alias("parent")
        ancestors = ancestors.union_all(
            select(parent, (ancestors.c.hops + 1).label("hops"))
            .join(ancestors, parent.c.public_id == ancestors.c.parent_id)
            .where(ancestors.c.hops < max_hops)
        )

        stmt = select(ancestors).order_by(ancestors.c.hops)
        result = await self.session.execute(stmt)

        chain: List[Comment] = []
        seen: set[CommentId] = set()
        for row in result.fetchall():
            comment = row_to_comment(row._asdict())
            if comment.public_id in seen:
                break
            seen.add(comment.public_id)
            chain.append(comment)
        return chain

    async def find_descendants(self, comment_id: CommentId) -> List[Comment]:
        """Find every comment transitively replying to a comment, any status."""
        page_id = (
            select(comments_table.c.page_id)
            .where(comments_table.c.public_id == comment_id)
            .scalar_subquery()
        )
        subtree = (
            select(comments_table)
            .where(comments_table.c.parent_id == comment_id)
            .where(comments_table.c.page_id == page_id)
            .cte("subtree", recursive=True)
        )
        child = comments_table.alias("child")
        subtree = subtree.union(
            select(child)
            .join(subtree, child.c.parent_id == subtree.c.public_id)
            .where(child.c.page_id == page_id)
        )

        stmt = (
            select(subtree)
            .where(subtree.c.public_id != comment_id)
            .order_by(subtree.c.created_at, subtree.c.id)
        )
        result = await self.session.execute(stmt)
        return [row_to_comment(row._asdict()) for row in result.fetchall()]

    async def find_by_status(
        self,
        status: CommentStatus,
        limit: int = 30,
        offset: int = 0,
    ) -> List[Comment]:
        """Find comments in a given status across all pages, oldest first."""
        stmt = (
            select(comments_table)
            .where(comments_table.c.status == status.value)
            .order_by(comments_table.c.created_at, comments_table.c.id)
            .limit(limit)
            .offset(offset)
        )
        result = await self.session.execute(stmt)
        return [row_to_comment(row._asdict()) for row in result.fetchall()]

    async def count_by_status(self, status: CommentStatus) -> int:
        """Count comments in a given status across all pages."""
        stmt = (
            select(func.count())
            .select_from(comments_table)
            .where(comments_table.c.status == status.value)
        )
        result = await self.session.execute(stmt)
        return result.scalar() or 0

    async def save(self, comment: Comment) -> Comment:
        """Save a comment (create or update)."""
        comment_dict = comment_to_dict(comment)
        existing = await self.find_by_id(comment.public_id)

        if existing:
            stmt = (
                update(comments_table)
                .where(comments_table.c.public_id == comment.public_id)
                .values(**comment_dict)
                .returning(comments_table)
            )
        else:
            stmt = comments_table.insert().values(**comment_dict).returning(comments_table)

        result = await self.session.execute(stmt)
        row = result.fetchone()
        await self.session.flush()
        return row_to_comment(row._asdict()) if row else comment

    async def update_status(
        self, comment_id: CommentId, status: CommentStatus
    ) -> Optional[Comment]:
        """Set a comment's status."""
        stmt = (
            update(comments_table)
            .where(comments_table.c.public_id == comment_id)
            .values(status=status.value, updated_at=datetime.now())
            .returning(comments_table)
        )
        result = await self.session.execute(stmt)
        row = result.fetchone()
        if row is None:
            return None

        await self.session.flush()
        return row_to_comment(row._asdict())

    async def delete(self, comment_id: CommentId) -> int:
        """Delete a comment (hard delete)."""
        stmt = comments_table.delete().where(comments_table.c.public_id == comment_id)
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount or 0
