"""Unit tests for ThreadService."""

from datetime import datetime

import pytest

from discuss.domain.model.attachment import Attachment
from discuss.domain.repository import AttachmentRepository, CommentRepository
from discuss.domain.service import ThreadService
from discuss.domain.value import AttachmentId, CommentId, CommentStatus, PageId
from tests.conftest import make_comment
from tests.harness import create_env_fixture

# Unit test fixture - everything mocked, no docker needed
unit_env = create_env_fixture()


async def _save_all(repo: CommentRepository, *comments) -> None:
    for comment in comments:
        await repo.save(comment)


def _ids(nodes) -> list[str]:
    return [str(node.public_id) for node in nodes]


class TestFetchThread:
    """Tests for fetch_thread method."""

    @pytest.mark.asyncio
    async def test_unknown_page_returns_empty_thread(self, unit_env):
        """A page without comments yields no roots and a zero total."""
        thread_service = await unit_env.get(ThreadService)

        thread = await thread_service.fetch_thread(PageId("nothing-here"))

        assert thread.roots == []
        assert thread.total_root_count == 0

    @pytest.mark.asyncio
    async def test_nests_replies_with_depth_and_creation_order(self, unit_env):
        """Replies hang below their parent, oldest first, with derived depth."""
        # Arrange
        thread_service = await unit_env.get(ThreadService)
        repo = await unit_env.get(CommentRepository)
        await _save_all(
            repo,
            make_comment("r1"),
            make_comment("a", parent_id="r1"),
            make_comment("b", parent_id="r1"),
            make_comment("a1", parent_id="a"),
            make_comment("a1x", parent_id="a1"),
            make_comment("r2"),
        )

        # Act
        thread = await thread_service.fetch_thread(PageId("page-1"))

        # Assert
        assert _ids(thread.roots) == ["r1", "r2"]
        r1 = thread.roots[0]
        assert r1.depth == 0
        assert _ids(r1.children) == ["a", "b"]
        a = r1.children[0]
        assert a.depth == 1
        assert a.parent_id == CommentId("r1")
        assert _ids(a.children) == ["a1"]
        assert a.children[0].depth == 2
        assert a.children[0].children[0].depth == 3
        assert thread.total_root_count == 2

    @pytest.mark.asyncio
    async def test_only_approved_comments_are_visible(self, unit_env):
        """Pending and rejected comments, and everything below them, stay hidden."""
        # Arrange
        thread_service = await unit_env.get(ThreadService)
        repo = await unit_env.get(CommentRepository)
        await _save_all(
            repo,
            make_comment("root"),
            make_comment("pending", parent_id="root", status=CommentStatus.PENDING),
            make_comment("under-pending", parent_id="pending"),
            make_comment("rejected-root", status=CommentStatus.REJECTED),
            make_comment("visible", parent_id="root"),
        )

        # Act
        thread = await thread_service.fetch_thread(PageId("page-1"))

        # Assert
        assert _ids(thread.roots) == ["root"]
        assert _ids(thread.roots[0].children) == ["visible"]
        assert thread.total_root_count == 1
        every_id = {str(c.public_id) for c in thread.comments()}
        assert every_id == {"root", "visible"}

    @pytest.mark.asyncio
    async def test_other_pages_are_not_mixed_in(self, unit_env):
        """Only comments of the requested page are returned."""
        thread_service = await unit_env.get(ThreadService)
        repo = await unit_env.get(CommentRepository)
        await _save_all(
            repo,
            make_comment("here"),
            make_comment("elsewhere", page_id="page-2"),
        )

        thread = await thread_service.fetch_thread(PageId("page-1"))

        assert _ids(thread.roots) == ["here"]

    @pytest.mark.asyncio
    async def test_pagination_applies_to_root_threads(self, unit_env):
        """The window selects root threads and keeps their whole reply tree."""
        # Arrange
        thread_service = await unit_env.get(ThreadService)
        repo = await unit_env.get(CommentRepository)
        await _save_all(
            repo,
            make_comment("r1"),
            make_comment("r2"),
            make_comment("r2-reply", parent_id="r2"),
            make_comment("r3"),
        )

        # Act
        thread = await thread_service.fetch_thread(
            PageId("page-1"), limit=2, offset=1
        )

        # Assert
        assert _ids(thread.roots) == ["r2", "r3"]
        assert _ids(thread.roots[0].children) == ["r2-reply"]
        assert thread.total_root_count == 3

    @pytest.mark.asyncio
    async def test_offset_past_the_end_keeps_total(self, unit_env):
        """An empty window still reports how many roots exist."""
        thread_service = await unit_env.get(ThreadService)
        repo = await unit_env.get(CommentRepository)
        await _save_all(repo, make_comment("r1"), make_comment("r2"))

        thread = await thread_service.fetch_thread(
            PageId("page-1"), limit=5, offset=10
        )

        assert thread.roots == []
        assert thread.total_root_count == 2

    @pytest.mark.asyncio
    async def test_non_positive_limit_and_negative_offset_return_everything(
        self, unit_env
    ):
        """Limit 0 means no limit and a negative offset counts as 0."""
        thread_service = await unit_env.get(ThreadService)
        repo = await unit_env.get(CommentRepository)
        await _save_all(repo, make_comment("r1"), make_comment("r2"))

        thread = await thread_service.fetch_thread(
            PageId("page-1"), limit=0, offset=-3
        )

        assert _ids(thread.roots) == ["r1", "r2"]

    @pytest.mark.asyncio
    async def test_cyclic_rows_do_not_break_reads(self, unit_env):
        """Comments caught in a parent cycle are left out, the rest renders."""
        # Arrange
        thread_service = await unit_env.get(ThreadService)
        repo = await unit_env.get(CommentRepository)
        await _save_all(
            repo,
            make_comment("root"),
            make_comment("reply", parent_id="root"),
            make_comment("loop-a", parent_id="loop-b"),
            make_comment("loop-b", parent_id="loop-a"),
            make_comment("orphan", parent_id="missing"),
        )

        # Act
        thread = await thread_service.fetch_thread(PageId("page-1"))

        # Assert
        assert _ids(thread.roots) == ["root"]
        assert _ids(thread.roots[0].children) == ["reply"]

    @pytest.mark.asyncio
    async def test_attachments_are_attached_to_their_nodes(self, unit_env):
        """Each node carries its own attachments, fetched in one batch."""
        # Arrange
        thread_service = await unit_env.get(ThreadService)
        repo = await unit_env.get(CommentRepository)
        attachment_repo = await unit_env.get(AttachmentRepository)
        await _save_all(
            repo, make_comment("root"), make_comment("reply", parent_id="root")
        )
        await attachment_repo.save_all(
            [
                Attachment(
                    public_id=AttachmentId("att-1"),
                    comment_id=CommentId("reply"),
                    relative_path="uploads/comments/1-1.png",
                    mime_type="image/png",
                    size_bytes=10,
                    original_name="photo.png",
                    created_at=datetime(2024, 6, 1),
                )
            ]
        )

        # Act
        thread = await thread_service.fetch_thread(PageId("page-1"))

        # Assert
        root = thread.roots[0]
        assert root.attachments == []
        assert [a.public_id for a in root.children[0].attachments] == ["att-1"]

    @pytest.mark.asyncio
    async def test_paging_one_root_at_a_time_matches_full_fetch(self, unit_env):
        """Concatenating limit=1 windows yields the unpaginated root order."""
        # Arrange
        thread_service = await unit_env.get(ThreadService)
        repo = await unit_env.get(CommentRepository)
        await _save_all(
            repo,
            make_comment("r1"),
            make_comment("r1-reply", parent_id="r1"),
            make_comment("r2"),
            make_comment("r3"),
        )
        full = await thread_service.fetch_thread(PageId("page-1"))

        # Act
        paged = []
        for offset in range(full.total_root_count + 1):
            window = await thread_service.fetch_thread(
                PageId("page-1"), limit=1, offset=offset
            )
            paged.extend(window.roots)

        # Assert
        assert _ids(paged) == _ids(full.roots) == ["r1", "r2", "r3"]
