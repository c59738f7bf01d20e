"""Unit tests for CommentService."""

import pytest

from discuss.domain.error import (
    CommentValidationError,
    InvalidTransitionError,
    NotAuthorizedError,
    NotFoundError,
)
from discuss.domain.repository import AttachmentRepository, CommentRepository
from discuss.domain.service import AttachmentService, CommentService
from discuss.domain.service.attachment_service import UNSUPPORTED_TYPE
from discuss.domain.service.comment_service import BODY_REQUIRED, INVALID_SUBMISSION
from discuss.domain.service.reparent_service import (
    PARENT_IS_DESCENDANT,
    PARENT_NOT_FOUND,
)
from discuss.domain.storage import BlobStore
from discuss.domain.value import (
    Capability,
    CommentId,
    CommentStatus,
    ModerationDecision,
    PageId,
    Principal,
)
from tests.conftest import make_comment
from tests.harness import create_env_fixture

# Unit test fixture - everything mocked, no docker needed
unit_env = create_env_fixture()

PAGE = PageId("page-1")
MODERATOR = Principal(principal_id="mod-1", is_moderator=True)


class TestSubmit:
    """Tests for submit method."""

    @pytest.mark.asyncio
    async def test_anonymous_comment_waits_for_moderation(self, unit_env):
        """Anonymous submissions are pending and get a possession token."""
        # Arrange
        comment_service = await unit_env.get(CommentService)
        comment_repo = await unit_env.get(CommentRepository)

        # Act
        comment, attachments = await comment_service.submit(
            page_id=PAGE,
            principal=Principal.anonymous("203.0.113.9"),
            body="  Great article!  ",
            author="  Ada  ",
        )

        # Assert
        assert comment.status == CommentStatus.PENDING
        assert comment.body == "Great article!"
        assert comment.author == "Ada"
        assert comment.submitter_address == "203.0.113.9"
        assert comment.possession_token
        assert comment.is_privileged_author is False
        assert attachments == []
        assert await comment_repo.find_by_id(comment.public_id) is not None

    @pytest.mark.asyncio
    async def test_privileged_submitter_is_approved_immediately(self, unit_env):
        comment_service = await unit_env.get(CommentService)

        comment, _ = await comment_service.submit(
            page_id=PAGE,
            principal=Principal(principal_id="writer", is_contributor=True),
            body="Thanks for reading",
        )

        assert comment.status == CommentStatus.APPROVED
        assert comment.is_privileged_author is False

    @pytest.mark.asyncio
    async def test_admin_comments_are_flagged(self, unit_env):
        comment_service = await unit_env.get(CommentService)

        comment, _ = await comment_service.submit(
            page_id=PAGE, principal=Principal(is_admin=True), body="Pinned note"
        )

        assert comment.is_privileged_author is True

    @pytest.mark.asyncio
    async def test_author_is_truncated_and_blank_author_dropped(self, unit_env):
        comment_service = await unit_env.get(CommentService)

        long_name, _ = await comment_service.submit(
            page_id=PAGE, principal=Principal.anonymous(), body="x", author="n" * 120
        )
        blank_name, _ = await comment_service.submit(
            page_id=PAGE, principal=Principal.anonymous(), body="x", author="   "
        )

        assert long_name.author == "n" * 80
        assert blank_name.author is None

    @pytest.mark.asyncio
    async def test_collects_every_problem_and_discards_uploads(self, unit_env):
        """Nothing is stored when any check fails, and files are removed."""
        # Arrange
        comment_service = await unit_env.get(CommentService)
        attachment_service = await unit_env.get(AttachmentService)
        comment_repo = await unit_env.get(CommentRepository)
        blob_store = await unit_env.get(BlobStore)
        upload = await attachment_service.store_upload(
            "tool.exe", "application/x-msdownload", b"MZ"
        )

        # Act
        with pytest.raises(CommentValidationError) as exc_info:
            await comment_service.submit(
                page_id=PAGE,
                principal=Principal.anonymous(),
                body="   ",
                parent_id=CommentId("ghost"),
                files=[upload],
                honeypot="http://spam.example",
            )

        # Assert
        assert exc_info.value.errors == [
            BODY_REQUIRED,
            INVALID_SUBMISSION,
            PARENT_NOT_FOUND,
            UNSUPPORTED_TYPE,
        ]
        assert not await blob_store.exists(upload.stored_name)
        assert await comment_repo.count_by_status(CommentStatus.PENDING) == 0

    @pytest.mark.asyncio
    async def test_body_length_is_capped(self, unit_env):
        comment_service = await unit_env.get(CommentService)

        with pytest.raises(CommentValidationError) as exc_info:
            await comment_service.submit(
                page_id=PAGE, principal=Principal.anonymous(), body="a" * 2001
            )

        assert exc_info.value.errors == [
            "The message is too long (2000 characters max)."
        ]

    @pytest.mark.asyncio
    async def test_valid_attachments_are_saved(self, unit_env):
        comment_service = await unit_env.get(CommentService)
        attachment_service = await unit_env.get(AttachmentService)
        upload = await attachment_service.store_upload("a.png", "image/png", b"png")

        comment, attachments = await comment_service.submit(
            page_id=PAGE, principal=Principal.anonymous(), body="Look", files=[upload]
        )

        assert len(attachments) == 1
        assert attachments[0].comment_id == comment.public_id
        assert attachments[0].original_name == "a.png"


class TestEdit:
    """Tests for edit method."""

    @pytest.mark.asyncio
    async def test_owner_edit_demotes_to_pending(self, unit_env):
        # Arrange
        comment_service = await unit_env.get(CommentService)
        comment_repo = await unit_env.get(CommentRepository)
        await comment_repo.save(make_comment("c1", possession_token="t1"))

        # Act
        updated = await comment_service.edit(
            comment_id=CommentId("c1"),
            principal=Principal.anonymous(),
            session_tokens={"c1": "t1"},
            body=" Fixed typo ",
            author="Ada",
        )

        # Assert
        assert updated.status == CommentStatus.PENDING
        assert updated.body == "Fixed typo"
        assert updated.updated_at is not None
        assert updated.possession_token == "t1"

    @pytest.mark.asyncio
    async def test_edit_without_token_is_refused(self, unit_env):
        comment_service = await unit_env.get(CommentService)
        comment_repo = await unit_env.get(CommentRepository)
        await comment_repo.save(make_comment("c1", possession_token="t1"))

        with pytest.raises(NotAuthorizedError):
            await comment_service.edit(
                comment_id=CommentId("c1"),
                principal=Principal.anonymous(),
                session_tokens={},
                body="Hijack",
                author=None,
            )

    @pytest.mark.asyncio
    async def test_edit_missing_comment(self, unit_env):
        comment_service = await unit_env.get(CommentService)

        with pytest.raises(NotFoundError):
            await comment_service.edit(
                comment_id=CommentId("ghost"),
                principal=MODERATOR,
                session_tokens={},
                body="x",
                author=None,
            )

    @pytest.mark.asyncio
    async def test_parent_is_kept_unless_change_requested(self, unit_env):
        comment_service = await unit_env.get(CommentService)
        comment_repo = await unit_env.get(CommentRepository)
        await comment_repo.save(make_comment("root"))
        await comment_repo.save(make_comment("reply", parent_id="root"))

        updated = await comment_service.edit(
            comment_id=CommentId("reply"),
            principal=MODERATOR,
            session_tokens={},
            body="Edited",
            author=None,
        )

        assert updated.parent_id == CommentId("root")

    @pytest.mark.asyncio
    async def test_moving_to_root_and_bad_parent(self, unit_env):
        """A parent change is validated and merged with field errors."""
        # Arrange
        comment_service = await unit_env.get(CommentService)
        comment_repo = await unit_env.get(CommentRepository)
        await comment_repo.save(make_comment("root"))
        await comment_repo.save(make_comment("reply", parent_id="root"))

        # Act
        moved = await comment_service.edit(
            comment_id=CommentId("reply"),
            principal=MODERATOR,
            session_tokens={},
            body="Now top level",
            author=None,
            parent_id=None,
            change_parent=True,
        )
        with pytest.raises(CommentValidationError) as exc_info:
            await comment_service.edit(
                comment_id=CommentId("reply"),
                principal=MODERATOR,
                session_tokens={},
                body="",
                author=None,
                parent_id=CommentId("ghost"),
                change_parent=True,
            )

        # Assert
        assert moved.parent_id is None
        assert exc_info.value.errors == [BODY_REQUIRED, PARENT_NOT_FOUND]

    @pytest.mark.asyncio
    async def test_moving_below_own_grandchild_is_rejected(self, unit_env):
        """A rejected reparent leaves the stored parent untouched."""
        # Arrange
        comment_service = await unit_env.get(CommentService)
        comment_repo = await unit_env.get(CommentRepository)
        await comment_repo.save(make_comment("r1"))
        await comment_repo.save(make_comment("c1", parent_id="r1"))
        await comment_repo.save(make_comment("g1", parent_id="c1"))

        # Act
        with pytest.raises(CommentValidationError) as exc_info:
            await comment_service.edit(
                comment_id=CommentId("c1"),
                principal=MODERATOR,
                session_tokens={},
                body="Move me",
                author=None,
                parent_id=CommentId("g1"),
                change_parent=True,
            )

        # Assert
        assert exc_info.value.errors == [PARENT_IS_DESCENDANT]
        stored = await comment_repo.find_by_id(CommentId("c1"))
        assert stored.parent_id == CommentId("r1")
        assert stored.status == CommentStatus.APPROVED


class TestDelete:
    """Tests for delete method."""

    @pytest.mark.asyncio
    async def test_delete_removes_subtree_and_attachments(self, unit_env):
        # Arrange
        comment_service = await unit_env.get(CommentService)
        attachment_service = await unit_env.get(AttachmentService)
        comment_repo = await unit_env.get(CommentRepository)
        attachment_repo = await unit_env.get(AttachmentRepository)
        blob_store = await unit_env.get(BlobStore)

        await comment_repo.save(make_comment("root", possession_token="t"))
        await comment_repo.save(make_comment("reply", parent_id="root"))
        await comment_repo.save(
            make_comment("deep", parent_id="reply", status=CommentStatus.PENDING)
        )
        await comment_repo.save(make_comment("sibling"))
        upload = await attachment_service.store_upload("a.png", "image/png", b"1")
        await attachment_service.attach(CommentId("deep"), [upload])

        # Act
        deleted = await comment_service.delete(
            CommentId("root"), Principal.anonymous(), {"root": "t"}
        )

        # Assert
        assert deleted is True
        for gone in ("root", "reply", "deep"):
            assert await comment_repo.find_by_id(CommentId(gone)) is None
        assert await comment_repo.find_by_id(CommentId("sibling")) is not None
        assert await attachment_repo.find_by_comments([CommentId("deep")]) == []
        assert not await blob_store.exists(upload.stored_name)

    @pytest.mark.asyncio
    async def test_delete_missing_comment_reports_false(self, unit_env):
        comment_service = await unit_env.get(CommentService)

        deleted = await comment_service.delete(
            CommentId("ghost"), Principal.anonymous(), {}
        )

        assert deleted is False

    @pytest.mark.asyncio
    async def test_delete_by_stranger_is_refused(self, unit_env):
        comment_service = await unit_env.get(CommentService)
        comment_repo = await unit_env.get(CommentRepository)
        await comment_repo.save(make_comment("c1", possession_token="t1"))

        with pytest.raises(NotAuthorizedError):
            await comment_service.delete(
                CommentId("c1"), Principal.anonymous(), {"c1": "wrong"}
            )
        assert await comment_repo.find_by_id(CommentId("c1")) is not None


class TestModerate:
    """Tests for moderate method."""

    @pytest.mark.asyncio
    async def test_pending_comment_can_be_approved(self, unit_env):
        comment_service = await unit_env.get(CommentService)
        comment_repo = await unit_env.get(CommentRepository)
        await comment_repo.save(make_comment("c1", status=CommentStatus.PENDING))

        comment, changed = await comment_service.moderate(
            CommentId("c1"), ModerationDecision.APPROVE, MODERATOR
        )

        assert changed is True
        assert comment.status == CommentStatus.APPROVED

    @pytest.mark.asyncio
    async def test_repeating_a_decision_is_a_no_op(self, unit_env):
        comment_service = await unit_env.get(CommentService)
        comment_repo = await unit_env.get(CommentRepository)
        await comment_repo.save(make_comment("c1", status=CommentStatus.REJECTED))

        comment, changed = await comment_service.moderate(
            CommentId("c1"), ModerationDecision.REJECT, MODERATOR
        )

        assert changed is False
        assert comment.status == CommentStatus.REJECTED

    @pytest.mark.asyncio
    async def test_reversing_a_decision_is_refused(self, unit_env):
        comment_service = await unit_env.get(CommentService)
        comment_repo = await unit_env.get(CommentRepository)
        await comment_repo.save(make_comment("c1", status=CommentStatus.APPROVED))

        with pytest.raises(InvalidTransitionError) as exc_info:
            await comment_service.moderate(
                CommentId("c1"), ModerationDecision.REJECT, MODERATOR
            )

        assert exc_info.value.current == "approved"

    @pytest.mark.asyncio
    async def test_capability_is_decision_specific(self, unit_env):
        """An approve-only capability cannot reject."""
        # Arrange
        comment_service = await unit_env.get(CommentService)
        comment_repo = await unit_env.get(CommentRepository)
        await comment_repo.save(make_comment("c1", status=CommentStatus.PENDING))
        approver = Principal(
            principal_id="approver",
            capabilities=frozenset({Capability.APPROVE_COMMENTS.value}),
        )

        # Act / Assert
        with pytest.raises(NotAuthorizedError):
            await comment_service.moderate(
                CommentId("c1"), ModerationDecision.REJECT, approver
            )
        _, changed = await comment_service.moderate(
            CommentId("c1"), ModerationDecision.APPROVE, approver
        )
        assert changed is True

    @pytest.mark.asyncio
    async def test_moderating_missing_comment(self, unit_env):
        comment_service = await unit_env.get(CommentService)

        with pytest.raises(NotFoundError):
            await comment_service.moderate(
                CommentId("ghost"), ModerationDecision.APPROVE, MODERATOR
            )


class TestListPending:
    """Tests for list_pending method."""

    @pytest.mark.asyncio
    async def test_lists_oldest_first_with_total(self, unit_env):
        comment_service = await unit_env.get(CommentService)
        comment_repo = await unit_env.get(CommentRepository)
        for comment_id in ("p1", "p2", "p3"):
            await comment_repo.save(
                make_comment(comment_id, status=CommentStatus.PENDING)
            )
        await comment_repo.save(make_comment("done"))

        comments, total = await comment_service.list_pending(
            MODERATOR, limit=2, offset=1
        )

        assert [c.public_id for c in comments] == ["p2", "p3"]
        assert total == 3

    @pytest.mark.asyncio
    async def test_readers_cannot_see_the_queue(self, unit_env):
        comment_service = await unit_env.get(CommentService)

        with pytest.raises(NotAuthorizedError):
            await comment_service.list_pending(Principal.anonymous())
