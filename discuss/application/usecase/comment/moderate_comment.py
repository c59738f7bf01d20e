"""Moderate comment use case."""

from typing import Literal

from pydantic import BaseModel

from discuss.application.usecase.base import BaseUseCase
from discuss.config import AttachmentSettings
from discuss.domain.repository import AttachmentRepository
from discuss.domain.service import CommentService
from discuss.domain.value import CommentId, ModerationDecision, Principal

from .response import CommentResponse


class ModerateCommentRequest(BaseModel):
    """Moderate comment request."""

    comment_id: str
    decision: ModerationDecision
    principal: Principal


class ModerateCommentResponse(BaseModel):
    """Moderate comment response."""

    outcome: Literal["changed", "unchanged"]
    comment: CommentResponse


class ModerateCommentUseCase(BaseUseCase):
    """Use case for approving or rejecting a pending comment."""

    def __init__(
        self,
        comment_service: CommentService,
        attachment_repository: AttachmentRepository,
        attachment_settings: AttachmentSettings,
    ) -> None:
        """Initialize moderate comment use case.

        Args:
            comment_service: Comment service
            attachment_repository: Attachment repository
            attachment_settings: Attachment settings (for public URLs)
        """
        self.comment_service = comment_service
        self.attachment_repository = attachment_repository
        self.attachment_settings = attachment_settings

    async def execute(
        self, request: ModerateCommentRequest
    ) -> ModerateCommentResponse:
        """Execute moderation flow.

        Raises:
            NotAuthorizedError: If the caller lacks the capability
            NotFoundError: If the comment does not exist
            InvalidTransitionError: If the comment was decided the other way
        """
        comment, changed = await self.comment_service.moderate(
            comment_id=CommentId(request.comment_id),
            decision=request.decision,
            principal=request.principal,
        )
        attachments = await self.attachment_repository.find_by_comments(
            [comment.public_id]
        )
        return ModerateCommentResponse(
            outcome="changed" if changed else "unchanged",
            comment=CommentResponse.from_domain(
                comment, attachments, self.attachment_settings.public_prefix
            ),
        )
