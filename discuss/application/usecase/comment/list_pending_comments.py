"""List pending comments use case."""

from pydantic import BaseModel, Field

from discuss.application.usecase.base import BaseUseCase
from discuss.config import AttachmentSettings
from discuss.domain.repository import AttachmentRepository
from discuss.domain.service import CommentService
from discuss.domain.value import Principal

from .response import CommentResponse


class ListPendingCommentsRequest(BaseModel):
    """List pending comments request."""

    principal: Principal
    limit: int = Field(default=30, ge=1, le=100)
    offset: int = Field(default=0, ge=0)


class ListPendingCommentsResponse(BaseModel):
    """List pending comments response."""

    comments: list[CommentResponse]
    total: int
    limit: int
    offset: int


class ListPendingCommentsUseCase(BaseUseCase):
    """Use case for reading the moderation queue, oldest first."""

    def __init__(
        self,
        comment_service: CommentService,
        attachment_repository: AttachmentRepository,
        attachment_settings: AttachmentSettings,
    ) -> None:
        """Initialize list pending comments use case.

        Args:
            comment_service: Comment service
            attachment_repository: Attachment repository
            attachment_settings: Attachment settings (for public URLs)
        """
        self.comment_service = comment_service
        self.attachment_repository = attachment_repository
        self.attachment_settings = attachment_settings

    async def execute(
        self, request: ListPendingCommentsRequest
    ) -> ListPendingCommentsResponse:
        """Execute list pending comments flow.

        Raises:
            NotAuthorizedError: If the caller is not a moderator
        """
        comments, total = await self.comment_service.list_pending(
            request.principal, limit=request.limit, offset=request.offset
        )

        attachments = await self.attachment_repository.find_by_comments(
            [c.public_id for c in comments]
        )
        by_comment: dict[str, list] = {}
        for attachment in attachments:
            by_comment.setdefault(attachment.comment_id, []).append(attachment)

        prefix = self.attachment_settings.public_prefix
        return ListPendingCommentsResponse(
            comments=[
                CommentResponse.from_domain(c, by_comment.get(c.public_id), prefix)
                for c in comments
            ],
            total=total,
            limit=request.limit,
            offset=request.offset,
        )
