"""Edit comment use case."""

from pydantic import BaseModel

from discuss.application.usecase.base import BaseUseCase
from discuss.config import AttachmentSettings
from discuss.domain.repository import AttachmentRepository
from discuss.domain.service import CommentService
from discuss.domain.value import CommentId, Principal

from .response import CommentResponse


class EditCommentRequest(BaseModel):
    """Edit comment request.

    Leaving ``parent_id`` out keeps the current parent; sending it as None
    moves the comment to the root of its page. Leaving ``author`` out keeps
    the current display name.
    """

    comment_id: str
    principal: Principal
    session_tokens: dict[str, str] = {}
    body: str | None = None
    author: str | None = None
    parent_id: str | None = None


class EditCommentResponse(BaseModel):
    """Edit comment response."""

    comment: CommentResponse
    session_tokens: dict[str, str] | None  # Set when the map changed


class EditCommentUseCase(BaseUseCase):
    """Use case for editing a comment, which sends it back to moderation."""

    def __init__(
        self,
        comment_service: CommentService,
        attachment_repository: AttachmentRepository,
        attachment_settings: AttachmentSettings,
    ) -> None:
        """Initialize edit comment use case.

        Args:
            comment_service: Comment service
            attachment_repository: Attachment repository
            attachment_settings: Attachment settings (for public URLs)
        """
        self.comment_service = comment_service
        self.attachment_repository = attachment_repository
        self.attachment_settings = attachment_settings

    async def execute(self, request: EditCommentRequest) -> EditCommentResponse:
        """Execute edit comment flow.

        Args:
            request: Edit request

        Returns:
            Updated comment, now pending

        Raises:
            NotFoundError: If the comment does not exist
            NotAuthorizedError: If the caller may not edit it
            CommentValidationError: With every field and parent problem
        """
        change_parent = "parent_id" in request.model_fields_set
        parent_id = (request.parent_id or "").strip()

        tokens = dict(request.session_tokens)
        comment = await self.comment_service.edit(
            comment_id=CommentId(request.comment_id),
            principal=request.principal,
            session_tokens=tokens,
            body=request.body,
            author=request.author,
            parent_id=CommentId(parent_id) if parent_id else None,
            change_parent=change_parent,
            change_author="author" in request.model_fields_set,
        )
        attachments = await self.attachment_repository.find_by_comments(
            [comment.public_id]
        )

        return EditCommentResponse(
            comment=CommentResponse.from_domain(
                comment, attachments, self.attachment_settings.public_prefix
            ),
            session_tokens=tokens if tokens != request.session_tokens else None,
        )
