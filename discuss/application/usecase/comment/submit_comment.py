"""Submit comment use case."""

from pydantic import BaseModel

from discuss.application.usecase.base import BaseUseCase
from discuss.config import AttachmentSettings
from discuss.domain.service import CommentService
from discuss.domain.value import CommentId, PageId, Principal, UploadedFile

from .response import CommentResponse


class SubmitCommentRequest(BaseModel):
    """Submit comment request."""

    page_id: str
    body: str | None = None
    author: str | None = None
    parent_id: str | None = None
    website: str | None = None  # Honeypot, left empty by humans
    attachments: list[UploadedFile] = []
    principal: Principal
    session_tokens: dict[str, str] = {}


class SubmitCommentResponse(BaseModel):
    """Submit comment response."""

    comment: CommentResponse
    session_tokens: dict[str, str]  # Caller's map, now holding the new token


class SubmitCommentUseCase(BaseUseCase):
    """Use case for posting a new comment or reply."""

    def __init__(
        self,
        comment_service: CommentService,
        attachment_settings: AttachmentSettings,
    ) -> None:
        """Initialize submit comment use case.

        Args:
            comment_service: Comment service
            attachment_settings: Attachment settings (for public URLs)
        """
        self.comment_service = comment_service
        self.attachment_settings = attachment_settings

    async def execute(self, request: SubmitCommentRequest) -> SubmitCommentResponse:
        """Execute submit comment flow.

        Args:
            request: Submission with form fields and stored uploads

        Returns:
            Created comment and the updated session token map

        Raises:
            CommentValidationError: With every problem found
        """
        parent_id = (request.parent_id or "").strip()
        comment, attachments = await self.comment_service.submit(
            page_id=PageId(request.page_id),
            principal=request.principal,
            body=request.body,
            author=request.author,
            parent_id=CommentId(parent_id) if parent_id else None,
            files=request.attachments,
            honeypot=request.website,
        )

        tokens = dict(request.session_tokens)
        if comment.possession_token:
            tokens[str(comment.public_id)] = comment.possession_token

        return SubmitCommentResponse(
            comment=CommentResponse.from_domain(
                comment, attachments, self.attachment_settings.public_prefix
            ),
            session_tokens=tokens,
        )
