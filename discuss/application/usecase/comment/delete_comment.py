"""Delete comment use case."""

from typing import Literal

from pydantic import BaseModel

from discuss.application.usecase.base import BaseUseCase
from discuss.domain.service import CommentService
from discuss.domain.value import CommentId, Principal


class DeleteCommentRequest(BaseModel):
    """Delete comment request."""

    comment_id: str
    principal: Principal
    session_tokens: dict[str, str] = {}


class DeleteCommentResponse(BaseModel):
    """Delete comment response."""

    outcome: Literal["deleted", "not_found"]
    session_tokens: dict[str, str] | None  # Set when the map changed


class DeleteCommentUseCase(BaseUseCase):
    """Use case for deleting a comment together with its replies."""

    def __init__(self, comment_service: CommentService) -> None:
        """Initialize delete comment use case.

        Args:
            comment_service: Comment service
        """
        self.comment_service = comment_service

    async def execute(self, request: DeleteCommentRequest) -> DeleteCommentResponse:
        """Execute delete comment flow.

        A comment that is already gone is reported as ``not_found``, not
        raised.

        Raises:
            NotAuthorizedError: If the caller may not delete it
        """
        tokens = dict(request.session_tokens)
        deleted = await self.comment_service.delete(
            comment_id=CommentId(request.comment_id),
            principal=request.principal,
            session_tokens=tokens,
        )
        tokens.pop(request.comment_id, None)

        return DeleteCommentResponse(
            outcome="deleted" if deleted else "not_found",
            session_tokens=tokens if tokens != request.session_tokens else None,
        )
