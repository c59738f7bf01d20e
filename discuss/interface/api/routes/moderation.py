"""Moderation routes."""

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Cookie, Query, Request

from discuss.application.usecase.comment import (
    ListPendingCommentsRequest,
    ListPendingCommentsResponse,
    ListPendingCommentsUseCase,
    ModerateCommentRequest,
    ModerateCommentResponse,
    ModerateCommentUseCase,
)
from discuss.domain.service import SessionService
from discuss.domain.value import ModerationDecision
from discuss.interface.api.session import client_address

router = APIRouter(
    prefix="/moderation/comments", tags=["moderation"], route_class=DishkaRoute
)


@router.get("/pending", response_model=ListPendingCommentsResponse)
async def list_pending_comments(
    request: Request,
    list_pending_comments_use_case: FromDishka[ListPendingCommentsUseCase],
    session_service: FromDishka[SessionService],
    limit: int = Query(default=30, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    auth_token: str | None = Cookie(default=None),
) -> ListPendingCommentsResponse:
    """List comments waiting for moderation, oldest first.

    Requires a moderation capability.
    """
    return await list_pending_comments_use_case.execute(
        ListPendingCommentsRequest(
            principal=session_service.resolve_principal(
                auth_token, client_address(request)
            ),
            limit=limit,
            offset=offset,
        )
    )


@router.post("/{comment_id}/{decision}", response_model=ModerateCommentResponse)
async def moderate_comment(
    comment_id: str,
    decision: ModerationDecision,
    request: Request,
    moderate_comment_use_case: FromDishka[ModerateCommentUseCase],
    session_service: FromDishka[SessionService],
    auth_token: str | None = Cookie(default=None),
) -> ModerateCommentResponse:
    """Approve or reject a pending comment.

    Repeating a decision already in effect succeeds with outcome
    ``unchanged``; reversing a decision is refused with 409.
    """
    return await moderate_comment_use_case.execute(
        ModerateCommentRequest(
            comment_id=comment_id,
            decision=decision,
            principal=session_service.resolve_principal(
                auth_token, client_address(request)
            ),
        )
    )
