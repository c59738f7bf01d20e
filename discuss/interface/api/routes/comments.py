"""Comment routes."""

import logfire
from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import (
    APIRouter,
    Cookie,
    File,
    Form,
    Query,
    Request,
    Response,
    UploadFile,
    status,
)
from pydantic import BaseModel

from discuss.application.usecase.comment import (
    CommentResponse,
    DeleteCommentRequest,
    DeleteCommentUseCase,
    EditCommentRequest,
    EditCommentUseCase,
    GetThreadRequest,
    GetThreadUseCase,
    SubmitCommentRequest,
    SubmitCommentUseCase,
    ThreadNodeResponse,
)
from discuss.config import Settings
from discuss.domain.error import CommentValidationError
from discuss.domain.service import AttachmentService, SessionService
from discuss.domain.service.attachment_service import UPLOAD_FAILED
from discuss.domain.value import UploadedFile
from discuss.interface.api.session import client_address, store_session_tokens

router = APIRouter(tags=["comments"], route_class=DishkaRoute)


class ThreadAPIResponse(BaseModel):
    """One window of root threads."""

    roots: list[ThreadNodeResponse]
    total_root_count: int


@router.get("/pages/{page_id}/comments", response_model=ThreadAPIResponse)
async def get_thread(
    page_id: str,
    response: Response,
    get_thread_use_case: FromDishka[GetThreadUseCase],
    session_service: FromDishka[SessionService],
    settings: FromDishka[Settings],
    limit: int | None = Query(default=None),
    offset: int = Query(default=0),
    comment_tokens: str | None = Cookie(default=None),
) -> ThreadAPIResponse:
    """Get approved comments for a page as nested threads.

    Pagination applies to root threads; each root comes with its whole
    approved reply tree.

    Args:
        page_id: Page ID
        response: Outgoing response (for the token cookie)
        get_thread_use_case: Get thread use case from DI
        session_service: Session service (injected)
        settings: Application settings (injected)
        limit: Maximum number of root threads
        offset: Number of root threads to skip
        comment_tokens: Signed possession token map from cookie

    Returns:
        Root threads and total approved root count
    """
    result = await get_thread_use_case.execute(
        GetThreadRequest(
            page_id=page_id,
            limit=limit,
            offset=offset,
            session_tokens=session_service.load_tokens(comment_tokens),
        )
    )
    if result.session_tokens is not None:
        store_session_tokens(response, result.session_tokens, session_service, settings)
    return ThreadAPIResponse(
        roots=result.roots, total_root_count=result.total_root_count
    )


@router.post(
    "/pages/{page_id}/comments",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def submit_comment(
    page_id: str,
    request: Request,
    response: Response,
    submit_comment_use_case: FromDishka[SubmitCommentUseCase],
    attachment_service: FromDishka[AttachmentService],
    session_service: FromDishka[SessionService],
    settings: FromDishka[Settings],
    body: str | None = Form(default=None),
    author: str | None = Form(default=None),
    parent_id: str | None = Form(default=None),
    website: str | None = Form(default=None),
    attachments: list[UploadFile] | None = File(default=None),
    auth_token: str | None = Cookie(default=None),
    comment_tokens: str | None = Cookie(default=None),
) -> CommentResponse:
    """Post a comment or a reply.

    Anonymous submissions are allowed and wait for moderation. The
    possession token of the new comment is added to the caller's token
    cookie so they can edit or delete it later.

    Args:
        page_id: Page ID
        request: Incoming request (for the caller address)
        response: Outgoing response (for the token cookie)
        submit_comment_use_case: Submit comment use case from DI
        attachment_service: Attachment service (injected)
        session_service: Session service (injected)
        settings: Application settings (injected)
        body: Message
        author: Display name
        parent_id: Comment being replied to
        website: Honeypot field
        attachments: Uploaded files
        auth_token: Principal token from cookie
        comment_tokens: Signed possession token map from cookie

    Returns:
        Created comment

    Raises:
        CommentValidationError: Rendered as 422 with every problem found
    """
    principal = session_service.resolve_principal(auth_token, client_address(request))

    # Read one byte past the cap so oversized files are still detected
    read_limit = settings.attachments.max_size_bytes + 1
    stored: list[UploadedFile] = []
    try:
        for upload in attachments or []:
            if not upload.filename:
                continue
            data = await upload.read(read_limit)
            stored.append(
                await attachment_service.store_upload(
                    upload.filename, upload.content_type, data
                )
            )
    except OSError as e:
        logfire.error("Attachment upload failed", page_id=page_id, error=str(e))
        await attachment_service.discard_uploads(stored)
        raise CommentValidationError([UPLOAD_FAILED])

    result = await submit_comment_use_case.execute(
        SubmitCommentRequest(
            page_id=page_id,
            body=body,
            author=author,
            parent_id=parent_id,
            website=website,
            attachments=stored,
            principal=principal,
            session_tokens=session_service.load_tokens(comment_tokens),
        )
    )
    store_session_tokens(response, result.session_tokens, session_service, settings)
    return result.comment


class EditCommentAPIRequest(BaseModel):
    """API request for editing a comment.

    Omit ``parent_id`` to keep the current parent, send null to move the
    comment to the root. Omit ``author`` to keep the current display name.
    """

    body: str | None = None
    author: str | None = None
    parent_id: str | None = None


@router.patch("/comments/{comment_id}", response_model=CommentResponse)
async def edit_comment(
    comment_id: str,
    edit: EditCommentAPIRequest,
    request: Request,
    response: Response,
    edit_comment_use_case: FromDishka[EditCommentUseCase],
    session_service: FromDishka[SessionService],
    settings: FromDishka[Settings],
    auth_token: str | None = Cookie(default=None),
    comment_tokens: str | None = Cookie(default=None),
) -> CommentResponse:
    """Edit a comment. The comment goes back to the moderation queue.

    Only the comment's author (holding its possession token) or a
    moderator can edit.

    Returns:
        Updated comment

    Raises:
        NotFoundError: Rendered as 404
        NotAuthorizedError: Rendered as 403
        CommentValidationError: Rendered as 422
    """
    result = await edit_comment_use_case.execute(
        EditCommentRequest(
            comment_id=comment_id,
            principal=session_service.resolve_principal(
                auth_token, client_address(request)
            ),
            session_tokens=session_service.load_tokens(comment_tokens),
            **edit.model_dump(exclude_unset=True),
        )
    )
    if result.session_tokens is not None:
        store_session_tokens(response, result.session_tokens, session_service, settings)
    return result.comment


class DeleteCommentAPIResponse(BaseModel):
    """Delete outcome."""

    outcome: str


@router.delete("/comments/{comment_id}", response_model=DeleteCommentAPIResponse)
async def delete_comment(
    comment_id: str,
    request: Request,
    response: Response,
    delete_comment_use_case: FromDishka[DeleteCommentUseCase],
    session_service: FromDishka[SessionService],
    settings: FromDishka[Settings],
    auth_token: str | None = Cookie(default=None),
    comment_tokens: str | None = Cookie(default=None),
) -> DeleteCommentAPIResponse:
    """Delete a comment together with its replies and attachments.

    A comment that is already gone is reported with outcome ``not_found``.

    Raises:
        NotAuthorizedError: Rendered as 403
    """
    result = await delete_comment_use_case.execute(
        DeleteCommentRequest(
            comment_id=comment_id,
            principal=session_service.resolve_principal(
                auth_token, client_address(request)
            ),
            session_tokens=session_service.load_tokens(comment_tokens),
        )
    )
    if result.session_tokens is not None:
        store_session_tokens(response, result.session_tokens, session_service, settings)
    return DeleteCommentAPIResponse(outcome=result.outcome)
