"""Comment use cases."""

from .delete_comment import (
    DeleteCommentRequest,
    DeleteCommentResponse,
    DeleteCommentUseCase,
)
from .edit_comment import EditCommentRequest, EditCommentResponse, EditCommentUseCase
from .get_thread import GetThreadRequest, GetThreadResponse, GetThreadUseCase
from .list_pending_comments import (
    ListPendingCommentsRequest,
    ListPendingCommentsResponse,
    ListPendingCommentsUseCase,
)
from .moderate_comment import (
    ModerateCommentRequest,
    ModerateCommentResponse,
    ModerateCommentUseCase,
)
from .response import AttachmentResponse, CommentResponse, ThreadNodeResponse
from .submit_comment import (
    SubmitCommentRequest,
    SubmitCommentResponse,
    SubmitCommentUseCase,
)

__all__ = [
    "AttachmentResponse",
    "CommentResponse",
    "DeleteCommentRequest",
    "DeleteCommentResponse",
    "DeleteCommentUseCase",
    "EditCommentRequest",
    "EditCommentResponse",
    "EditCommentUseCase",
    "GetThreadRequest",
    "GetThreadResponse",
    "GetThreadUseCase",
    "ListPendingCommentsRequest",
    "ListPendingCommentsResponse",
    "ListPendingCommentsUseCase",
    "ModerateCommentRequest",
    "ModerateCommentResponse",
    "ModerateCommentUseCase",
    "SubmitCommentRequest",
    "SubmitCommentResponse",
    "SubmitCommentUseCase",
    "ThreadNodeResponse",
]
