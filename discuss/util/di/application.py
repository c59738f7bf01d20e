"""Application layer DI providers."""

from dishka import Scope, provide

from discuss.application.usecase.comment import (
    DeleteCommentUseCase,
    EditCommentUseCase,
    GetThreadUseCase,
    ListPendingCommentsUseCase,
    ModerateCommentUseCase,
    SubmitCommentUseCase,
)
from discuss.config import AttachmentSettings
from discuss.domain.repository import AttachmentRepository
from discuss.domain.service import CommentService, OwnershipService, ThreadService
from discuss.util.di.base import ProviderBase


class ProdApplicationProvider(ProviderBase):
    """Production application use cases provider - concrete, no mocks needed."""

    @provide(scope=Scope.REQUEST)
    def get_get_thread_use_case(
        self,
        thread_service: ThreadService,
        ownership_service: OwnershipService,
        attachment_settings: AttachmentSettings,
    ) -> GetThreadUseCase:
        """Provide get thread use case."""
        return GetThreadUseCase(
            thread_service=thread_service,
            ownership_service=ownership_service,
            attachment_settings=attachment_settings,
        )

    @provide(scope=Scope.REQUEST)
    def get_submit_comment_use_case(
        self,
        comment_service: CommentService,
        attachment_settings: AttachmentSettings,
    ) -> SubmitCommentUseCase:
        """Provide submit comment use case."""
        return SubmitCommentUseCase(
            comment_service=comment_service,
            attachment_settings=attachment_settings,
        )

    @provide(scope=Scope.REQUEST)
    def get_edit_comment_use_case(
        self,
        comment_service: CommentService,
        attachment_repository: AttachmentRepository,
        attachment_settings: AttachmentSettings,
    ) -> EditCommentUseCase:
        """Provide edit comment use case."""
        return EditCommentUseCase(
            comment_service=comment_service,
            attachment_repository=attachment_repository,
            attachment_settings=attachment_settings,
        )

    @provide(scope=Scope.REQUEST)
    def get_delete_comment_use_case(
        self, comment_service: CommentService
    ) -> DeleteCommentUseCase:
        """Provide delete comment use case."""
        return DeleteCommentUseCase(comment_service=comment_service)

    @provide(scope=Scope.REQUEST)
    def get_moderate_comment_use_case(
        self,
        comment_service: CommentService,
        attachment_repository: AttachmentRepository,
        attachment_settings: AttachmentSettings,
    ) -> ModerateCommentUseCase:
        """Provide moderate comment use case."""
        return ModerateCommentUseCase(
            comment_service=comment_service,
            attachment_repository=attachment_repository,
            attachment_settings=attachment_settings,
        )

    @provide(scope=Scope.REQUEST)
    def get_list_pending_comments_use_case(
        self,
        comment_service: CommentService,
        attachment_repository: AttachmentRepository,
        attachment_settings: AttachmentSettings,
    ) -> ListPendingCommentsUseCase:
        """Provide list pending comments use case."""
        return ListPendingCommentsUseCase(
            comment_service=comment_service,
            attachment_repository=attachment_repository,
            attachment_settings=attachment_settings,
        )
