"""Domain layer DI providers."""

from dishka import Scope, provide

from discuss.config import AttachmentSettings, AuthSettings, CommentSettings
from discuss.domain.repository import AttachmentRepository, CommentRepository
from discuss.domain.service import (
    AttachmentService,
    CapabilityResolver,
    ClaimsCapabilityResolver,
    CommentService,
    OwnershipService,
    ReparentService,
    SessionService,
    ThreadService,
)
from discuss.domain.storage import BlobStore
from discuss.util.di.base import ProviderBase
from discuss.util.snowflake import SnowflakeGenerator


class ProdDomainProvider(ProviderBase):
    """Production domain services provider - concrete, no mocks needed.

    Domain services are REQUEST-scoped to align with repository/session lifecycle.
    Each HTTP request gets fresh service instances with their own transaction.
    """

    scope = Scope.REQUEST

    @provide(scope=Scope.APP)
    def get_capability_resolver(self) -> CapabilityResolver:
        """Provide capability resolver backed by principal claims."""
        return ClaimsCapabilityResolver()

    @provide(scope=Scope.APP)
    def get_session_service(self, auth_settings: AuthSettings) -> SessionService:
        """Provide session domain service."""
        return SessionService(auth_settings=auth_settings)

    @provide(scope=Scope.APP)
    def get_ownership_service(
        self, capability_resolver: CapabilityResolver
    ) -> OwnershipService:
        """Provide ownership domain service."""
        return OwnershipService(capability_resolver=capability_resolver)

    @provide
    def get_thread_service(
        self,
        comment_repository: CommentRepository,
        attachment_repository: AttachmentRepository,
    ) -> ThreadService:
        """Provide thread domain service."""
        return ThreadService(
            comment_repository=comment_repository,
            attachment_repository=attachment_repository,
        )

    @provide
    def get_reparent_service(
        self,
        comment_repository: CommentRepository,
        comment_settings: CommentSettings,
    ) -> ReparentService:
        """Provide reparent domain service."""
        return ReparentService(
            comment_repository=comment_repository,
            comment_settings=comment_settings,
        )

    @provide
    def get_attachment_service(
        self,
        attachment_repository: AttachmentRepository,
        blob_store: BlobStore,
        attachment_settings: AttachmentSettings,
        id_generator: SnowflakeGenerator,
    ) -> AttachmentService:
        """Provide attachment domain service."""
        return AttachmentService(
            attachment_repository=attachment_repository,
            blob_store=blob_store,
            attachment_settings=attachment_settings,
            id_generator=id_generator,
        )

    @provide
    def get_comment_service(
        self,
        comment_repository: CommentRepository,
        reparent_service: ReparentService,
        ownership_service: OwnershipService,
        attachment_service: AttachmentService,
        capability_resolver: CapabilityResolver,
        comment_settings: CommentSettings,
        id_generator: SnowflakeGenerator,
    ) -> CommentService:
        """Provide comment domain service."""
        return CommentService(
            comment_repository=comment_repository,
            reparent_service=reparent_service,
            ownership_service=ownership_service,
            attachment_service=attachment_service,
            capability_resolver=capability_resolver,
            comment_settings=comment_settings,
            id_generator=id_generator,
        )
