"""Comment domain service.

Owns the comment state machine:

    create ──► pending ──approve──► approved
       │          │
       │          └──reject───► rejected
       └─(privileged submitter)─► approved

    edit (any state) ──► pending
    delete (any state) ──► removed, together with the reply subtree
"""

import secrets
from collections.abc import MutableMapping
from datetime import datetime
from typing import Optional

import logfire

from discuss.config import CommentSettings
from discuss.domain.error import (
    CommentValidationError,
    InvalidTransitionError,
    NotAuthorizedError,
    NotFoundError,
)
from discuss.domain.model import Attachment, Comment
from discuss.domain.repository import CommentRepository
from discuss.domain.value import (
    Capability,
    CommentId,
    CommentStatus,
    ModerationDecision,
    PageId,
    Principal,
    UploadedFile,
)
from discuss.util.snowflake import SnowflakeGenerator

from .attachment_service import AttachmentService
from .base import Service
from .capability import CapabilityResolver
from .ownership_service import OwnershipService
from .reparent_service import ReparentService

BODY_REQUIRED = "A message is required."
INVALID_SUBMISSION = "Invalid submission."

DECISION_CAPABILITIES = {
    ModerationDecision.APPROVE: (
        Capability.MODERATE_COMMENTS,
        Capability.APPROVE_COMMENTS,
    ),
    ModerationDecision.REJECT: (
        Capability.MODERATE_COMMENTS,
        Capability.REJECT_COMMENTS,
    ),
}


class CommentService(Service):
    """Domain service for comment mutations and moderation."""

    def __init__(
        self,
        comment_repository: CommentRepository,
        reparent_service: ReparentService,
        ownership_service: OwnershipService,
        attachment_service: AttachmentService,
        capability_resolver: CapabilityResolver,
        comment_settings: CommentSettings,
        id_generator: SnowflakeGenerator,
    ) -> None:
        """Initialize comment service.

        Args:
            comment_repository: Comment repository
            reparent_service: Parent validation
            ownership_service: Edit/delete permission checks
            attachment_service: Attachment lifecycle
            capability_resolver: Moderation permission checks
            comment_settings: Field limits
            id_generator: Identifier source for new comments
        """
        self.comment_repository = comment_repository
        self.reparent_service = reparent_service
        self.ownership_service = ownership_service
        self.attachment_service = attachment_service
        self.capability_resolver = capability_resolver
        self.comment_settings = comment_settings
        self.id_generator = id_generator

    def validate_fields(
        self, body: Optional[str], author: Optional[str]
    ) -> tuple[str, Optional[str], list[str]]:
        """Normalize and check the free-text fields.

        Args:
            body: Raw message
            author: Raw display name

        Returns:
            Tuple of (trimmed body, trimmed and truncated author or None, errors)
        """
        errors: list[str] = []
        clean_body = (body or "").strip()
        if not clean_body:
            errors.append(BODY_REQUIRED)
        elif len(clean_body) > self.comment_settings.max_body_length:
            errors.append(
                f"The message is too long "
                f"({self.comment_settings.max_body_length} characters max)."
            )

        clean_author = (author or "").strip()[: self.comment_settings.max_author_length]
        return clean_body, clean_author or None, errors

    async def submit(
        self,
        page_id: PageId,
        principal: Principal,
        body: Optional[str],
        author: Optional[str] = None,
        parent_id: Optional[CommentId] = None,
        files: Optional[list[UploadedFile]] = None,
        honeypot: Optional[str] = None,
    ) -> tuple[Comment, list[Attachment]]:
        """Create a comment or a reply.

        All problems are collected before anything is written. On failure no
        row is stored and every uploaded file is removed.

        Args:
            page_id: Page the comment belongs to
            principal: Submitter
            body: Message
            author: Display name
            parent_id: Comment being replied to (None for a root)
            files: Uploads already written to the blob store
            honeypot: Hidden form field, must stay empty

        Returns:
            Tuple of (created comment, its attachments)

        Raises:
            CommentValidationError: With every problem found
        """
        files = files or []
        with logfire.span(
            "comment_service.submit",
            page_id=str(page_id),
            parent_id=str(parent_id) if parent_id else None,
            file_count=len(files),
        ):
            clean_body, clean_author, errors = self.validate_fields(body, author)
            if (honeypot or "").strip():
                logfire.warn("Honeypot field filled", page_id=str(page_id))
                errors.append(INVALID_SUBMISSION)

            errors.extend(
                await self.reparent_service.validate_parent(None, parent_id, page_id)
            )

            accepted, attachment_errors = self.attachment_service.validate_uploads(
                files
            )
            errors.extend(attachment_errors)

            if errors:
                await self.attachment_service.discard_uploads(files)
                logfire.info(
                    "Comment submission rejected", page_id=str(page_id), errors=errors
                )
                raise CommentValidationError(errors)

            status = (
                CommentStatus.APPROVED
                if principal.is_privileged
                else CommentStatus.PENDING
            )
            comment = Comment(
                public_id=CommentId(self.id_generator.generate()),
                page_id=page_id,
                author=clean_author,
                body=clean_body,
                parent_id=parent_id,
                status=status,
                created_at=datetime.now(),
                submitter_address=principal.address,
                possession_token=secrets.token_urlsafe(32),
                is_privileged_author=principal.is_admin,
            )
            saved = await self.comment_repository.save(comment)
            attachments = await self.attachment_service.attach(
                saved.public_id, accepted
            )

            logfire.info(
                "Comment created",
                comment_id=str(saved.public_id),
                page_id=str(page_id),
                status=status.value,
                attachment_count=len(attachments),
            )
            return saved, attachments

    async def edit(
        self,
        comment_id: CommentId,
        principal: Principal,
        session_tokens: MutableMapping[str, str],
        body: Optional[str],
        author: Optional[str],
        parent_id: Optional[CommentId] = None,
        change_parent: bool = False,
        change_author: bool = True,
    ) -> Comment:
        """Edit a comment and send it back to moderation.

        Args:
            comment_id: Comment to edit
            principal: Caller
            session_tokens: Caller's possession tokens
            body: New message
            author: New display name
            parent_id: New parent (None for root), only read when
                ``change_parent`` is set
            change_parent: Whether a parent change was requested
            change_author: Whether a new display name was sent, otherwise
                the current one is kept

        Returns:
            Updated comment, always pending

        Raises:
            NotFoundError: If the comment does not exist
            NotAuthorizedError: If the caller may not edit it
            CommentValidationError: With every field and parent problem
        """
        with logfire.span("comment_service.edit", comment_id=str(comment_id)):
            comment = await self._get(comment_id)
            if not self.ownership_service.can_mutate(
                principal, comment, session_tokens
            ):
                raise NotAuthorizedError("edit", str(comment_id))

            if not change_author:
                author = comment.author
            clean_body, clean_author, errors = self.validate_fields(body, author)

            new_parent_id = comment.parent_id
            if change_parent and parent_id != comment.parent_id:
                errors.extend(
                    await self.reparent_service.validate_parent(
                        comment.public_id, parent_id, comment.page_id
                    )
                )
                new_parent_id = parent_id

            if errors:
                logfire.info(
                    "Comment edit rejected", comment_id=str(comment_id), errors=errors
                )
                raise CommentValidationError(errors)

            updated = comment.model_copy(
                update={
                    "body": clean_body,
                    "author": clean_author,
                    "parent_id": new_parent_id,
                    "status": CommentStatus.PENDING,
                    "updated_at": datetime.now(),
                }
            )
            saved = await self.comment_repository.save(updated)
            logfire.info(
                "Comment edited",
                comment_id=str(comment_id),
                previous_status=comment.status.value,
                parent_changed=new_parent_id != comment.parent_id,
            )
            return saved

    async def delete(
        self,
        comment_id: CommentId,
        principal: Principal,
        session_tokens: MutableMapping[str, str],
    ) -> bool:
        """Delete a comment, its reply subtree and all of their attachments.

        Attachments are only purged once the comment row removal is
        confirmed, so a concurrent delete never purges twice.

        Args:
            comment_id: Comment to delete
            principal: Caller
            session_tokens: Caller's possession tokens

        Returns:
            True if this call removed the comment, False if it was already gone

        Raises:
            NotAuthorizedError: If the caller may not delete it
        """
        with logfire.span("comment_service.delete", comment_id=str(comment_id)):
            comment = await self.comment_repository.find_by_id(comment_id)
            if comment is None:
                logfire.info("Comment already gone", comment_id=str(comment_id))
                return False
            if not self.ownership_service.can_mutate(
                principal, comment, session_tokens
            ):
                raise NotAuthorizedError("delete", str(comment_id))

            descendants = await self.comment_repository.find_descendants(comment_id)

            if await self.comment_repository.delete(comment_id) == 0:
                logfire.info(
                    "Comment removed concurrently", comment_id=str(comment_id)
                )
                return False

            removed_ids = [comment_id]
            for descendant in descendants:
                if await self.comment_repository.delete(descendant.public_id):
                    removed_ids.append(descendant.public_id)

            await self.attachment_service.purge(removed_ids)
            logfire.info(
                "Comment deleted",
                comment_id=str(comment_id),
                replies_removed=len(removed_ids) - 1,
            )
            return True

    def can_moderate(
        self, principal: Principal, decision: Optional[ModerationDecision] = None
    ) -> bool:
        """Whether the principal may take a moderation decision.

        Args:
            principal: Caller
            decision: Specific decision, None for any of them
        """
        if principal.is_admin or principal.is_moderator:
            return True
        if decision is None:
            capabilities = {
                capability
                for allowed in DECISION_CAPABILITIES.values()
                for capability in allowed
            }
        else:
            capabilities = set(DECISION_CAPABILITIES[decision])
        return any(
            self.capability_resolver.has_capability(principal, capability)
            for capability in capabilities
        )

    async def moderate(
        self,
        comment_id: CommentId,
        decision: ModerationDecision,
        principal: Principal,
    ) -> tuple[Comment, bool]:
        """Approve or reject a pending comment.

        Repeating a decision already in effect is a successful no-op.

        Args:
            comment_id: Comment to moderate
            decision: Approve or reject
            principal: Moderator

        Returns:
            Tuple of (comment after the decision, whether its status changed)

        Raises:
            NotAuthorizedError: If the caller lacks the capability
            NotFoundError: If the comment does not exist
            InvalidTransitionError: If the comment was already decided the
                other way
        """
        with logfire.span(
            "comment_service.moderate",
            comment_id=str(comment_id),
            decision=decision.value,
            principal_id=principal.principal_id,
        ):
            if not self.can_moderate(principal, decision):
                logfire.warn(
                    "Moderation refused",
                    comment_id=str(comment_id),
                    principal_id=principal.principal_id,
                )
                raise NotAuthorizedError(decision.value, str(comment_id))

            comment = await self._get(comment_id)
            target = decision.target_status
            if comment.status == target:
                logfire.info(
                    "Moderation decision already in effect",
                    comment_id=str(comment_id),
                    status=target.value,
                )
                return comment, False

            if comment.status != CommentStatus.PENDING:
                raise InvalidTransitionError(
                    str(comment_id), comment.status.value, target.value
                )

            updated = await self.comment_repository.update_status(comment_id, target)
            if updated is None:
                raise NotFoundError("Comment", str(comment_id))

            logfire.info(
                "Comment moderated",
                comment_id=str(comment_id),
                status=target.value,
                principal_id=principal.principal_id,
            )
            return updated, True

    async def list_pending(
        self, principal: Principal, limit: int = 30, offset: int = 0
    ) -> tuple[list[Comment], int]:
        """List the moderation queue, oldest first.

        Raises:
            NotAuthorizedError: If the caller is not a moderator
        """
        with logfire.span(
            "comment_service.list_pending", limit=limit, offset=offset
        ):
            if not self.can_moderate(principal):
                raise NotAuthorizedError("list", "pending")

            comments = await self.comment_repository.find_by_status(
                CommentStatus.PENDING, limit=limit, offset=offset
            )
            total = await self.comment_repository.count_by_status(
                CommentStatus.PENDING
            )
            logfire.info("Pending comments listed", count=len(comments), total=total)
            return comments, total

    async def _get(self, comment_id: CommentId) -> Comment:
        comment = await self.comment_repository.find_by_id(comment_id)
        if comment is None:
            logfire.warn("Comment not found", comment_id=str(comment_id))
            raise NotFoundError("Comment", str(comment_id))
        return comment
