"""Ownership gate for comment mutations."""

import secrets
from collections.abc import Iterable, MutableMapping

import logfire

from discuss.domain.model.comment import Comment
from discuss.domain.value import Capability, CommentId, Principal

from .base import Service
from .capability import CapabilityResolver

# Any one of these lets a principal edit or delete comments they did not write
MANAGE_CAPABILITIES = (
    Capability.MODERATE_COMMENTS,
    Capability.DELETE_COMMENTS,
    Capability.APPROVE_COMMENTS,
    Capability.REJECT_COMMENTS,
)


class OwnershipService(Service):
    """Decides whether a caller may mutate a given comment.

    Anonymous authors prove ownership with the possession token issued when
    the comment was created. The token map is always passed in by the caller
    (it lives in the caller's session), never read from ambient state.
    """

    def __init__(self, capability_resolver: CapabilityResolver) -> None:
        """Initialize ownership service.

        Args:
            capability_resolver: External capability check
        """
        self.capability_resolver = capability_resolver

    def has_elevated_access(self, principal: Principal) -> bool:
        """Whether the principal may manage any comment."""
        if principal.is_admin or principal.is_moderator:
            return True
        return any(
            self.capability_resolver.has_capability(principal, capability)
            for capability in MANAGE_CAPABILITIES
        )

    def can_mutate(
        self,
        principal: Principal,
        comment: Comment,
        session_tokens: MutableMapping[str, str],
    ) -> bool:
        """Check whether the principal may edit or delete a comment.

        Args:
            principal: Caller
            comment: Target comment
            session_tokens: Caller's comment-id -> possession-token map.
                A token found under the legacy internal id is moved to the
                public id key when it matches.

        Returns:
            True if allowed, False otherwise (never raises)
        """
        with logfire.span(
            "ownership_service.can_mutate",
            comment_id=comment.public_id,
            principal_id=principal.principal_id,
        ):
            if self.has_elevated_access(principal):
                logfire.info(
                    "Comment access granted by capability",
                    comment_id=comment.public_id,
                    principal_id=principal.principal_id,
                )
                return True

            allowed = self._holds_token(comment, session_tokens)
            if not allowed:
                logfire.info(
                    "Comment access denied",
                    comment_id=comment.public_id,
                    principal_id=principal.principal_id,
                )
            return allowed

    def owned_ids(
        self,
        comments: Iterable[Comment],
        session_tokens: MutableMapping[str, str],
    ) -> set[CommentId]:
        """Return the comments the session holds a valid possession token for."""
        return {
            comment.public_id
            for comment in comments
            if self._holds_token(comment, session_tokens)
        }

    def _holds_token(
        self, comment: Comment, session_tokens: MutableMapping[str, str]
    ) -> bool:
        expected = comment.possession_token
        if not expected:
            return False

        token = session_tokens.get(comment.public_id)
        if token is not None:
            return _tokens_match(token, expected)

        if comment.internal_id is None:
            return False
        legacy_key = str(comment.internal_id)
        legacy_token = session_tokens.get(legacy_key)
        if legacy_token is None or not _tokens_match(legacy_token, expected):
            return False

        session_tokens[comment.public_id] = legacy_token
        del session_tokens[legacy_key]
        logfire.info(
            "Legacy comment token migrated",
            comment_id=comment.public_id,
            internal_id=comment.internal_id,
        )
        return True


def _tokens_match(presented: str, expected: str) -> bool:
    return secrets.compare_digest(presented.encode(), expected.encode())
