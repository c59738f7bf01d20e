"""Session domain service."""

import logfire

from discuss.config import AuthSettings
from discuss.domain.value import Principal
from discuss.util.jwt import (
    JWTError,
    decode_session_tokens,
    encode_session_tokens,
    verify_principal_token,
)

from .base import Service


class SessionService(Service):
    """Resolves callers and their comment possession tokens from cookies."""

    def __init__(self, auth_settings: AuthSettings) -> None:
        """Initialize session service.

        Args:
            auth_settings: Authentication settings
        """
        self.auth_settings = auth_settings

    def resolve_principal(
        self, token: str | None, address: str | None = None
    ) -> Principal:
        """Build the caller's principal without raising.

        Missing, expired or tampered tokens yield an anonymous principal.

        Args:
            token: Principal token from cookie (optional)
            address: Caller's network address

        Returns:
            Principal for the caller
        """
        if not token:
            return Principal.anonymous(address)

        try:
            claims = verify_principal_token(token, self.auth_settings)
        except JWTError as e:
            logfire.info("Principal token rejected", error=str(e))
            return Principal.anonymous(address)

        return Principal(
            principal_id=claims.sub,
            address=address,
            capabilities=frozenset(claims.capabilities),
            is_admin=claims.is_admin,
            is_moderator=claims.is_moderator,
            is_contributor=claims.is_contributor,
            is_helper=claims.is_helper,
        )

    def load_tokens(self, cookie: str | None) -> dict[str, str]:
        """Decode the caller's token map, empty when absent or invalid."""
        if not cookie:
            return {}
        try:
            return decode_session_tokens(cookie, self.auth_settings)
        except JWTError as e:
            logfire.info("Comment token map rejected", error=str(e))
            return {}

    def dump_tokens(self, tokens: dict[str, str]) -> str:
        """Sign the caller's token map for the response cookie.

        Only the newest ``max_comment_tokens`` entries are kept so the cookie
        stays within browser size limits.
        """
        return encode_session_tokens(self.cap_tokens(tokens), self.auth_settings)

    def cap_tokens(self, tokens: dict[str, str]) -> dict[str, str]:
        """Drop the oldest entries beyond ``max_comment_tokens``.

        Keys are snowflake ids, so numeric order is creation order. Keys that
        are not numeric sort first and are dropped first.
        """
        limit = self.auth_settings.max_comment_tokens
        if len(tokens) <= limit:
            return dict(tokens)

        newest = sorted(tokens, key=_creation_order)[-limit:] if limit > 0 else []
        logfire.info(
            "Comment token map trimmed",
            kept=len(newest),
            evicted=len(tokens) - len(newest),
        )
        return {key: tokens[key] for key in newest}


def _creation_order(comment_id: str) -> int:
    return int(comment_id) if comment_id.isascii() and comment_id.isdigit() else -1
