"""JWT token utilities.

Two kinds of tokens are handled here:
- principal tokens, issued by the surrounding site after login and read from
  the ``auth_token`` cookie
- session token maps, the signed ``comment_tokens`` cookie holding the
  possession tokens of comments written from this browser
"""

from datetime import datetime, timedelta, timezone

import jwt
from pydantic import BaseModel, ValidationError

from discuss.config import AuthSettings

SESSION_TOKEN_TYPE = "comment_tokens"


class PrincipalClaims(BaseModel):
    """Principal token payload."""

    sub: str
    capabilities: list[str] = []
    is_admin: bool = False
    is_moderator: bool = False
    is_contributor: bool = False
    is_helper: bool = False
    exp: datetime


class JWTError(Exception):
    """JWT-related error."""

    pass


def _expiry(settings: AuthSettings) -> datetime:
    return datetime.now(timezone.utc) + timedelta(days=settings.jwt_expiry_days)


def create_principal_token(
    subject: str,
    settings: AuthSettings,
    capabilities: list[str] | None = None,
    is_admin: bool = False,
    is_moderator: bool = False,
    is_contributor: bool = False,
    is_helper: bool = False,
) -> str:
    """Create a principal token.

    Args:
        subject: Principal ID
        settings: Authentication settings
        capabilities: Granted capability names
        is_admin: Admin flag
        is_moderator: Moderator flag
        is_contributor: Contributor flag
        is_helper: Helper flag

    Returns:
        Encoded JWT token
    """
    payload = {
        "sub": subject,
        "capabilities": list(capabilities or []),
        "is_admin": is_admin,
        "is_moderator": is_moderator,
        "is_contributor": is_contributor,
        "is_helper": is_helper,
        "exp": _expiry(settings),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def verify_principal_token(token: str, settings: AuthSettings) -> PrincipalClaims:
    """Verify and decode a principal token.

    Args:
        token: JWT token to verify
        settings: Authentication settings

    Returns:
        Token claims if valid

    Raises:
        JWTError: If token is invalid or expired
    """
    try:
        payload = jwt.decode(
            token, settings.jwt_secret, algorithms=[settings.jwt_algorithm]
        )
        return PrincipalClaims(**payload)
    except jwt.ExpiredSignatureError:
        raise JWTError("Token has expired")
    except (jwt.InvalidTokenError, ValidationError):
        raise JWTError("Invalid token")


def encode_session_tokens(tokens: dict[str, str], settings: AuthSettings) -> str:
    """Sign a comment-id -> possession-token map.

    Args:
        tokens: Possession tokens keyed by comment ID
        settings: Authentication settings

    Returns:
        Encoded JWT token
    """
    payload = {
        "typ": SESSION_TOKEN_TYPE,
        "tokens": dict(tokens),
        "exp": _expiry(settings),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_session_tokens(token: str, settings: AuthSettings) -> dict[str, str]:
    """Verify and decode a signed token map.

    Args:
        token: JWT token to verify
        settings: Authentication settings

    Returns:
        Possession tokens keyed by comment ID

    Raises:
        JWTError: If token is invalid, expired or not a token map
    """
    try:
        payload = jwt.decode(
            token, settings.jwt_secret, algorithms=[settings.jwt_algorithm]
        )
    except jwt.ExpiredSignatureError:
        raise JWTError("Token has expired")
    except jwt.InvalidTokenError:
        raise JWTError("Invalid token")

    tokens = payload.get("tokens")
    if payload.get("typ") != SESSION_TOKEN_TYPE or not isinstance(tokens, dict):
        raise JWTError("Not a comment token map")
    return {
        str(key): value
        for key, value in tokens.items()
        if isinstance(value, str) and value
    }
