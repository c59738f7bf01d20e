"""Request helpers for caller identity and the comment token cookie."""

import ipaddress

from fastapi import Request, Response

from discuss.config import Settings
from discuss.domain.service import SessionService

SESSION_COOKIE = "comment_tokens"

# Width of comments.submitter_address
MAX_ADDRESS_LENGTH = 64


def client_address(request: Request) -> str | None:
    """Caller address, preferring the first proxy hop when present.

    The forwarded hop is client-controlled, so it is only used when it parses
    as an IP address. Otherwise the connection peer is used.
    """
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        candidate = forwarded.split(",")[0].strip()
        try:
            address = str(ipaddress.ip_address(candidate))
        except ValueError:
            address = None
        if address and len(address) <= MAX_ADDRESS_LENGTH:
            return address
    if request.client and request.client.host:
        return request.client.host[:MAX_ADDRESS_LENGTH]
    return None


def store_session_tokens(
    response: Response,
    tokens: dict[str, str],
    session_service: SessionService,
    settings: Settings,
) -> None:
    """Re-issue the signed comment token cookie."""
    response.set_cookie(
        key=SESSION_COOKIE,
        value=session_service.dump_tokens(tokens),
        max_age=settings.auth.jwt_expiry_days * 24 * 60 * 60,
        httponly=True,
        secure=settings.secure_cookies,
        samesite="lax",
    )
