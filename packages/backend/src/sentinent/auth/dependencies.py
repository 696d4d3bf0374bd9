"""FastAPI auth dependencies.

Learn: These are used as Depends() in route handlers to extract and
validate the current identity from the request. The result is a typed
CurrentIdentity passed as a handler parameter, so each request carries
its own identity and nothing is stashed in module-level state.

Token carriers, in order:
1. the `token` cookie (browsers — HttpOnly, set at login)
2. `Authorization: Bearer <token>` (only if the cookie is absent/empty)

Outcomes:
- no token at all                 → 401
- bad signature / algorithm / exp → 401
- signed but malformed claims     → 400 (client bug, not an auth failure)
"""

from dataclasses import dataclass
from typing import Optional

import structlog
from fastapi import Cookie, Depends, Header, Request

from sentinent.auth.jwt import TokenService
from sentinent.config import Settings
from sentinent.errors import MalformedTokenError, UnauthorizedError

logger = structlog.get_logger()

TOKEN_COOKIE = "token"


@dataclass(frozen=True)
class CurrentIdentity:
    """The verified identity making the request."""

    user_id: int
    email: str


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


def extract_token(cookie: Optional[str], authorization: Optional[str]) -> Optional[str]:
    """Pick the raw token from the cookie, falling back to the Bearer header."""
    if cookie and cookie.strip():
        return cookie.strip()
    if authorization:
        scheme, _, credentials = authorization.strip().partition(" ")
        if scheme.lower() == "bearer" and credentials.strip():
            return credentials.strip()
    return None


async def get_current_user(
    token: Optional[str] = Cookie(None, alias=TOKEN_COOKIE),
    authorization: Optional[str] = Header(None),
    tokens: TokenService = Depends(get_token_service),
) -> CurrentIdentity:
    """Extract current identity (required — 401 if no valid token)."""
    raw = extract_token(token, authorization)
    if raw is None:
        raise UnauthorizedError("Authentication required")

    try:
        claims = tokens.verify_token(raw)
    except (UnauthorizedError, MalformedTokenError) as e:
        logger.info("auth.token_rejected", reason=e.detail)
        raise

    return CurrentIdentity(user_id=claims.user_id, email=claims.email)
