"""JWT session token creation and verification.

Learn: JWT (JSON Web Token) provides stateless authentication. There is
no session table — a token is valid iff its HS256 signature checks out
against the server secret AND its `exp` is still in the future. Every
login mints a fresh token; older ones stay valid until they expire.

Claims: {"sub": "<user id>", "email": "<email>", "exp": <unix seconds>}
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from sentinent.db.models import MAX_ID
from sentinent.errors import (
    ConfigurationError,
    ExpiredTokenError,
    InvalidTokenError,
    MalformedTokenError,
)

ALGORITHM = "HS256"
DEFAULT_LIFETIME = timedelta(hours=24)


class TokenClaims(BaseModel):
    """Decoded, structurally valid token payload."""

    sub: int = Field(gt=0, le=MAX_ID)
    email: str = Field(min_length=1)
    exp: int

    @property
    def user_id(self) -> int:
        return self.sub

    @property
    def expires_at(self) -> datetime:
        return datetime.fromtimestamp(self.exp, tz=timezone.utc)


class TokenService:
    """Issues and verifies signed, time-bound identity tokens.

    Learn: The secret is handed in once at startup and never changes for
    the life of the process. Verification is pure CPU — no DB, no
    network — so it is safe to call on every request.
    """

    def __init__(self, secret: str, lifetime: timedelta = DEFAULT_LIFETIME):
        if not secret or not secret.strip():
            raise ConfigurationError(
                "SENTINENT_JWT_SECRET is required. Generate one with: "
                'python -c "import secrets; print(secrets.token_urlsafe(32))"'
            )
        if lifetime <= timedelta(0):
            raise ConfigurationError("Token lifetime must be positive")
        self._secret = secret
        self.lifetime = lifetime

    def issue_token(
        self,
        user_id: int,
        email: str,
        now: Optional[datetime] = None,
    ) -> tuple[str, datetime]:
        """Create a signed token. Returns (token, expires_at)."""
        now = now or datetime.now(timezone.utc)
        exp = int((now + self.lifetime).timestamp())
        payload = {"sub": str(user_id), "email": email, "exp": exp}
        token = jwt.encode(payload, self._secret, algorithm=ALGORITHM)
        return token, datetime.fromtimestamp(exp, tz=timezone.utc)

    def verify_token(self, token: str, now: Optional[datetime] = None) -> TokenClaims:
        """Verify and decode a token.

        Raises InvalidTokenError (bad signature, wrong algorithm, garbage),
        MalformedTokenError (signed but claims are wrong), or
        ExpiredTokenError (exp <= now).
        """
        try:
            # Only HS256 is accepted; "none", RS256 or HS512 tokens are
            # rejected here before any claim is looked at.
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[ALGORITHM],
                options={"verify_exp": False},
            )
        except jwt.InvalidTokenError:
            raise InvalidTokenError()

        try:
            claims = TokenClaims.model_validate(payload)
        except PydanticValidationError:
            raise MalformedTokenError()

        now = now or datetime.now(timezone.utc)
        if claims.exp <= now.timestamp():
            raise ExpiredTokenError()
        return claims
