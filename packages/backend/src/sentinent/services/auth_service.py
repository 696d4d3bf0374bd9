"""Auth service — signup and login."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from sentinent.auth.jwt import TokenService
from sentinent.auth.password import DEFAULT_ROUNDS
from sentinent.db.models import User
from sentinent.errors import UnauthorizedError, ValidationError
from sentinent.services.user_store import UserStore
from sentinent.validation import require_email

logger = structlog.get_logger()

# Same message for "no such email" and "wrong password"
INVALID_CREDENTIALS = "Invalid credentials"


@dataclass(frozen=True)
class LoginResult:
    user: User
    token: str
    expires_at: datetime


class AuthService:
    def __init__(
        self,
        db: AsyncSession,
        tokens: TokenService,
        bcrypt_rounds: int = DEFAULT_ROUNDS,
    ):
        self.users = UserStore(db, bcrypt_rounds=bcrypt_rounds)
        self.tokens = tokens

    async def signup(self, email: str, password: str) -> User:
        email = require_email(email)
        if not password:
            raise ValidationError("Password is required")

        user = await self.users.create(email, password)
        logger.info("auth.signup", user_id=user.id)
        return user

    async def login(
        self, email: str, password: str, now: Optional[datetime] = None
    ) -> LoginResult:
        email = require_email(email)

        user = await self.users.verify_credentials(email, password)
        if user is None:
            logger.info("auth.login_failed")
            raise UnauthorizedError(INVALID_CREDENTIALS)

        token, expires_at = self.tokens.issue_token(user.id, user.email, now=now)
        logger.info("auth.login", user_id=user.id, expires_at=expires_at.isoformat())
        return LoginResult(user=user, token=token, expires_at=expires_at)
