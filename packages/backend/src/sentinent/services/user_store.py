"""Credential store — thin read/write access to the users table.

Learn: This is the only place that touches password hashes. Callers get
back a User (or None) and never see bcrypt directly. Hashing and
checking run in a worker thread: bcrypt is deliberately slow (~100ms at
12 rounds) and would otherwise stall every other request on the loop.
"""

import asyncio
from typing import Optional

import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from sentinent.auth.password import (
    DEFAULT_ROUNDS,
    burn_verification,
    hash_password,
    verify_password,
)
from sentinent.db.models import User
from sentinent.errors import ConflictError, UnauthorizedError
from sentinent.validation import normalize_email

logger = structlog.get_logger()


class UserStore:
    """Users table adapter."""

    def __init__(self, db: AsyncSession, bcrypt_rounds: int = DEFAULT_ROUNDS):
        self.db = db
        self.bcrypt_rounds = bcrypt_rounds

    async def get_by_email(self, email: str) -> Optional[User]:
        result = await self.db.execute(
            select(User).where(User.email == normalize_email(email))
        )
        return result.scalars().first()

    async def get_by_id(self, user_id: int) -> Optional[User]:
        return await self.db.get(User, user_id)

    async def create(self, email: str, password: str) -> User:
        """Insert a user. Raises ConflictError if the email is taken.

        Learn: No "SELECT then INSERT" check — two concurrent signups
        would both pass it. The unique index on users.email decides,
        and its IntegrityError is translated into a 409.
        """
        password_hash = await asyncio.to_thread(
            hash_password, password, self.bcrypt_rounds
        )
        user = User(email=normalize_email(email), password_hash=password_hash)
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise ConflictError("Email already registered")
        await self.db.refresh(user)
        return user

    async def verify_credentials(self, email: str, password: str) -> Optional[User]:
        """Return the user if the password matches, else None.

        Unknown email and wrong password both cost one bcrypt check and
        both return None, so callers cannot tell them apart.
        """
        user = await self.get_by_email(email)
        if user is None:
            await asyncio.to_thread(burn_verification, password, self.bcrypt_rounds)
            return None
        matches = await asyncio.to_thread(verify_password, password, user.password_hash)
        return user if matches else None

    async def resolve(self, user_id: int) -> User:
        """Load the requester's row. A token for a vanished user is a 401."""
        user = await self.get_by_id(user_id)
        if user is None:
            logger.info("auth.unknown_subject", user_id=user_id)
            raise UnauthorizedError()
        return user
