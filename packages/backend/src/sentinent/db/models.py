"""SQLAlchemy ORM models — single source of truth for the database schema.

Learn: Declarative ORM mapping with SQLAlchemy 2.0 style (Mapped[] + mapped_column).
Each class = one table. Constraints live here; Alembic migrations are
written against these models.

Key concepts:
- Integer primary keys (user ids are embedded in session tokens)
- Timestamps are set by the application clock so they carry microseconds
  on every backend
- Uniqueness (users.email, workspace membership) is enforced by the DB,
  never by a read-then-write check
"""

from datetime import datetime, timezone

from sqlalchemy import (
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

ROLE_OWNER = "owner"
ROLE_MEMBER = "member"

# Largest value an Integer primary key can hold (signed 32-bit)
MAX_ID = 2**31 - 1


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    """Identity anchor. Created on signup, never mutated afterwards."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )


class Workspace(Base):
    """A named collection of decisions, owned by exactly one user.

    Learn: The owner is also a row in workspace_members (role=owner),
    so "is a member" checks never need a special case for the owner.
    """

    __tablename__ = "workspaces"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    owner_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=False, index=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )


class WorkspaceMember(Base):
    """Workspace membership — links users to workspaces with a role.

    Learn: The composite primary key makes (workspace_id, user_id)
    unique, so re-adding a member can be an insert-or-ignore.
    """

    __tablename__ = "workspace_members"

    workspace_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("workspaces.id"), primary_key=True
    )
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id"), primary_key=True, index=True
    )
    role: Mapped[str] = mapped_column(
        String(20), nullable=False, default=ROLE_MEMBER
    )  # owner, member
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )


class Decision(Base):
    """A decision record inside a workspace, attributed to its creator."""

    __tablename__ = "decisions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[str] = mapped_column(String(50), nullable=False)
    workspace_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("workspaces.id"), nullable=False, index=True
    )
    owner_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
