"""Workspace service — creation, membership, and listing.

Learn: Service layer separates business logic from HTTP routing.
API routes call services, services call the database. Authorization
happens here (via WorkspaceAccess), after existence checks and before
any write.
"""

from dataclasses import dataclass

import structlog
from sqlalchemy import select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from sentinent.auth.dependencies import CurrentIdentity
from sentinent.db.models import (
    ROLE_MEMBER,
    ROLE_OWNER,
    User,
    Workspace,
    WorkspaceMember,
)
from sentinent.errors import InternalError, NotFoundError, ValidationError
from sentinent.services.access import WorkspaceAccess
from sentinent.services.user_store import UserStore
from sentinent.validation import require_text

logger = structlog.get_logger()


@dataclass(frozen=True)
class WorkspaceView:
    """A workspace plus what the API shows next to it."""

    workspace: Workspace
    owner_email: str
    role: str | None = None


@dataclass(frozen=True)
class MembershipView:
    membership: WorkspaceMember
    email: str


class WorkspaceService:
    """Business logic for workspaces and their members."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.users = UserStore(db)
        self.access = WorkspaceAccess(db)

    # ─── Workspaces ─────────────────────────────────────

    async def create_workspace(self, identity: CurrentIdentity, name: str) -> WorkspaceView:
        """Create a workspace and its owner membership in one transaction.

        Learn: Both rows are flushed inside the same transaction and
        committed together, so there is never a workspace without its
        owner row. Any storage failure rolls both back.
        """
        name = require_text(name, "workspace name")
        owner = await self.users.resolve(identity.user_id)
        # rollback() expires loaded rows; keep plain values for the logs
        owner_id, owner_email = owner.id, owner.email

        workspace = Workspace(name=name, owner_id=owner_id)
        try:
            self.db.add(workspace)
            await self.db.flush()
            self.db.add(
                WorkspaceMember(
                    workspace_id=workspace.id, user_id=owner_id, role=ROLE_OWNER
                )
            )
            await self.db.commit()
            await self.db.refresh(workspace)
        except SQLAlchemyError:
            await self.db.rollback()
            logger.exception("workspace.create_failed", owner_id=owner_id)
            raise InternalError("Failed to create workspace")

        logger.info("workspace.created", workspace_id=workspace.id, owner_id=owner_id)
        return WorkspaceView(workspace=workspace, owner_email=owner_email, role=ROLE_OWNER)

    async def list_workspaces(self, identity: CurrentIdentity) -> list[WorkspaceView]:
        """Workspaces the caller belongs to (owned ones included)."""
        user = await self.users.resolve(identity.user_id)
        result = await self.db.execute(
            select(Workspace, WorkspaceMember.role, User.email)
            .join(WorkspaceMember, WorkspaceMember.workspace_id == Workspace.id)
            .join(User, User.id == Workspace.owner_id)
            .where(WorkspaceMember.user_id == user.id)
            .order_by(Workspace.id)
        )
        return [
            WorkspaceView(workspace=workspace, owner_email=owner_email, role=role)
            for workspace, role, owner_email in result.all()
        ]

    # ─── Members ────────────────────────────────────────

    async def add_member(
        self, identity: CurrentIdentity, workspace_id: int, email: str
    ) -> MembershipView:
        """Owner-only: add an existing user as a member (idempotent)."""
        requester = await self.users.resolve(identity.user_id)
        workspace = await self.access.get_workspace(workspace_id)
        self.access.require_owner(workspace, requester)

        if not email.strip():
            raise ValidationError("Member email is required")
        invitee = await self.users.get_by_email(email)
        if invitee is None:
            raise NotFoundError("User not found")
        key = (workspace.id, invitee.id)
        invitee_email = invitee.email

        stmt = (
            self._insert(WorkspaceMember)
            .values(workspace_id=key[0], user_id=key[1], role=ROLE_MEMBER)
            .on_conflict_do_nothing(index_elements=["workspace_id", "user_id"])
        )
        try:
            await self.db.execute(stmt)
            await self.db.commit()
        except SQLAlchemyError:
            await self.db.rollback()
            logger.exception("workspace.add_member_failed", workspace_id=key[0])
            raise InternalError("Failed to add workspace member")

        membership = await self.db.get(WorkspaceMember, key, populate_existing=True)
        if membership is None:
            raise InternalError("Failed to fetch workspace member")

        logger.info(
            "workspace.member_added",
            workspace_id=key[0],
            user_id=key[1],
            role=membership.role,
        )
        return MembershipView(membership=membership, email=invitee_email)

    def _insert(self, table):
        """INSERT that supports ON CONFLICT DO NOTHING on the current backend."""
        dialect = self.db.get_bind().dialect.name
        if dialect == "postgresql":
            return postgresql.insert(table)
        if dialect == "sqlite":
            return sqlite.insert(table)
        logger.error("db.unsupported_dialect", dialect=dialect)
        raise InternalError()
