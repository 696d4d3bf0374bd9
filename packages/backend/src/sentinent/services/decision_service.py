"""Decision service — create, list, and owner-only partial updates.

Learn: Two authorization styles live side by side here.

- Creating/listing inside a workspace: 404 if the workspace is missing,
  403 if the caller is not a member (the owner is a member).
- Updating a decision: the UPDATE is scoped to id AND owner_id, and zero
  affected rows is always a 404. A non-owner can't tell "no such
  decision" from "exists but not yours" — deliberate information hiding,
  not a missing 403.
"""

from typing import Optional

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from sentinent.auth.dependencies import CurrentIdentity
from sentinent.db.models import Decision, utcnow
from sentinent.errors import InternalError, NotFoundError
from sentinent.services.access import WorkspaceAccess
from sentinent.services.decision_mutation import build_decision_update, collect_changes
from sentinent.services.user_store import UserStore
from sentinent.validation import require_text

logger = structlog.get_logger()


class DecisionService:
    """Business logic for decisions."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.users = UserStore(db)
        self.access = WorkspaceAccess(db)

    async def create_decision(
        self,
        identity: CurrentIdentity,
        workspace_id: int,
        title: str,
        description: str,
        status: str,
    ) -> Decision:
        """Any member (owner included) may record a decision."""
        user = await self.users.resolve(identity.user_id)
        workspace = await self.access.get_workspace(workspace_id)
        await self.access.require_member(workspace, user)

        now = utcnow()
        decision = Decision(
            title=require_text(title, "title"),
            description=require_text(description, "description"),
            status=require_text(status, "status"),
            workspace_id=workspace.id,
            owner_id=user.id,
            created_at=now,
            updated_at=now,
        )
        self.db.add(decision)
        await self.db.commit()
        await self.db.refresh(decision)

        logger.info(
            "decision.created",
            decision_id=decision.id,
            workspace_id=workspace.id,
            owner_id=user.id,
        )
        return decision

    async def list_decisions(
        self, identity: CurrentIdentity, workspace_id: int
    ) -> list[Decision]:
        user = await self.users.resolve(identity.user_id)
        workspace = await self.access.get_workspace(workspace_id)
        await self.access.require_member(workspace, user)

        result = await self.db.execute(
            select(Decision)
            .where(Decision.workspace_id == workspace.id)
            .order_by(Decision.id)
        )
        return list(result.scalars().all())

    async def update_decision(
        self,
        identity: CurrentIdentity,
        decision_id: int,
        title: Optional[str] = None,
        description: Optional[str] = None,
        status: Optional[str] = None,
    ) -> Decision:
        """Apply a partial update. Only the decision's creator may do it."""
        # Validation first: a bad body never reaches the database.
        changes = collect_changes(title=title, description=description, status=status)
        user = await self.users.resolve(identity.user_id)
        # rollback() expires loaded rows; keep the plain id
        user_id = user.id

        stmt = build_decision_update(decision_id, user_id, changes, now=utcnow())
        result = await self.db.execute(stmt)
        if result.rowcount == 0:
            await self.db.rollback()
            logger.info("decision.update_missed", decision_id=decision_id, user_id=user_id)
            raise NotFoundError("Decision not found")
        await self.db.commit()

        decision = await self.get_decision(decision_id)
        if decision is None:
            raise InternalError("Failed to fetch updated decision")

        logger.info(
            "decision.updated",
            decision_id=decision_id,
            fields=sorted(changes),
        )
        return decision

    async def get_decision(self, decision_id: int) -> Optional[Decision]:
        result = await self.db.execute(
            select(Decision)
            .where(Decision.id == decision_id)
            .execution_options(populate_existing=True)
        )
        return result.scalars().first()
