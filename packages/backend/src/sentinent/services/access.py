"""Workspace access checks — existence first, then privilege.

Learn: The order is fixed: a missing workspace is a 404 for everyone,
and only for an existing workspace do we answer 403. Every mutation in
the services calls these before writing anything.

Decision updates do NOT go through here: they fold "missing" and "not
yours" into one 404 (see decision_service.py).
"""

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from sentinent.db.models import User, Workspace, WorkspaceMember
from sentinent.errors import ForbiddenError, NotFoundError

logger = structlog.get_logger()


class WorkspaceAccess:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_workspace(self, workspace_id: int) -> Workspace:
        workspace = await self.db.get(Workspace, workspace_id)
        if workspace is None:
            raise NotFoundError("Workspace not found")
        return workspace

    async def membership(self, workspace_id: int, user_id: int) -> WorkspaceMember | None:
        return await self.db.get(WorkspaceMember, (workspace_id, user_id))

    def require_owner(self, workspace: Workspace, user: User) -> None:
        if workspace.owner_id != user.id:
            logger.info(
                "access.denied",
                workspace_id=workspace.id,
                user_id=user.id,
                required="owner",
            )
            raise ForbiddenError("Only workspace owner can add members")

    async def require_member(self, workspace: Workspace, user: User) -> WorkspaceMember:
        member = await self.membership(workspace.id, user.id)
        if member is None:
            logger.info(
                "access.denied",
                workspace_id=workspace.id,
                user_id=user.id,
                required="member",
            )
            raise ForbiddenError("User is not a member of workspace")
        return member
