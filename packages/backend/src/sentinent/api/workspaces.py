"""Workspace API routes.

Learn: Routes handle HTTP concerns (status codes, body shapes); the
services decide who may do what. Every handler takes the typed
CurrentIdentity explicitly — it is resolved once per request by
get_current_user and handed down, never read from shared state.
"""

from fastapi import APIRouter, Depends, Path
from sqlalchemy.ext.asyncio import AsyncSession

from sentinent.auth.dependencies import CurrentIdentity, get_current_user
from sentinent.db.engine import get_db
from sentinent.db.models import MAX_ID
from sentinent.schemas.decision import DecisionCreate, DecisionRead
from sentinent.schemas.workspace import (
    MemberAdd,
    MembershipRead,
    WorkspaceCreate,
    WorkspaceRead,
)
from sentinent.services.decision_service import DecisionService
from sentinent.services.workspace_service import WorkspaceService

router = APIRouter(prefix="/workspaces")


def _workspaces(db: AsyncSession = Depends(get_db)) -> WorkspaceService:
    return WorkspaceService(db)


def _decisions(db: AsyncSession = Depends(get_db)) -> DecisionService:
    return DecisionService(db)


# ─── Workspaces ─────────────────────────────────────────

@router.post("", response_model=WorkspaceRead, status_code=201)
async def create_workspace(
    body: WorkspaceCreate,
    identity: CurrentIdentity = Depends(get_current_user),
    svc: WorkspaceService = Depends(_workspaces),
):
    """Create a workspace; the caller becomes its owner."""
    view = await svc.create_workspace(identity, body.name)
    return WorkspaceRead.from_view(view)


@router.get("", response_model=list[WorkspaceRead])
async def list_workspaces(
    identity: CurrentIdentity = Depends(get_current_user),
    svc: WorkspaceService = Depends(_workspaces),
):
    return [WorkspaceRead.from_view(v) for v in await svc.list_workspaces(identity)]


# ─── Members ────────────────────────────────────────────

@router.post("/{workspace_id}/members", response_model=MembershipRead, status_code=201)
async def add_member(
    body: MemberAdd,
    workspace_id: int = Path(gt=0, le=MAX_ID),
    identity: CurrentIdentity = Depends(get_current_user),
    svc: WorkspaceService = Depends(_workspaces),
):
    """Owner-only. Adding an existing member is a no-op, not an error."""
    view = await svc.add_member(identity, workspace_id, body.email)
    return MembershipRead.from_view(view)


# ─── Decisions in a workspace ───────────────────────────

@router.post("/{workspace_id}/decisions", response_model=DecisionRead, status_code=201)
async def create_decision(
    body: DecisionCreate,
    workspace_id: int = Path(gt=0, le=MAX_ID),
    identity: CurrentIdentity = Depends(get_current_user),
    svc: DecisionService = Depends(_decisions),
):
    return await svc.create_decision(
        identity,
        workspace_id,
        title=body.title,
        description=body.description,
        status=body.status,
    )


@router.get("/{workspace_id}/decisions", response_model=list[DecisionRead])
async def list_decisions(
    workspace_id: int = Path(gt=0, le=MAX_ID),
    identity: CurrentIdentity = Depends(get_current_user),
    svc: DecisionService = Depends(_decisions),
):
    return await svc.list_decisions(identity, workspace_id)
