"""Decision API routes.

Learn: PUT and PATCH are both accepted and both mean "partial update".
A 404 here covers "no such decision" AND "not your decision".
"""

from fastapi import APIRouter, Depends, Path
from sqlalchemy.ext.asyncio import AsyncSession

from sentinent.auth.dependencies import CurrentIdentity, get_current_user
from sentinent.db.engine import get_db
from sentinent.db.models import MAX_ID
from sentinent.schemas.decision import DecisionRead, DecisionUpdate
from sentinent.services.decision_service import DecisionService

router = APIRouter(prefix="/decisions")


def _svc(db: AsyncSession = Depends(get_db)) -> DecisionService:
    return DecisionService(db)


@router.api_route("/{decision_id}", methods=["PUT", "PATCH"], response_model=DecisionRead)
async def update_decision(
    body: DecisionUpdate,
    decision_id: int = Path(gt=0, le=MAX_ID),
    identity: CurrentIdentity = Depends(get_current_user),
    svc: DecisionService = Depends(_svc),
):
    return await svc.update_decision(
        identity,
        decision_id,
        title=body.title,
        description=body.description,
        status=body.status,
    )
