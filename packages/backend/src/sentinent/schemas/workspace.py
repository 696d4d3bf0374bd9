"""Pydantic schemas for workspaces and memberships.

Learn: Responses use camelCase keys (ownerId, createdAt) through an
alias generator; FastAPI serializes response_model by alias.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from sentinent.schemas.auth import CAMEL


class WorkspaceCreate(BaseModel):
    name: str


class WorkspaceRead(BaseModel):
    id: int
    name: str
    owner_id: int
    owner_email: str
    role: Optional[str] = None
    created_at: datetime

    model_config = CAMEL

    @classmethod
    def from_view(cls, view) -> "WorkspaceRead":
        ws = view.workspace
        return cls(
            id=ws.id,
            name=ws.name,
            owner_id=ws.owner_id,
            owner_email=view.owner_email,
            role=view.role,
            created_at=ws.created_at,
        )


class MemberAdd(BaseModel):
    email: str


class MembershipRead(BaseModel):
    workspace_id: int
    user_id: int
    email: str
    role: str
    created_at: datetime

    model_config = CAMEL

    @classmethod
    def from_view(cls, view) -> "MembershipRead":
        m = view.membership
        return cls(
            workspace_id=m.workspace_id,
            user_id=m.user_id,
            email=view.email,
            role=m.role,
            created_at=m.created_at,
        )
