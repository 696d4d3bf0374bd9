"""Pydantic schemas for decisions.

- DecisionCreate: what you POST into a workspace
- DecisionUpdate: what you PUT/PATCH (all optional; null == omitted)
- DecisionRead: what the API returns
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from sentinent.schemas.auth import CAMEL


class DecisionCreate(BaseModel):
    title: str
    description: str
    status: str


class DecisionUpdate(BaseModel):
    """Partial update — only non-None fields are applied."""
    title: Optional[str] = None
    description: Optional[str] = None
    status: Optional[str] = None


class DecisionRead(BaseModel):
    id: int
    title: str
    description: str
    status: str
    workspace_id: int
    owner_id: int
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True, **CAMEL}
