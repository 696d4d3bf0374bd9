"""Pydantic schemas for signup, login, and the current user.

Learn: Request schemas only check shape (types, presence). Content
rules — email format, blank passwords — live in the service so the
same rules apply no matter how the service is called.
"""

from datetime import datetime

from pydantic import BaseModel
from pydantic.alias_generators import to_camel

CAMEL = {"alias_generator": to_camel, "populate_by_name": True}


class SignupRequest(BaseModel):
    email: str
    password: str


class LoginRequest(BaseModel):
    email: str
    password: str


class UserRead(BaseModel):
    """Never carries the password hash."""
    id: int
    email: str
    created_at: datetime

    model_config = {"from_attributes": True, **CAMEL}


class LoginResponse(BaseModel):
    """Token also returned in the body for non-browser clients."""
    token: str
    expires_at: datetime

    model_config = CAMEL


class IdentityRead(BaseModel):
    id: int
    email: str
