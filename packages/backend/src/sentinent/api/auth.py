"""Auth API — signup, login, logout, current user.

Learn: Routes for user authentication:
- POST /signup → create a user account (201)
- POST /login  → email/password → JWT in an HttpOnly cookie + JSON body
- POST /logout → expire the cookie (client-side only; tokens are stateless)
- GET  /me     → current identity (requires auth)
"""

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from sentinent.auth.dependencies import (
    TOKEN_COOKIE,
    CurrentIdentity,
    get_current_user,
    get_settings,
    get_token_service,
)
from sentinent.auth.jwt import TokenService
from sentinent.config import Settings
from sentinent.db.engine import get_db
from sentinent.schemas.auth import (
    IdentityRead,
    LoginRequest,
    LoginResponse,
    SignupRequest,
    UserRead,
)
from sentinent.services.auth_service import AuthService

router = APIRouter()


def _svc(
    db: AsyncSession = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
    settings: Settings = Depends(get_settings),
) -> AuthService:
    return AuthService(db, tokens, bcrypt_rounds=settings.bcrypt_rounds)


@router.post("/signup", response_model=UserRead, status_code=201)
async def signup(body: SignupRequest, svc: AuthService = Depends(_svc)):
    return await svc.signup(body.email, body.password)


@router.post("/login", response_model=LoginResponse)
async def login(
    body: LoginRequest,
    response: Response,
    svc: AuthService = Depends(_svc),
    settings: Settings = Depends(get_settings),
):
    """Login with email and password → session token."""
    result = await svc.login(body.email, body.password)
    response.set_cookie(
        key=TOKEN_COOKIE,
        value=result.token,
        expires=result.expires_at,
        path="/",
        httponly=True,
        samesite="lax",
        secure=settings.is_production,
    )
    return LoginResponse(token=result.token, expires_at=result.expires_at)


@router.post("/logout", status_code=204)
async def logout(response: Response, settings: Settings = Depends(get_settings)):
    response.delete_cookie(
        key=TOKEN_COOKIE,
        path="/",
        httponly=True,
        samesite="lax",
        secure=settings.is_production,
    )


@router.get("/me", response_model=IdentityRead)
async def get_me(identity: CurrentIdentity = Depends(get_current_user)):
    """Get the current authenticated identity."""
    return IdentityRead(id=identity.user_id, email=identity.email)
