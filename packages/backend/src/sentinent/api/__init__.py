"""API route aggregation.

All routers registered here get mounted in main.py.

Learn: Auth is applied at the include_router level using FastAPI's
dependencies parameter. This protects all routes in each router
without relying on individual handlers. Health and auth routers are
open (no auth required); /me guards itself.
"""

from fastapi import APIRouter, Depends

from sentinent.api.auth import router as auth_router
from sentinent.api.decisions import router as decisions_router
from sentinent.api.health import router as health_router
from sentinent.api.workspaces import router as workspaces_router
from sentinent.auth.dependencies import get_current_user

# All protected routers require authentication
_auth = [Depends(get_current_user)]

api_router = APIRouter(prefix="/api")

# Open routes — no auth required
api_router.include_router(health_router, tags=["health"])
api_router.include_router(auth_router, tags=["auth"])

# Protected routes — require a valid session token
api_router.include_router(workspaces_router, tags=["workspaces"], dependencies=_auth)
api_router.include_router(decisions_router, tags=["decisions"], dependencies=_auth)
