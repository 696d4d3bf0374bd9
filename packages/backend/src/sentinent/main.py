"""FastAPI application factory.

Learn: App factory pattern — create_app() returns a configured FastAPI
instance. Startup-only collaborators (token service, origin gatekeeper)
are built here from Settings and parked on app.state; a blank signing
secret or an empty origin list raises ConfigurationError right here, so
a misconfigured process never starts serving.
"""

from contextlib import asynccontextmanager
from datetime import timedelta
from typing import Optional

import structlog
from fastapi import FastAPI

from sentinent import __version__
from sentinent.api import api_router
from sentinent.api.error_handlers import register_error_handlers
from sentinent.auth.jwt import TokenService
from sentinent.config import Settings, settings
from sentinent.middleware.cors import OriginGatekeeper, OriginGateMiddleware
from sentinent.middleware.request_id import RequestIdMiddleware
from sentinent.middleware.security import SecurityHeadersMiddleware

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle."""
    app_settings: Settings = app.state.settings
    logger.info(
        "sentinent.starting",
        version=__version__,
        environment=app_settings.environment,
        port=app_settings.port,
        cors_origins=sorted(app.state.origin_gatekeeper.allowed_origins),
    )

    yield

    logger.info("sentinent.shutdown")
    from sentinent.db.engine import engine
    await engine.dispose()


def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    """Build and return the FastAPI application."""
    app_settings = app_settings or settings

    token_service = TokenService(
        app_settings.jwt_secret,
        lifetime=timedelta(hours=app_settings.token_lifetime_hours),
    )
    gatekeeper = OriginGatekeeper(app_settings.cors_origin_list)

    app = FastAPI(
        title="Sentinent",
        description="Multi-tenant decision records",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = app_settings
    app.state.token_service = token_service
    app.state.origin_gatekeeper = gatekeeper

    register_error_handlers(app)

    # ── Middleware stack ──────────────────────────────────────
    # Starlette wraps in reverse order of registration (last added runs first).
    # Request flow: RequestId → SecurityHeaders → OriginGate → router
    app.add_middleware(OriginGateMiddleware, gatekeeper=gatekeeper)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestIdMiddleware)

    app.include_router(api_router)

    return app


# Default app instance (used by uvicorn: sentinent.main:app)
app = create_app()
