"""Health check endpoint.

Learn: Simple GET endpoint that verifies the server is running and the
database answers. Open route — no auth, no CORS requirement.
"""

from datetime import datetime, timezone

import structlog
from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from sentinent import __version__
from sentinent.db.engine import get_db

logger = structlog.get_logger()

router = APIRouter()


@router.get("/health")
async def health_check(db: AsyncSession = Depends(get_db)):
    """Check server health and database connectivity."""
    try:
        await db.execute(text("SELECT 1"))
        database = "ok"
    except (SQLAlchemyError, OSError) as e:
        logger.warning("health.database_unavailable", error=str(e))
        database = "unavailable"

    return {
        "status": "ok" if database == "ok" else "degraded",
        "service": "sentinent-backend",
        "version": __version__,
        "database": database,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
