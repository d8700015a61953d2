"""Liveness endpoint for the API and its backing services."""
import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import get_async_session, get_settings
from core.config import Settings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["health"])


class HealthResponse(BaseModel):
    """
    Overall status, database reachability and which keyed integrations are set up.

    Integration flags are booleans only; secret values are never exposed.
    """

    status: str
    database: str
    integrations: dict[str, bool]


@router.get("/health", response_model=HealthResponse)
async def health_check(
    db: AsyncSession = Depends(get_async_session),
    settings: Settings = Depends(get_settings),
) -> HealthResponse:
    """Report "ok", or "degraded" when the database does not answer."""
    try:
        await db.execute(text("SELECT 1"))
        database = "healthy"
    except Exception:
        logger.exception("Database health check failed")
        database = "unhealthy"

    return HealthResponse(
        status="ok" if database == "healthy" else "degraded",
        database=database,
        integrations={
            "news": bool(settings.cryptopanic_key),
            "insight": bool(settings.hf_token),
            "auth": bool(settings.jwt_secret),
        },
    )
