"""Health check endpoint. Public, no auth required."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import APIRouter

from cadence.calendar.config_loader import ConfigValidationError, get_calendar_config
from cadence.config import get_settings
from cadence.services.supabase import get_pool

router = APIRouter(tags=["system"])
logger = logging.getLogger("cadence.health")


@router.get("/health")
async def health_check() -> dict:
    """Liveness probe. Returns 200 if the API process is up.

    Reports database reachability and the loaded calendar config version.
    """
    settings = get_settings()
    db_ok = False
    try:
        pool = get_pool()
        async with pool.acquire() as conn:
            await conn.fetchval("SELECT 1")
        db_ok = True
    except Exception as exc:
        logger.warning("Health check DB probe failed: %s", exc)

    try:
        config_version: str | None = get_calendar_config().version
    except (ConfigValidationError, OSError) as exc:
        logger.warning("Health check config probe failed: %s", exc)
        config_version = None

    healthy = db_ok and config_version is not None
    return {
        "status": "healthy" if healthy else "degraded",
        "version": settings.app_version,
        "environment": settings.environment,
        "database": "connected" if db_ok else "unreachable",
        "calendar_config": config_version,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
