"""Cadence API: FastAPI application entry point.

Run locally:
    uvicorn cadence.main:app --reload --port 8000
"""

from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from cadence.calendar.config_loader import get_calendar_config
from cadence.config import get_settings
from cadence.middleware.supabase_auth import SupabaseAuthMiddleware
from cadence.routers import calendar, health
from cadence.services.supabase import close_pool, init_pool

# ---------- Logging ----------

logging.basicConfig(
    level=get_settings().log_level.upper(),
    format="%(asctime)s %(levelname)-8s %(name)s — %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    stream=sys.stdout,
)
logger = logging.getLogger("cadence")


# ---------- Lifespan ----------

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup / shutdown hooks."""
    settings = get_settings()
    logger.info(
        "Starting Cadence API v%s [%s]",
        settings.app_version,
        settings.environment,
    )
    get_calendar_config()
    await init_pool(settings)
    yield
    await close_pool()
    logger.info("Cadence API shut down")


# ---------- App factory ----------

def create_app() -> FastAPI:
    settings = get_settings()

    app = FastAPI(
        title="Cadence API",
        description=(
            "Cycle-aware wellness calendar: phase forecasts, symptoms, "
            "training and supplement reminders joined per day."
        ),
        version=settings.app_version,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # ---------- Middleware (the last one added runs first) ----------

    # Supabase JWT authentication
    app.add_middleware(SupabaseAuthMiddleware, settings=settings)

    # CORS, outermost so preflight is answered before auth
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ---------- Health check (outside v1 prefix, always at /health) ----------
    app.include_router(health.router)

    # ---------- API v1 routes ----------
    v1_prefix = "/api/v1"

    app.include_router(calendar.router, prefix=v1_prefix)

    return app


app = create_app()
