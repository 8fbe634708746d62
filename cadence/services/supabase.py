"""Supabase Postgres access with RLS context.

Every query runs in a transaction where the caller's identity is set the
way PostgREST sets it (``role authenticated`` plus ``request.jwt.claims``),
so the same Row-Level Security policies that guard the client apply here.

Uses ``asyncpg`` for direct database access; the Supabase Python client
cannot scope claims to a single transaction.
"""

from __future__ import annotations

import json
import logging
import uuid
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator

import asyncpg

from cadence.config import Settings, get_settings

logger = logging.getLogger("cadence.db")

# Module-level connection pool, initialized once at app startup
_pool: asyncpg.Pool | None = None


async def init_pool(settings: Settings | None = None) -> asyncpg.Pool:
    """Create the asyncpg connection pool. Call once at app startup."""
    global _pool
    s = settings or get_settings()
    _pool = await asyncpg.create_pool(
        s.supabase_db_url,
        min_size=2,
        max_size=20,
        command_timeout=30,
    )
    logger.info("Database pool initialized (min=2, max=20)")
    return _pool


async def close_pool() -> None:
    """Drain the pool. Call at app shutdown."""
    global _pool
    if _pool:
        await _pool.close()
        _pool = None
        logger.info("Database pool closed")


def get_pool() -> asyncpg.Pool:
    if _pool is None:
        raise RuntimeError("Database pool not initialized; call init_pool() first")
    return _pool


@asynccontextmanager
async def get_connection(
    user_id: uuid.UUID | None = None,
) -> AsyncGenerator[asyncpg.Connection, None]:
    """Acquire a connection acting as ``user_id`` under RLS.

    Usage::

        async with get_connection(user_id=user.user_id) as conn:
            rows = await conn.fetch("SELECT * FROM symptom_logs WHERE date = $1", day)

    Both settings are transaction-local and vanish when the connection
    returns to the pool.
    """
    pool = get_pool()
    async with pool.acquire() as conn:
        async with conn.transaction():
            if user_id:
                claims = json.dumps({"sub": str(user_id), "role": "authenticated"})
                await conn.execute("SET LOCAL role authenticated")
                await conn.execute(
                    "SELECT set_config('request.jwt.claims', $1, true)", claims
                )
            yield conn


async def fetch(
    query: str,
    *args: Any,
    user_id: uuid.UUID | None = None,
) -> list[asyncpg.Record]:
    """Fetch rows with RLS context."""
    async with get_connection(user_id=user_id) as conn:
        return await conn.fetch(query, *args)
