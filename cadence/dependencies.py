"""Shared FastAPI dependencies injected into route handlers."""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Annotated
from zoneinfo import ZoneInfo

from fastapi import Depends, HTTPException, Query, Request

from cadence.calendar.dates import InvalidTimezoneError, resolve_timezone
from cadence.calendar.sources import RecordSource
from cadence.config import Settings, get_settings
from cadence.services.record_store import SupabaseRecordStore


@dataclass(frozen=True)
class AuthContext:
    """Authenticated user context extracted from the Supabase access token."""

    user_id: uuid.UUID  # auth.users.id, the `sub` claim
    email: str | None = None
    session_id: str | None = None
    role: str | None = None


async def get_current_user(request: Request) -> AuthContext:
    """Extract the authenticated user from the request state.

    The Supabase auth middleware sets ``request.state.auth`` before routes run.
    """
    auth: AuthContext | None = getattr(request.state, "auth", None)
    if auth is None:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return auth


def get_viewer_timezone(
    tz: str | None = Query(default=None, description="IANA zone, e.g. Europe/Oslo"),
    settings: Settings = Depends(get_settings),
) -> ZoneInfo:
    try:
        return resolve_timezone(tz or settings.default_timezone)
    except InvalidTimezoneError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc


def get_record_source(tz: ZoneInfo = Depends(get_viewer_timezone)) -> RecordSource:
    return SupabaseRecordStore(tz)


# Annotated shortcuts for route signatures
CurrentUser = Annotated[AuthContext, Depends(get_current_user)]
ViewerTimezone = Annotated[ZoneInfo, Depends(get_viewer_timezone)]
RecordStore = Annotated[RecordSource, Depends(get_record_source)]
