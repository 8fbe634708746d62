"""Calendar endpoints: the multi-view calendar and the single-day page."""

from __future__ import annotations

import logging
from datetime import date
from typing import Any

from fastapi import APIRouter, HTTPException, Query

from cadence.calendar.config_loader import get_calendar_config
from cadence.calendar.controller import CalendarController
from cadence.calendar.dates import Granularity, InvalidDateKeyError, month_options, parse_date_key
from cadence.calendar.summary import build_cell, describe_day, weekly_supplement_adherence
from cadence.dependencies import CurrentUser, RecordStore, ViewerTimezone
from cadence.models.calendar import CalendarView, DayDetail, Layout

router = APIRouter(prefix="/calendar", tags=["calendar"])
logger = logging.getLogger("cadence.calendar.api")


def _parse_key(value: str | None, name: str) -> date | None:
    if value is None:
        return None
    try:
        return parse_date_key(value)
    except InvalidDateKeyError as exc:
        raise HTTPException(status_code=422, detail=f"{name}: {exc}") from exc


async def _focus(controller: CalendarController, *days: date | None) -> None:
    """Move the controller onto each given day in turn and make sure records are loaded."""
    reloaded = False
    for day in days:
        if day is not None:
            transition = await controller.select_date(day)
            reloaded = reloaded or transition.reload
    if not reloaded:
        await controller.load()


@router.get("", response_model=CalendarView)
async def get_calendar(
    user: CurrentUser,
    source: RecordStore,
    tz: ViewerTimezone,
    granularity: Granularity | None = Query(default=None),
    anchor: str | None = Query(default=None, description="YYYY-MM-DD inside the range to show"),
    selected: str | None = Query(default=None, description="YYYY-MM-DD to select"),
    layout: Layout = Query(default=Layout.desktop),
) -> Any:
    anchor_day = _parse_key(anchor, "anchor")
    selected_day = _parse_key(selected, "selected")
    config = get_calendar_config()

    controller = CalendarController(
        source,
        user.user_id,
        tz=tz,
        compact=layout is Layout.compact,
        granularity=granularity,
        config=config,
    )
    await _focus(controller, anchor_day, selected_day)
    snap = controller.snapshot()

    max_visible = config.indicators.max_visible
    return CalendarView(
        granularity=snap.granularity,
        layout=layout,
        label=snap.label,
        range_start=snap.range.first,
        range_end=snap.range.last,
        today=snap.today,
        selected_date=snap.selected_date,
        selected_week_index=snap.selected_week_index,
        carousel_index=snap.carousel_index,
        days=[build_cell(day, max_visible) for day in snap.days],
        weeks=snap.weeks,
        month_options=month_options(
            snap.today, config.month_picker.months_back, config.month_picker.count
        ),
        supplement_adherence=weekly_supplement_adherence(snap.taken_dates, snap.today),
        load_error=snap.load_error.message if snap.load_error else None,
        failed_sources=list(snap.load_error.failed_sources) if snap.load_error else [],
    )


@router.get("/{date_key}", response_model=DayDetail)
async def get_day(
    date_key: str,
    user: CurrentUser,
    source: RecordStore,
    tz: ViewerTimezone,
) -> Any:
    day = _parse_key(date_key, "date_key")
    config = get_calendar_config()

    controller = CalendarController(
        source, user.user_id, tz=tz, granularity=Granularity.week, config=config
    )
    await _focus(controller, day)

    model = next(m for m in controller.days if m.date == day)
    detail = describe_day(model, config.indicators.max_visible)
    if controller.load_error is not None:
        detail.load_error = controller.load_error.message
    return detail
