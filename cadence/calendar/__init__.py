"""Cadence calendar engine.

Joins per-date records from five sources into immutable day view models
and keeps the month / week / two-week views and the compact day carousel
consistent while the viewer navigates.

Core modules:
    dates         DateKey parsing, "today", ranges per granularity
    week_grid     Sunday-first month grids with real padding dates
    sources       RecordSource ABC for the external record store
    join          Date-keyed join into DayViewModel
    indicators    Ordered day badges and phase colour buckets
    view_state    Selection / week index / carousel transitions
    controller    Concurrent loading with stale-result rejection
    summary       Day cells, day details, weekly supplement count
    config_loader Load/validate/hot-reload calendar_config.yaml
"""

from cadence.calendar.config_loader import CalendarConfig, get_calendar_config
from cadence.calendar.dates import (
    DateRange,
    Granularity,
    InvalidDateKeyError,
    date_key,
    parse_date_key,
    range_for,
    today,
)
from cadence.calendar.week_grid import weeks_in_month

__all__ = [
    "CalendarConfig",
    "DateRange",
    "Granularity",
    "InvalidDateKeyError",
    "date_key",
    "get_calendar_config",
    "parse_date_key",
    "range_for",
    "today",
    "weeks_in_month",
]
