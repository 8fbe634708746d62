"""RecordSource backed by the Supabase Postgres tables.

Tables (all keyed by ``user_id``):
    phase_forecasts  (date, phase, confidence)
    cycle_events     (date, type)
    symptom_logs     (date, mood, energy, ...)
    training_logs    (date, training_load, workout_types, ...)
    reminder_events  (scheduled_for timestamptz, status, channel)
"""

from __future__ import annotations

import logging
from datetime import date, datetime, time, timedelta, tzinfo
from typing import Any, Callable, Iterable, TypeVar
from uuid import UUID

from pydantic import ValidationError

from cadence.calendar.sources import RecordSource
from cadence.models.records import (
    CycleEvent,
    PhaseRecord,
    ReminderEvent,
    SymptomRecord,
    TrainingRecord,
)
from cadence.services.supabase import fetch

logger = logging.getLogger("cadence.db.records")

T = TypeVar("T")


def _build_rows(rows: Iterable[Any], build: Callable[[Any], T], table: str) -> list[T]:
    """Convert rows one at a time, skipping (and logging) any that fail validation."""
    records: list[T] = []
    for row in rows:
        try:
            records.append(build(row))
        except ValidationError as exc:
            logger.warning("Skipping invalid %s row: %s", table, exc)
    return records


class SupabaseRecordStore(RecordSource):
    """Reads calendar records for one viewer.

    Args:
        tz: The viewer's time zone. Reminder timestamps are bucketed into
            this zone's calendar days.
    """

    def __init__(self, tz: tzinfo) -> None:
        self._tz = tz

    async def get_phase_forecasts(
        self, user_id: UUID, start: date, end: date
    ) -> list[PhaseRecord]:
        rows = await fetch(
            """
            SELECT date, phase, confidence FROM phase_forecasts
            WHERE user_id = $1 AND date >= $2 AND date <= $3
            ORDER BY date
            """,
            user_id, start, end,
            user_id=user_id,
        )
        return _build_rows(rows, lambda r: PhaseRecord.model_validate(dict(r)), "phase_forecasts")

    async def get_cycle_events(
        self, user_id: UUID, start: date, end: date
    ) -> list[CycleEvent]:
        rows = await fetch(
            """
            SELECT date, type FROM cycle_events
            WHERE user_id = $1 AND date >= $2 AND date <= $3
            ORDER BY date
            """,
            user_id, start, end,
            user_id=user_id,
        )
        return _build_rows(rows, lambda r: CycleEvent.model_validate(dict(r)), "cycle_events")

    async def get_symptom_logs(
        self, user_id: UUID, start: date, end: date
    ) -> list[SymptomRecord]:
        rows = await fetch(
            """
            SELECT * FROM symptom_logs
            WHERE user_id = $1 AND date >= $2 AND date <= $3
            ORDER BY date
            """,
            user_id, start, end,
            user_id=user_id,
        )
        return _build_rows(rows, lambda r: SymptomRecord.model_validate(dict(r)), "symptom_logs")

    async def get_training_logs(
        self, user_id: UUID, start: date, end: date
    ) -> list[TrainingRecord]:
        rows = await fetch(
            """
            SELECT * FROM training_logs
            WHERE user_id = $1 AND date >= $2 AND date <= $3
            ORDER BY date
            """,
            user_id, start, end,
            user_id=user_id,
        )
        return _build_rows(rows, lambda r: TrainingRecord.model_validate(dict(r)), "training_logs")

    async def get_reminder_events(
        self, user_id: UUID, start: date, end: date, status: str = "taken"
    ) -> list[ReminderEvent]:
        # Local midnight at the start of `start` up to local midnight after `end`
        window_start = datetime.combine(start, time.min, tzinfo=self._tz)
        window_end = datetime.combine(end + timedelta(days=1), time.min, tzinfo=self._tz)
        rows = await fetch(
            """
            SELECT scheduled_for, status, channel FROM reminder_events
            WHERE user_id = $1 AND status = $2
              AND scheduled_for >= $3 AND scheduled_for < $4
            ORDER BY scheduled_for
            """,
            user_id, status, window_start, window_end,
            user_id=user_id,
        )
        events = _build_rows(
            rows,
            lambda r: ReminderEvent.from_timestamp(
                r["scheduled_for"], r["status"], r["channel"], self._tz
            ),
            "reminder_events",
        )
        logger.debug("Loaded %d %s reminder events for %s..%s", len(events), status, start, end)
        return events
