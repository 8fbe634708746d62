"""Shared fixtures and an in-memory record source for calendar engine tests."""

from __future__ import annotations

import asyncio
from datetime import date
from uuid import UUID

import pytest

from cadence.calendar.config_loader import CalendarConfig, load_calendar_config
from cadence.calendar.sources import RecordSource
from cadence.models.records import (
    CycleEvent,
    PhaseRecord,
    ReminderEvent,
    SymptomRecord,
    TrainingRecord,
)

# Canonical test user and "today" (a Friday; March 2024 starts on a Friday)
TEST_USER_ID = UUID("12345678-1234-5678-1234-567812345678")
TODAY = date(2024, 3, 15)


class FakeRecordSource(RecordSource):
    """Serves records from lists, filtered to the requested range.

    Attributes:
        fail:  Source names that raise instead of returning.
        gates: Range start date → event every fetch for that range waits on.
        calls: ``(source, start, end)`` for every call, in call order.
    """

    def __init__(
        self,
        phases: list[PhaseRecord] | None = None,
        events: list[CycleEvent] | None = None,
        symptoms: list[SymptomRecord] | None = None,
        trainings: list[TrainingRecord] | None = None,
        reminders: list[ReminderEvent] | None = None,
    ) -> None:
        self.phases = phases or []
        self.events = events or []
        self.symptoms = symptoms or []
        self.trainings = trainings or []
        self.reminders = reminders or []
        self.fail: set[str] = set()
        self.gates: dict[date, asyncio.Event] = {}
        self.calls: list[tuple[str, date, date]] = []

    async def _serve(self, name: str, rows: list, start: date, end: date) -> list:
        self.calls.append((name, start, end))
        gate = self.gates.get(start)
        if gate is not None:
            await gate.wait()
        if name in self.fail:
            raise RuntimeError(f"{name} unavailable")
        return [r for r in rows if start <= r.date <= end]

    async def get_phase_forecasts(self, user_id, start, end):
        return await self._serve("phase_forecasts", self.phases, start, end)

    async def get_cycle_events(self, user_id, start, end):
        return await self._serve("cycle_events", self.events, start, end)

    async def get_symptom_logs(self, user_id, start, end):
        return await self._serve("symptom_logs", self.symptoms, start, end)

    async def get_training_logs(self, user_id, start, end):
        return await self._serve("training_logs", self.trainings, start, end)

    async def get_reminder_events(self, user_id, start, end, status="taken"):
        rows = [r for r in self.reminders if r.status.value == status]
        return await self._serve("reminder_events", rows, start, end)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def calendar_config() -> CalendarConfig:
    """Load the real calendar config for tests."""
    return load_calendar_config()


@pytest.fixture
def clock():
    return lambda: TODAY


@pytest.fixture
def record_source() -> FakeRecordSource:
    """A realistic mix of records around TODAY."""
    return FakeRecordSource(
        phases=[
            PhaseRecord(date=date(2024, 3, 4), phase="menstrual", confidence=0.9),
            PhaseRecord(date=date(2024, 3, 12), phase="ovulatory", confidence=0.7),
            PhaseRecord(date=TODAY, phase="luteal", confidence=0.8),
            PhaseRecord(date=date(2024, 4, 2), phase="follicular"),
        ],
        events=[CycleEvent(date=date(2024, 3, 4), type="period_start")],
        symptoms=[
            SymptomRecord(date=date(2024, 3, 4), mood=5, cramps=3, bleeding_flow="heavy"),
            SymptomRecord(date=date(2024, 3, 13), energy=2, headache=True),
        ],
        trainings=[
            TrainingRecord(date=date(2024, 3, 4), workout_types=["run"], soreness=2),
            TrainingRecord(date=date(2024, 3, 13), training_load="rest"),
        ],
        reminders=[
            ReminderEvent(date=date(2024, 3, 4), status="taken"),
            ReminderEvent(date=date(2024, 3, 11), status="taken"),
            ReminderEvent(date=date(2024, 3, 12), status="skipped"),
            ReminderEvent(date=TODAY, status="taken"),
        ],
    )
