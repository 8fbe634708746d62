"""Record source interface consumed by the calendar engine.

The five per-date streams live in an external store.  The engine only
reads them, one inclusive date range at a time.  Implementations must
return records already keyed to the viewer's local calendar (reminder
timestamps truncated via :meth:`ReminderEvent.from_timestamp`).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date
from uuid import UUID

from cadence.models.records import (
    CycleEvent,
    PhaseRecord,
    ReminderEvent,
    SymptomRecord,
    TrainingRecord,
)

# Names used in load-error reporting, in fetch order
SOURCE_NAMES: tuple[str, ...] = (
    "phase_forecasts",
    "cycle_events",
    "symptom_logs",
    "training_logs",
    "reminder_events",
)


class RecordSource(ABC):
    """Read-only access to a user's calendar records.

    Every method may raise on network, auth or server errors; the caller
    treats each failure independently.
    """

    @abstractmethod
    async def get_phase_forecasts(
        self, user_id: UUID, start: date, end: date
    ) -> list[PhaseRecord]:
        """Phase forecasts for ``start``..``end`` inclusive."""

    @abstractmethod
    async def get_cycle_events(
        self, user_id: UUID, start: date, end: date
    ) -> list[CycleEvent]:
        """Cycle events for ``start``..``end`` inclusive."""

    @abstractmethod
    async def get_symptom_logs(
        self, user_id: UUID, start: date, end: date
    ) -> list[SymptomRecord]:
        """Symptom logs for ``start``..``end`` inclusive."""

    @abstractmethod
    async def get_training_logs(
        self, user_id: UUID, start: date, end: date
    ) -> list[TrainingRecord]:
        """Training logs for ``start``..``end`` inclusive."""

    @abstractmethod
    async def get_reminder_events(
        self, user_id: UUID, start: date, end: date, status: str = "taken"
    ) -> list[ReminderEvent]:
        """Reminder events with ``status`` whose local date is in range."""
