"""Date-keyed join of the five record streams into per-day view models.

Each source is loaded once for the whole visible range (at most 42 days),
then indexed by date here.  Lookups never fail: a day with no rows in a
source simply has that part of its view model empty.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Iterable, Sequence, TypeVar

from cadence.calendar.config_loader import IndicatorConfig
from cadence.calendar.indicators import indicators_for
from cadence.models.calendar import DayViewModel
from cadence.models.records import (
    CycleEvent,
    PhaseRecord,
    ReminderEvent,
    ReminderStatus,
    SymptomRecord,
    TrainingRecord,
)

logger = logging.getLogger("cadence.calendar.join")

R = TypeVar("R", PhaseRecord, SymptomRecord, TrainingRecord)


def _first_per_date(records: Iterable[R], source: str) -> dict[date, R]:
    """Index single-row-per-date sources. The earliest row in the input wins."""
    index: dict[date, R] = {}
    for record in records:
        if record.date in index:
            logger.debug("Duplicate %s row for %s ignored", source, record.date)
            continue
        index[record.date] = record
    return index


class RecordSet:
    """The five sources for one visible range, indexed by date.

    Args:
        phases:    Phase forecasts.
        events:    Cycle events (many per date collapse to presence).
        symptoms:  Symptom logs.
        trainings: Training logs.
        reminders: Reminder events; only ``taken`` ones count.
        failed_sources: Names of sources whose fetch failed for this range.
    """

    def __init__(
        self,
        phases: Sequence[PhaseRecord] = (),
        events: Sequence[CycleEvent] = (),
        symptoms: Sequence[SymptomRecord] = (),
        trainings: Sequence[TrainingRecord] = (),
        reminders: Sequence[ReminderEvent] = (),
        failed_sources: Sequence[str] = (),
    ) -> None:
        self.failed_sources: tuple[str, ...] = tuple(failed_sources)
        self._phases = _first_per_date(phases, "phase_forecasts")
        self._symptoms = _first_per_date(symptoms, "symptom_logs")
        self._trainings = _first_per_date(trainings, "training_logs")
        self._event_dates = frozenset(e.date for e in events)
        self._taken_dates = frozenset(
            r.date for r in reminders if r.status is ReminderStatus.taken
        )

    @classmethod
    def empty(cls) -> RecordSet:
        return cls()

    def phase_for(self, day: date) -> PhaseRecord | None:
        return self._phases.get(day)

    def has_event(self, day: date) -> bool:
        return day in self._event_dates

    def symptom_for(self, day: date) -> SymptomRecord | None:
        return self._symptoms.get(day)

    def training_for(self, day: date) -> TrainingRecord | None:
        return self._trainings.get(day)

    def reminder_taken(self, day: date) -> bool:
        return day in self._taken_dates

    @property
    def taken_dates(self) -> frozenset[date]:
        return self._taken_dates


def build_day_view_model(
    day: date,
    today: date,
    selected: date | None,
    records: RecordSet,
    indicator_config: IndicatorConfig | None = None,
) -> DayViewModel:
    """Assemble the view model for one day.

    Pure: identical inputs give equal outputs.
    """
    model = DayViewModel(
        date=day,
        is_today=day == today,
        is_selected=day == selected,
        phase=records.phase_for(day),
        has_event=records.has_event(day),
        symptom=records.symptom_for(day),
        training=records.training_for(day),
        reminder_taken=records.reminder_taken(day),
    )
    return model.model_copy(
        update={"indicators": tuple(indicators_for(model, indicator_config))}
    )


def build_day_view_models(
    days: Iterable[date],
    today: date,
    selected: date | None,
    records: RecordSet,
    indicator_config: IndicatorConfig | None = None,
) -> list[DayViewModel]:
    return [
        build_day_view_model(day, today, selected, records, indicator_config)
        for day in days
    ]
