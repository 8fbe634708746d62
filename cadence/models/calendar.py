"""Pydantic models produced by the calendar engine and returned by the API."""

from __future__ import annotations

from datetime import date as DateType
from enum import Enum

from pydantic import Field, computed_field

from cadence.calendar.dates import Granularity
from cadence.models.base import CadenceBase, FrozenBase
from cadence.models.records import PhaseRecord, SymptomRecord, TrainingRecord


# ---------- Enums ----------

class Indicator(str, Enum):
    """Badge tokens, listed in display order."""

    period = "period"
    mood_positive = "mood_positive"
    mood_neutral = "mood_neutral"
    mood_negative = "mood_negative"
    logged = "logged"
    training = "training"
    supplement = "supplement"


class PhaseColor(str, Enum):
    menstrual = "menstrual"
    follicular = "follicular"
    ovulatory = "ovulatory"
    luteal = "luteal"
    neutral = "neutral"


class Layout(str, Enum):
    desktop = "desktop"
    compact = "compact"


# ---------- Day view model ----------

class DayViewModel(FrozenBase):
    """Everything known about one visible day, joined across sources.

    Built fresh on every load or selection change; never edited.
    """

    date: DateType
    is_today: bool = False
    is_selected: bool = False
    phase: PhaseRecord | None = None
    has_event: bool = False
    symptom: SymptomRecord | None = None
    training: TrainingRecord | None = None
    reminder_taken: bool = False
    indicators: tuple[Indicator, ...] = ()

    @computed_field  # type: ignore[prop-decorator]
    @property
    def key(self) -> str:
        return self.date.isoformat()


# ---------- API responses ----------

class DayCell(CadenceBase):
    day: DayViewModel
    phase_color: PhaseColor
    shown_indicators: list[Indicator] = Field(default_factory=list)
    hidden_indicator_count: int = 0


class DayDetail(CadenceBase):
    """Expanded view of a single day (the day page / badge drawer)."""

    cell: DayCell
    indicator_count: int
    cramps_label: str | None = None
    bloating_label: str | None = None
    soreness_label: str | None = None
    fatigue_label: str | None = None
    active_symptoms: list[str] = Field(default_factory=list)
    load_error: str | None = None


class CalendarView(CadenceBase):
    granularity: Granularity
    layout: Layout
    label: str
    range_start: DateType
    range_end: DateType
    today: DateType
    selected_date: DateType
    selected_week_index: int
    carousel_index: int | None = None
    days: list[DayCell] = Field(default_factory=list)
    weeks: list[list[DateType]] = Field(default_factory=list)
    month_options: list[DateType] = Field(default_factory=list)
    supplement_adherence: str
    load_error: str | None = None
    failed_sources: list[str] = Field(default_factory=list)
