"""Pydantic models for the per-date records the calendar reads:
phase forecasts, cycle events, symptom logs, training logs, reminder events."""

from __future__ import annotations

from datetime import date as DateType
from datetime import datetime, timezone, tzinfo
from enum import Enum
from typing import Any

from pydantic import Field, field_validator

from cadence.models.base import FrozenBase


# ---------- Enums ----------

class Phase(str, Enum):
    menstrual = "menstrual"
    follicular = "follicular"
    ovulatory = "ovulatory"
    luteal = "luteal"
    unknown = "unknown"


class BleedingFlow(str, Enum):
    light = "light"
    medium = "medium"
    heavy = "heavy"


class TrainingLoad(str, Enum):
    rest = "rest"
    easy = "easy"
    moderate = "moderate"
    hard = "hard"


class ReminderStatus(str, Enum):
    sent = "sent"
    taken = "taken"
    skipped = "skipped"


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


def _none_to_empty(value: Any) -> Any:
    return [] if value is None else value


# ---------- Phase forecasts ----------

class PhaseRecord(FrozenBase):
    """Externally predicted phase for one date. Read-only here."""

    date: DateType
    phase: Phase = Phase.unknown
    confidence: float | None = Field(default=None, ge=0, le=1)

    @field_validator("phase", mode="before")
    @classmethod
    def _coerce_phase(cls, value: Any) -> Any:
        # Predictor output outside the known set is shown as unknown.
        try:
            return Phase(value)
        except ValueError:
            return Phase.unknown


# ---------- Cycle events ----------

class CycleEvent(FrozenBase):
    date: DateType
    type: str | None = None


# ---------- Symptom logs ----------

class SymptomRecord(FrozenBase):
    date: DateType
    mood: int | None = Field(default=None, ge=1, le=5)
    energy: int | None = Field(default=None, ge=1, le=5)
    sleep: int | None = Field(default=None, ge=1, le=5)
    cramps: int | None = Field(default=None, ge=0, le=5)
    bloating: int | None = Field(default=None, ge=0, le=5)
    headache: bool = False
    breast_tenderness: bool = False
    nausea: bool = False
    gas: bool = False
    toilet_issues: bool = False
    hot_flushes: bool = False
    chills: bool = False
    stress_headache: bool = False
    dizziness: bool = False
    ovulation: bool = False
    bleeding_flow: BleedingFlow | None = None
    craving_types: list[str] = Field(default_factory=list)
    mood_states: list[str] = Field(default_factory=list)
    notes: str | None = None

    @field_validator("bleeding_flow", "notes", mode="before")
    @classmethod
    def _blank_text(cls, value: Any) -> Any:
        return _blank_to_none(value)

    @field_validator("craving_types", "mood_states", mode="before")
    @classmethod
    def _null_list(cls, value: Any) -> Any:
        return _none_to_empty(value)

    @field_validator(
        "headache", "breast_tenderness", "nausea", "gas", "toilet_issues",
        "hot_flushes", "chills", "stress_headache", "dizziness", "ovulation",
        mode="before",
    )
    @classmethod
    def _null_flag(cls, value: Any) -> Any:
        return False if value is None else value


# ---------- Training logs ----------

class TrainingRecord(FrozenBase):
    date: DateType
    training_load: TrainingLoad | None = None
    soreness: int | None = Field(default=None, ge=0, le=5)
    fatigue: int | None = Field(default=None, ge=0, le=5)
    workout_types: list[str] = Field(default_factory=list)
    pb_type: str | None = None
    pb_value: str | None = None
    notes: str | None = None

    @field_validator("training_load", "pb_type", "pb_value", "notes", mode="before")
    @classmethod
    def _blank_text(cls, value: Any) -> Any:
        return _blank_to_none(value)

    @field_validator("workout_types", mode="before")
    @classmethod
    def _null_list(cls, value: Any) -> Any:
        return _none_to_empty(value)


# ---------- Reminder events ----------

class ReminderEvent(FrozenBase):
    """A supplement reminder occurrence, keyed by the viewer-local date of
    ``scheduled_for``."""

    date: DateType
    status: ReminderStatus
    channel: str | None = None
    scheduled_for: datetime | None = None

    @classmethod
    def from_timestamp(
        cls,
        scheduled_for: datetime,
        status: str,
        channel: str | None,
        tz: tzinfo,
    ) -> ReminderEvent:
        """Build an event from a stored timestamp, truncated to the viewer's date.

        Naive timestamps are taken to be UTC, matching ``timestamptz`` rows.
        """
        if scheduled_for.tzinfo is None:
            scheduled_for = scheduled_for.replace(tzinfo=timezone.utc)
        local = scheduled_for.astimezone(tz)
        return cls(
            date=local.date(),
            status=status,
            channel=channel,
            scheduled_for=scheduled_for,
        )
