"""Per-day cells and detail summaries built from day view models."""

from __future__ import annotations

from datetime import date
from typing import Iterable

from cadence.calendar.dates import week_start
from cadence.calendar.indicators import phase_color_class, split_indicators
from cadence.models.calendar import DayCell, DayDetail, DayViewModel

# Labels for 1-based severity scores; 0 means "not present"
_SEVERITY_4 = ("Mild", "Moderate", "Severe", "Extreme")
_SEVERITY_3 = ("Mild", "Moderate", "Severe")

SYMPTOM_FLAGS: tuple[str, ...] = (
    "headache",
    "breast_tenderness",
    "nausea",
    "gas",
    "toilet_issues",
    "hot_flushes",
    "chills",
    "stress_headache",
    "dizziness",
    "ovulation",
)


def severity_label(score: int | None, scale: tuple[str, ...]) -> str | None:
    if not score:
        return None
    return scale[min(score, len(scale)) - 1]


def build_cell(model: DayViewModel, max_visible: int) -> DayCell:
    shown, hidden = split_indicators(model.indicators, max_visible)
    return DayCell(
        day=model,
        phase_color=phase_color_class(model),
        shown_indicators=shown,
        hidden_indicator_count=hidden,
    )


def describe_day(model: DayViewModel, max_visible: int) -> DayDetail:
    """Everything the day page shows for one date."""
    symptom = model.symptom
    training = model.training
    return DayDetail(
        cell=build_cell(model, max_visible),
        indicator_count=len(model.indicators),
        cramps_label=severity_label(symptom.cramps, _SEVERITY_4) if symptom else None,
        bloating_label=severity_label(symptom.bloating, _SEVERITY_4) if symptom else None,
        soreness_label=severity_label(training.soreness, _SEVERITY_3) if training else None,
        fatigue_label=severity_label(training.fatigue, _SEVERITY_3) if training else None,
        active_symptoms=[f for f in SYMPTOM_FLAGS if symptom and getattr(symptom, f)],
    )


def weekly_supplement_adherence(taken_dates: Iterable[date], today: date) -> str:
    """``"n/7"``: days from this week's Sunday through today with a taken reminder."""
    start = week_start(today)
    days = {d for d in taken_dates if start <= d <= today}
    return f"{len(days)}/7"
