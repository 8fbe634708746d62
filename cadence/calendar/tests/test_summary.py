"""Tests for grid cells, day details and the weekly supplement count."""

from __future__ import annotations

from datetime import date

from cadence.calendar.join import RecordSet, build_day_view_model
from cadence.calendar.summary import (
    build_cell,
    describe_day,
    severity_label,
    weekly_supplement_adherence,
)
from cadence.calendar.tests.conftest import TODAY
from cadence.models.calendar import Indicator, PhaseColor
from cadence.models.records import (
    CycleEvent,
    PhaseRecord,
    ReminderEvent,
    SymptomRecord,
    TrainingRecord,
)

DAY = date(2024, 3, 4)


def busy_day():
    records = RecordSet(
        phases=[PhaseRecord(date=DAY, phase="menstrual")],
        events=[CycleEvent(date=DAY, type="period_start")],
        symptoms=[SymptomRecord(date=DAY, mood=2, cramps=3, bloating=0, nausea=True, chills=True)],
        trainings=[TrainingRecord(date=DAY, workout_types=["yoga"], soreness=1, fatigue=3)],
        reminders=[ReminderEvent(date=DAY, status="taken")],
    )
    return build_day_view_model(DAY, TODAY, DAY, records)


class TestCell:
    def test_overflow_marker(self) -> None:
        cell = build_cell(busy_day(), max_visible=3)
        assert cell.phase_color is PhaseColor.menstrual
        assert cell.shown_indicators == [
            Indicator.period,
            Indicator.mood_negative,
            Indicator.training,
        ]
        assert cell.hidden_indicator_count == 1

    def test_empty_day(self) -> None:
        model = build_day_view_model(DAY, TODAY, None, RecordSet.empty())
        cell = build_cell(model, max_visible=3)
        assert cell.phase_color is PhaseColor.neutral
        assert cell.shown_indicators == []
        assert cell.hidden_indicator_count == 0


class TestDetail:
    def test_labels(self) -> None:
        detail = describe_day(busy_day(), max_visible=3)
        assert detail.indicator_count == 4
        assert detail.cramps_label == "Severe"
        assert detail.bloating_label is None
        assert detail.soreness_label == "Mild"
        assert detail.fatigue_label == "Severe"
        assert detail.active_symptoms == ["nausea", "chills"]
        assert detail.load_error is None

    def test_no_logs(self) -> None:
        model = build_day_view_model(DAY, TODAY, None, RecordSet.empty())
        detail = describe_day(model, max_visible=3)
        assert detail.cramps_label is None
        assert detail.active_symptoms == []

    def test_severity_scale(self) -> None:
        scale = ("Mild", "Moderate", "Severe", "Extreme")
        assert severity_label(None, scale) is None
        assert severity_label(0, scale) is None
        assert severity_label(1, scale) == "Mild"
        assert severity_label(4, scale) == "Extreme"
        # Scores above the scale keep its top label
        assert severity_label(5, scale) == "Extreme"
        assert severity_label(5, ("Mild", "Moderate", "Severe")) == "Severe"


class TestSupplementAdherence:
    def test_counts_days_since_sunday(self) -> None:
        # TODAY is Friday Mar 15; the week started Sunday Mar 10
        taken = {date(2024, 3, 9), date(2024, 3, 10), date(2024, 3, 13), TODAY, date(2024, 3, 16)}
        assert weekly_supplement_adherence(taken, TODAY) == "3/7"

    def test_nothing_taken(self) -> None:
        assert weekly_supplement_adherence(frozenset(), TODAY) == "0/7"
