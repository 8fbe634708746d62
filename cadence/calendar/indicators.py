"""Display badges and phase colour buckets for a day.

Badge order is part of the display contract: period, mood, training,
supplement.  Phase itself is never a badge, only a colour.
"""

from __future__ import annotations

from cadence.calendar.config_loader import IndicatorConfig
from cadence.models.calendar import DayViewModel, Indicator, PhaseColor
from cadence.models.records import Phase

_PHASE_COLORS: dict[Phase, PhaseColor] = {
    Phase.menstrual: PhaseColor.menstrual,
    Phase.follicular: PhaseColor.follicular,
    Phase.ovulatory: PhaseColor.ovulatory,
    Phase.luteal: PhaseColor.luteal,
}

_DEFAULT_INDICATORS = IndicatorConfig()


def mood_indicator(mood: int, config: IndicatorConfig | None = None) -> Indicator:
    cfg = config or _DEFAULT_INDICATORS
    if mood >= cfg.mood_positive_min:
        return Indicator.mood_positive
    if mood == cfg.mood_neutral:
        return Indicator.mood_neutral
    return Indicator.mood_negative


def indicators_for(
    model: DayViewModel, config: IndicatorConfig | None = None
) -> list[Indicator]:
    """Ordered badge tokens for ``model``.

    - period:     a cycle event, or bleeding flow logged
    - mood:       positive / neutral / negative from the mood score, or
                  ``logged`` when symptoms exist without a mood
    - training:   at least one workout type logged
    - supplement: a taken reminder that day
    """
    tokens: list[Indicator] = []
    symptom = model.symptom

    if model.has_event or (symptom is not None and symptom.bleeding_flow is not None):
        tokens.append(Indicator.period)

    if symptom is not None:
        if symptom.mood is not None:
            tokens.append(mood_indicator(symptom.mood, config))
        else:
            tokens.append(Indicator.logged)

    if model.training is not None and model.training.workout_types:
        tokens.append(Indicator.training)

    if model.reminder_taken:
        tokens.append(Indicator.supplement)

    return tokens


def phase_color_class(model: DayViewModel) -> PhaseColor:
    """Colour bucket for the day's phase. Total: anything unmapped is neutral."""
    if model.phase is None:
        return PhaseColor.neutral
    return _PHASE_COLORS.get(model.phase.phase, PhaseColor.neutral)


def split_indicators(
    tokens: list[Indicator] | tuple[Indicator, ...], limit: int
) -> tuple[list[Indicator], int]:
    """Badges to draw and how many collapse into the "+N" marker."""
    shown = list(tokens[:limit])
    return shown, len(tokens) - len(shown)
