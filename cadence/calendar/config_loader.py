"""Load, validate, and hot-reload the calendar engine configuration.

The config lives in ``calendar_config.yaml`` alongside this module.  It is
loaded once and cached; ``reload_calendar_config()`` re-reads it from disk
without a restart.

Usage::

    from cadence.calendar.config_loader import get_calendar_config

    config = get_calendar_config()
    config.indicators.max_visible                 # 3
    config.default_granularity("compact")         # Granularity.week
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from cadence.calendar.dates import Granularity

logger = logging.getLogger("cadence.calendar.config")

_CONFIG_PATH = Path(__file__).parent / "calendar_config.yaml"

LAYOUTS: tuple[str, ...] = ("desktop", "compact")


# ---------------------------------------------------------------------------
# Typed config sections
# ---------------------------------------------------------------------------


@dataclass
class IndicatorConfig:
    """Badge settings.

    Attributes:
        max_visible:      Badges shown before the "+N" overflow.
        mood_positive_min: Lowest mood score shown as positive.
        mood_neutral:     Mood score shown as neutral; anything lower is negative.
    """

    max_visible: int = 3
    mood_positive_min: int = 4
    mood_neutral: int = 3


@dataclass
class MonthPickerConfig:
    months_back: int = 6
    count: int = 12


@dataclass
class CalendarConfig:
    """Complete, validated calendar configuration."""

    version: str
    indicators: IndicatorConfig
    month_picker: MonthPickerConfig
    layout_granularity: dict[str, Granularity]

    def default_granularity(self, layout: str) -> Granularity:
        """Granularity a fresh view opens with for ``layout``."""
        return self.layout_granularity.get(layout, Granularity.month)


# ---------------------------------------------------------------------------
# Loader / validation
# ---------------------------------------------------------------------------


class ConfigValidationError(ValueError):
    """Raised when calendar_config.yaml fails validation."""


def _load_yaml(path: Path) -> dict:
    if not path.exists():
        raise FileNotFoundError(f"Calendar config not found: {path}")

    with path.open("r", encoding="utf-8") as fh:
        try:
            return yaml.safe_load(fh) or {}
        except yaml.YAMLError as exc:
            raise ConfigValidationError(f"YAML parse error in {path}: {exc}") from exc


def _validate_and_build(raw: dict) -> CalendarConfig:
    """Validate the raw YAML dict and construct a CalendarConfig.

    Collects every problem before raising so one edit can fix them all.

    Raises:
        ConfigValidationError: If any value is missing its expected shape.
    """
    errors: list[str] = []

    def _int(section: dict, key: str, default: int, where: str, minimum: int = 0) -> int:
        value = section.get(key, default)
        try:
            number = int(value)
        except (TypeError, ValueError):
            errors.append(f"{where}.{key} must be an integer, got {value!r}")
            return default
        if number < minimum:
            errors.append(f"{where}.{key} = {number} must be >= {minimum}")
        return number

    version = str(raw.get("version", "1.0"))

    # ── Indicators ──
    ind_raw: dict[str, Any] = raw.get("indicators") or {}
    mood_raw: dict[str, Any] = ind_raw.get("mood") or {}
    indicators = IndicatorConfig(
        max_visible=_int(ind_raw, "max_visible", 3, "indicators", minimum=1),
        mood_positive_min=_int(mood_raw, "positive_min", 4, "indicators.mood", minimum=1),
        mood_neutral=_int(mood_raw, "neutral", 3, "indicators.mood", minimum=1),
    )
    if indicators.mood_neutral >= indicators.mood_positive_min:
        errors.append(
            "indicators.mood.neutral must be below indicators.mood.positive_min "
            f"({indicators.mood_neutral} >= {indicators.mood_positive_min})"
        )

    # ── Month picker ──
    mp_raw: dict[str, Any] = raw.get("month_picker") or {}
    month_picker = MonthPickerConfig(
        months_back=_int(mp_raw, "months_back", 6, "month_picker"),
        count=_int(mp_raw, "count", 12, "month_picker", minimum=1),
    )

    # ── Layouts ──
    layouts_raw: dict[str, Any] = raw.get("layouts") or {}
    layout_granularity: dict[str, Granularity] = {
        "desktop": Granularity.month,
        "compact": Granularity.week,
    }
    for name, cfg in layouts_raw.items():
        if name not in LAYOUTS:
            errors.append(f"layouts.{name} is not a known layout ({', '.join(LAYOUTS)})")
            continue
        value = (cfg or {}).get("granularity")
        try:
            layout_granularity[name] = Granularity(value)
        except ValueError:
            errors.append(f"layouts.{name}.granularity must be month/week/twoWeek, got {value!r}")

    if errors:
        raise ConfigValidationError(
            f"calendar_config.yaml has {len(errors)} validation error(s):\n"
            + "\n".join(f"  • {e}" for e in errors)
        )

    return CalendarConfig(
        version=version,
        indicators=indicators,
        month_picker=month_picker,
        layout_granularity=layout_granularity,
    )


def load_calendar_config(path: Path | None = None) -> CalendarConfig:
    """Load and validate the calendar config from disk."""
    target = path or _CONFIG_PATH
    config = _validate_and_build(_load_yaml(target))
    logger.info("Loaded calendar config v%s from %s", config.version, target)
    return config


# ---------------------------------------------------------------------------
# Global singleton with hot-reload support
# ---------------------------------------------------------------------------

_config: CalendarConfig | None = None
_config_lock = threading.Lock()


def get_calendar_config() -> CalendarConfig:
    """Return the global CalendarConfig, loading it on first call. Thread-safe."""
    global _config
    if _config is None:
        with _config_lock:
            if _config is None:
                _config = load_calendar_config()
    return _config


def reload_calendar_config(path: Path | None = None) -> CalendarConfig:
    """Re-read the config and swap the singleton.

    The new file is validated before the swap; on failure the old config
    stays active and the error propagates.
    """
    global _config
    new_config = load_calendar_config(path)
    with _config_lock:
        old_version = _config.version if _config else "none"
        _config = new_config
    logger.info("Reloaded calendar config: %s → %s", old_version, new_config.version)
    return new_config
