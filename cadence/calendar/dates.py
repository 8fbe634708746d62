"""Date arithmetic for the calendar views.

Everything here is pure.  "Today" is always derived from the viewer's time
zone through :func:`today` so that every comparison in the engine agrees on
which calendar day it is.  DateKey strings (``YYYY-MM-DD``) exist only at the
edges: :func:`date_key` formats them, :func:`parse_date_key` validates them.
"""

from __future__ import annotations

import calendar
import re
from dataclasses import dataclass
from datetime import date, datetime, timedelta, tzinfo
from enum import Enum
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

_DATE_KEY_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class Granularity(str, Enum):
    month = "month"
    week = "week"
    two_week = "twoWeek"


# Days covered by the week-based granularities
_SPAN_DAYS: dict[Granularity, int] = {
    Granularity.week: 7,
    Granularity.two_week: 14,
}


class InvalidDateKeyError(ValueError):
    """Raised for a DateKey that is not a real ``YYYY-MM-DD`` date."""


class InvalidTimezoneError(ValueError):
    """Raised for an unknown IANA time zone name."""


@dataclass(frozen=True)
class DateRange:
    """Inclusive ``[first, last]`` span of calendar days."""

    first: date
    last: date

    def __post_init__(self) -> None:
        if self.last < self.first:
            raise ValueError(f"DateRange ends before it starts: {self.first} > {self.last}")

    def __contains__(self, day: object) -> bool:
        return isinstance(day, date) and self.first <= day <= self.last

    def __len__(self) -> int:
        return (self.last - self.first).days + 1

    def days(self) -> list[date]:
        return days_in_range(self)


# ---------------------------------------------------------------------------
# DateKey / "today"
# ---------------------------------------------------------------------------


def date_key(day: date) -> str:
    """Format a calendar date as a DateKey.

    Datetimes are rejected: truncating one here would silently use whatever
    zone it happens to carry.  Convert to the viewer's zone first.
    """
    if isinstance(day, datetime):
        raise TypeError("date_key() needs a date; convert datetimes to the viewer's zone first")
    return day.isoformat()


def parse_date_key(value: str) -> date:
    """Parse a strict ``YYYY-MM-DD`` DateKey.

    Raises:
        InvalidDateKeyError: For anything else, including real dates in
            other formats.  Nothing is coerced.
    """
    if not isinstance(value, str) or not _DATE_KEY_RE.match(value):
        raise InvalidDateKeyError(f"Not a YYYY-MM-DD date key: {value!r}")
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise InvalidDateKeyError(f"Not a calendar date: {value!r}") from exc


def resolve_timezone(name: str) -> ZoneInfo:
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise InvalidTimezoneError(f"Unknown time zone: {name!r}") from exc


def today(tz: tzinfo) -> date:
    """The viewer's current calendar date."""
    return datetime.now(tz).date()


# ---------------------------------------------------------------------------
# Calendar arithmetic
# ---------------------------------------------------------------------------


def month_range(year: int, month: int) -> DateRange:
    """First through last day of a month (handles 28–31 days and leap years)."""
    _, last_day = calendar.monthrange(year, month)
    return DateRange(date(year, month, 1), date(year, month, last_day))


def week_start(day: date) -> date:
    """The Sunday on or before ``day``."""
    return day - timedelta(days=(day.weekday() + 1) % 7)


def shift_months(day: date, months: int) -> date:
    """Move ``day`` by whole calendar months, clamping the day of month.

    ``shift_months(date(2024, 1, 31), 1) == date(2024, 2, 29)``
    """
    index = day.year * 12 + (day.month - 1) + months
    year, month0 = divmod(index, 12)
    _, last_day = calendar.monthrange(year, month0 + 1)
    return date(year, month0 + 1, min(day.day, last_day))


def range_for(granularity: Granularity | str, anchor: date) -> DateRange:
    """Visible range for a granularity and anchor date.

    - month:   the whole calendar month containing ``anchor``
    - week:    ``[anchor, anchor + 6]`` (anchor is a Sunday week start)
    - twoWeek: ``[anchor, anchor + 13]``

    Raises:
        ValueError: For an unknown granularity.
    """
    g = Granularity(granularity)
    if g is Granularity.month:
        return month_range(anchor.year, anchor.month)
    return DateRange(anchor, anchor + timedelta(days=_SPAN_DAYS[g] - 1))


def shift_anchor(granularity: Granularity | str, anchor: date, direction: int) -> date:
    """Anchor one step back (``-1``) or forward (``+1``).

    Month views move by a calendar month; week views move by seven days in
    both week and two-week mode.
    """
    if direction not in (-1, 1):
        raise ValueError(f"direction must be -1 or +1, got {direction!r}")
    if Granularity(granularity) is Granularity.month:
        return shift_months(anchor, direction)
    return anchor + timedelta(days=7 * direction)


def days_in_range(rng: DateRange) -> list[date]:
    return [rng.first + timedelta(days=i) for i in range(len(rng))]


# ---------------------------------------------------------------------------
# Labels / pickers
# ---------------------------------------------------------------------------


def month_options(current: date, months_back: int = 6, count: int = 12) -> list[date]:
    """Dates offered by the month-jump picker, oldest first.

    Each option keeps ``current``'s day of month (clamped), starting
    ``months_back`` months before ``current``.
    """
    return [shift_months(current, offset - months_back) for offset in range(count)]


def range_label(granularity: Granularity | str, rng: DateRange) -> str:
    """Header text: ``"March 2024"`` or ``"Mar 3 - Mar 16"``."""
    if Granularity(granularity) is Granularity.month:
        return f"{calendar.month_name[rng.first.month]} {rng.first.year}"
    first, last = rng.first, rng.last
    return (
        f"{calendar.month_abbr[first.month]} {first.day} - "
        f"{calendar.month_abbr[last.month]} {last.day}"
    )
