"""Sunday-first month grids.

Every week holds exactly seven real dates.  Leading cells walk backward
from the 1st into the previous month and trailing cells run forward into
the next, so a search over the grid never meets an empty slot.
"""

from __future__ import annotations

from datetime import date, timedelta

from cadence.calendar.dates import month_range, week_start

Week = list[date]


def weeks_in_month(year: int, month: int) -> list[Week]:
    """Ordered weeks covering ``year``/``month``.

    Concatenating the weeks and keeping only dates in the month yields
    days 1..last in order, each exactly once.
    """
    rng = month_range(year, month)
    padding = (rng.first - week_start(rng.first)).days

    # Previous-month padding, oldest first
    current: Week = [rng.first - timedelta(days=padding - i) for i in range(padding)]
    weeks: list[Week] = []

    day = rng.first
    while day <= rng.last:
        current.append(day)
        if len(current) == 7:
            weeks.append(current)
            current = []
        day += timedelta(days=1)

    if current:
        while len(current) < 7:
            current.append(current[-1] + timedelta(days=1))
        weeks.append(current)

    return weeks


def week_index_containing(weeks: list[Week], day: date) -> int | None:
    """Row of ``day`` in ``weeks`` (padding cells count), or None."""
    for index, week in enumerate(weeks):
        if day in week:
            return index
    return None
