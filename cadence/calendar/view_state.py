"""Calendar view state and carousel synchronisation.

One ``ViewState`` is owned by one controller.  All changes go through the
transition methods, which keep three things consistent:

- ``selected_date`` is always inside the visible range;
- ``selected_week_index`` points into the week grid of the shown month
  (the anchor's month, or the month of the day the viewer jumped to) and
  is recomputed whenever that month changes;
- on compact layouts ``carousel_index`` and ``selected_date`` name the same
  day of the visible-day sequence.

The carousel rule: whichever side the viewer touched is written, the other
is derived.  ``select_date`` asks the carousel to scroll (``scroll_to``);
``carousel_scrolled`` never does, so a scroll cannot echo back as another
scroll.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Callable

from cadence.calendar.dates import (
    DateRange,
    Granularity,
    range_for,
    shift_anchor,
    shift_months,
    week_start,
)
from cadence.calendar.week_grid import Week, week_index_containing, weeks_in_month

logger = logging.getLogger("cadence.calendar.view_state")


@dataclass(frozen=True)
class Transition:
    """What the host must do after a transition.

    Attributes:
        reload:    The visible range changed; records must be fetched again.
        scroll_to: Carousel position to scroll to, or None to leave it.
    """

    reload: bool = False
    scroll_to: int | None = None


def anchor_for(granularity: Granularity, day: date) -> date:
    """Anchor whose visible range contains ``day``."""
    if granularity is Granularity.month:
        return day
    return week_start(day)


class ViewState:
    """Granularity, anchor, selection and carousel position for one viewer.

    Args:
        granularity:  Initial granularity.
        anchor:       Initial anchor (a Sunday for week granularities).
        selected_date: Initial selection; must be visible.
        clock:        Returns the viewer's local "today".
        compact:      Track a carousel position (compact layouts).

    Attributes:
        month: First day of the month whose week grid is shown.
    """

    def __init__(
        self,
        granularity: Granularity,
        anchor: date,
        selected_date: date,
        clock: Callable[[], date],
        compact: bool = False,
    ) -> None:
        self.granularity = Granularity(granularity)
        self.anchor = anchor
        self.selected_date = selected_date
        self.compact = compact
        self._clock = clock

        if selected_date not in self.visible_range:
            raise ValueError(
                f"selected date {selected_date} outside visible range "
                f"{self.visible_range.first}..{self.visible_range.last}"
            )

        self.month = anchor.replace(day=1)
        self.selected_week_index = 0
        self.month_changed()
        self.carousel_index: int | None = None
        self._sync_carousel()

    @classmethod
    def initial(
        cls,
        clock: Callable[[], date],
        compact: bool = False,
        granularity: Granularity | None = None,
    ) -> ViewState:
        """Opening state: today selected, in month view (desktop) or week view (compact)."""
        today = clock()
        g = granularity or (Granularity.week if compact else Granularity.month)
        return cls(g, anchor_for(g, today), today, clock, compact=compact)

    # ------------------------------------------------------------------
    # Derived views
    # ------------------------------------------------------------------

    @property
    def visible_range(self) -> DateRange:
        return range_for(self.granularity, self.anchor)

    @property
    def visible_days(self) -> list[date]:
        """Linear day sequence shown by the carousel (and the range grid)."""
        return self.visible_range.days()

    @property
    def weeks(self) -> list[Week]:
        """Week grid of the shown month."""
        return weeks_in_month(self.month.year, self.month.month)

    @property
    def selected_week(self) -> Week:
        weeks = self.weeks
        if 0 <= self.selected_week_index < len(weeks):
            return weeks[self.selected_week_index]
        return []

    def today(self) -> date:
        return self._clock()

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def navigate(self, direction: int) -> Transition:
        """Step back (-1) or forward (+1): a month, or seven days."""
        self._reanchor(shift_anchor(self.granularity, self.anchor, direction))
        self._clamp_selection()
        return Transition(reload=True, scroll_to=self._sync_carousel())

    def select_date(self, day: date) -> Transition:
        """Select ``day`` and point the carousel at it.

        A day outside the visible range (for instance a padding cell from
        the neighbouring month) first moves the view to the range that
        contains it, which needs a reload.
        """
        reload = False
        if day not in self.visible_range:
            self._reanchor(anchor_for(self.granularity, day), shown=day)
            reload = True
        self.selected_date = day
        return Transition(reload=reload, scroll_to=self._sync_carousel())

    def select_week(self, index: int) -> Transition:
        """Week picker: make row ``index`` of the shown month's grid the selected week.

        Week views move to start on that row's Sunday, which may be a
        padding day; the shown month stays the same.  Month views only
        change the index.
        """
        weeks = self.weeks
        if not 0 <= index < len(weeks):
            raise IndexError(f"week index {index} outside 0..{len(weeks) - 1}")
        self.selected_week_index = index
        if self.granularity is Granularity.month:
            return Transition(scroll_to=self._sync_carousel())

        previous = self.visible_range
        self.anchor = weeks[index][0]
        self._clamp_selection()
        return Transition(
            reload=self.visible_range != previous, scroll_to=self._sync_carousel()
        )

    def carousel_scrolled(self, index: int) -> Transition:
        """The viewer swiped the carousel to ``index``; select that day.

        Only the selection is written; no scroll is requested back.
        """
        if not self.compact:
            raise RuntimeError("carousel_scrolled() on a layout without a carousel")
        days = self.visible_days
        if not 0 <= index < len(days):
            raise IndexError(f"carousel index {index} outside 0..{len(days) - 1}")
        self.selected_date = days[index]
        self.carousel_index = index
        return Transition()

    def set_granularity(self, granularity: Granularity | str) -> Transition:
        """Switch month / week / twoWeek around the selected date.

        The new range is the one containing the selected date, and the
        selected week becomes the row holding it.
        """
        g = Granularity(granularity)
        if g is self.granularity:
            return Transition()
        self.granularity = g
        self._reanchor(anchor_for(g, self.selected_date), shown=self.selected_date)
        self.selected_week_index = week_index_containing(self.weeks, self.selected_date) or 0
        return Transition(reload=True, scroll_to=self._sync_carousel())

    def jump_to_month(self, year: int, month: int) -> Transition:
        """Month picker: show ``year``/``month`` and select today's day of month there."""
        today = self._clock()
        target = shift_months(today, (year - today.year) * 12 + (month - today.month))
        self._reanchor(anchor_for(self.granularity, target), shown=target)
        self.selected_date = target
        return Transition(reload=True, scroll_to=self._sync_carousel())

    def month_changed(self) -> None:
        """Reset the selected week for a newly shown month.

        The row holding today (padding rows included) if the month's grid
        has one, otherwise 0.
        """
        self.selected_week_index = week_index_containing(self.weeks, self._clock()) or 0

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _reanchor(self, anchor: date, shown: date | None = None) -> None:
        """Move the anchor; ``shown`` picks the month whose grid is shown
        (defaults to the anchor's month)."""
        self.anchor = anchor
        month = (shown or anchor).replace(day=1)
        if month != self.month:
            logger.debug("Shown month changed %s → %s", self.month, month)
            self.month = month
            self.month_changed()

    def _clamp_selection(self) -> None:
        rng = self.visible_range
        if self.selected_date in rng:
            return
        today = self._clock()
        self.selected_date = today if today in rng else rng.first

    def _sync_carousel(self) -> int | None:
        """Derive the carousel position from the selection."""
        if not self.compact:
            return None
        days = self.visible_days
        if self.selected_date in days:
            self.carousel_index = days.index(self.selected_date)
        return self.carousel_index
