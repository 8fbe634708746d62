"""Calendar controller: ties view state, record loading and the day join together.

On every navigation the controller recomputes the visible range, fetches
the five record sources for it concurrently, and rebuilds one immutable
``DayViewModel`` per visible day.

Loading rules:

- the five fetches are settled independently; a failing source leaves the
  other four rendered and produces a single ``CalendarLoadError``;
- every load carries a generation number and only the newest generation
  is applied, so a slow load for an old range cannot overwrite a newer one.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import date, tzinfo
from typing import Callable
from uuid import UUID

from cadence.calendar.config_loader import CalendarConfig, get_calendar_config
from cadence.calendar.dates import DateRange, Granularity, range_label, today
from cadence.calendar.join import RecordSet, build_day_view_models
from cadence.calendar.sources import SOURCE_NAMES, RecordSource
from cadence.calendar.view_state import Transition, ViewState
from cadence.calendar.week_grid import Week
from cadence.models.calendar import DayViewModel

logger = logging.getLogger("cadence.calendar.controller")


class CalendarLoadError(RuntimeError):
    """One or more record sources could not be loaded for a range.

    Attributes:
        failed_sources: Source names that failed, in fetch order.
        causes:         Source name → the exception it raised.
        range:          The range that was being loaded.
    """

    message = "Couldn't load calendar data"

    def __init__(self, causes: dict[str, Exception], rng: DateRange) -> None:
        self.causes = causes
        self.failed_sources: tuple[str, ...] = tuple(causes)
        self.range = rng
        super().__init__(
            f"{self.message} for {rng.first}..{rng.last}: {', '.join(self.failed_sources)}"
        )


@dataclass(frozen=True)
class CalendarSnapshot:
    """Read-only picture of the controller after the last applied change."""

    granularity: Granularity
    compact: bool
    label: str
    range: DateRange
    today: date
    selected_date: date
    selected_week_index: int
    carousel_index: int | None
    days: tuple[DayViewModel, ...]
    weeks: list[Week]
    selected_week: Week
    taken_dates: frozenset[date] = field(default_factory=frozenset)
    load_error: CalendarLoadError | None = None


async def fetch_records(
    source: RecordSource, user_id: UUID, rng: DateRange
) -> tuple[RecordSet, dict[str, Exception]]:
    """Fetch all five sources for ``rng`` concurrently, settling each one.

    Returns:
        The record set built from every source that succeeded, and a map
        of failed source name → exception.
    """
    results = await asyncio.gather(
        source.get_phase_forecasts(user_id, rng.first, rng.last),
        source.get_cycle_events(user_id, rng.first, rng.last),
        source.get_symptom_logs(user_id, rng.first, rng.last),
        source.get_training_logs(user_id, rng.first, rng.last),
        source.get_reminder_events(user_id, rng.first, rng.last, status="taken"),
        return_exceptions=True,
    )

    loaded: dict[str, list] = {}
    failures: dict[str, Exception] = {}
    for name, result in zip(SOURCE_NAMES, results):
        if isinstance(result, Exception):
            logger.warning(
                "Failed to load %s for %s..%s: %s", name, rng.first, rng.last, result
            )
            failures[name] = result
            loaded[name] = []
        elif isinstance(result, BaseException):
            raise result
        else:
            loaded[name] = list(result)

    records = RecordSet(
        phases=loaded["phase_forecasts"],
        events=loaded["cycle_events"],
        symptoms=loaded["symptom_logs"],
        trainings=loaded["training_logs"],
        reminders=loaded["reminder_events"],
        failed_sources=tuple(failures),
    )
    return records, failures


class CalendarController:
    """Owns one viewer's calendar: state, loaded records, day models.

    Usage::

        controller = CalendarController(store, user_id, tz=ZoneInfo("Europe/Oslo"))
        await controller.load()
        await controller.navigate(+1)
        snapshot = controller.snapshot()

    Args:
        source:        Where records come from.
        user_id:       Whose records to read.
        tz:            The viewer's time zone; defines "today".
        compact:       Compact layout (carousel) instead of desktop.
        granularity:   Opening granularity; defaults per layout from config.
        config:        Calendar config (defaults to the global one).
        on_load_error: Called once per applied load that had failures.
        clock:         Override for "today" (tests).
    """

    def __init__(
        self,
        source: RecordSource,
        user_id: UUID,
        *,
        tz: tzinfo,
        compact: bool = False,
        granularity: Granularity | None = None,
        config: CalendarConfig | None = None,
        on_load_error: Callable[[CalendarLoadError], None] | None = None,
        clock: Callable[[], date] | None = None,
    ) -> None:
        self._source = source
        self._user_id = user_id
        self._config = config or get_calendar_config()
        self._on_load_error = on_load_error
        self._clock = clock or (lambda: today(tz))
        layout = "compact" if compact else "desktop"
        self.state = ViewState.initial(
            self._clock,
            compact=compact,
            granularity=granularity or self._config.default_granularity(layout),
        )
        self._generation = 0
        self._records = RecordSet.empty()
        self._days: tuple[DayViewModel, ...] = ()
        self.load_error: CalendarLoadError | None = None
        self._rebuild()

    @property
    def days(self) -> tuple[DayViewModel, ...]:
        return self._days

    @property
    def records(self) -> RecordSet:
        return self._records

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    async def load(self) -> bool:
        """(Re)load records for the visible range.

        Returns:
            True if this load was applied, False if a newer load
            superseded it while it was in flight.
        """
        self._generation += 1
        generation = self._generation
        rng = self.state.visible_range
        logger.debug("Loading %s..%s (generation %d)", rng.first, rng.last, generation)

        records, failures = await fetch_records(self._source, self._user_id, rng)

        if generation != self._generation:
            logger.debug(
                "Discarding stale load %s..%s (generation %d, current %d)",
                rng.first, rng.last, generation, self._generation,
            )
            return False

        self._records = records
        self.load_error = CalendarLoadError(failures, rng) if failures else None
        self._rebuild()
        if self.load_error is not None and self._on_load_error is not None:
            self._on_load_error(self.load_error)
        return True

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    async def navigate(self, direction: int) -> Transition:
        return await self._apply(self.state.navigate(direction))

    async def select_date(self, day: date) -> Transition:
        return await self._apply(self.state.select_date(day))

    async def select_week(self, index: int) -> Transition:
        return await self._apply(self.state.select_week(index))

    async def set_granularity(self, granularity: Granularity | str) -> Transition:
        return await self._apply(self.state.set_granularity(granularity))

    async def jump_to_month(self, year: int, month: int) -> Transition:
        return await self._apply(self.state.jump_to_month(year, month))

    def carousel_scrolled(self, index: int) -> Transition:
        transition = self.state.carousel_scrolled(index)
        self._rebuild()
        return transition

    async def _apply(self, transition: Transition) -> Transition:
        if transition.reload:
            # Selection flags must move immediately even while records load
            self._rebuild()
            await self.load()
        else:
            self._rebuild()
        return transition

    def _rebuild(self) -> None:
        self._days = tuple(
            build_day_view_models(
                self.state.visible_days,
                self.state.today(),
                self.state.selected_date,
                self._records,
                self._config.indicators,
            )
        )

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def snapshot(self) -> CalendarSnapshot:
        state = self.state
        rng = state.visible_range
        return CalendarSnapshot(
            granularity=state.granularity,
            compact=state.compact,
            label=range_label(state.granularity, rng),
            range=rng,
            today=state.today(),
            selected_date=state.selected_date,
            selected_week_index=state.selected_week_index,
            carousel_index=state.carousel_index,
            days=self._days,
            weeks=state.weeks,
            selected_week=state.selected_week,
            taken_dates=self._records.taken_dates,
            load_error=self.load_error,
        )
