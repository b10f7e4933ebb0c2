import dataclasses
import logging
import threading
import time
import typing

from hr_metrics.common import Result
from hr_metrics.context import DashboardContext
from hr_metrics.errors import ValidationError
from hr_metrics.model.aggregation import CATEGORY, HOURS, GROUPING_MODES, DISPLAY_MODES
from hr_metrics.model.entry import TimeEntryRow
from hr_metrics.model.filters import FilterState

logger = logging.getLogger(__name__)


class RecomputeScheduler:
    """Trailing-edge debounce with cancel-on-supersede.

    Every ``request`` supersedes the pending one and restarts the window.
    ``poll`` runs the computation once the window has passed. A result is
    only applied while its ticket is still the latest request and no newer
    ticket has been applied.
    """

    def __init__(self, compute: typing.Callable[[], typing.Any], window: float = 0.25,
                 clock: typing.Callable[[], float] = time.monotonic):
        self._compute = compute
        self._window = window
        self._clock = clock
        self._lock = threading.Lock()
        self._latest = 0
        self._applied = 0
        self._pending = None
        self._deadline = None

    @property
    def pending(self) -> typing.Optional[int]:
        return self._pending

    @property
    def latest(self) -> int:
        return self._latest

    @property
    def applied(self) -> int:
        return self._applied

    def request(self) -> int:
        with self._lock:
            self._latest += 1
            self._pending = self._latest
            self._deadline = self._clock() + self._window
            return self._latest

    def cancel(self):
        with self._lock:
            self._pending = None
            self._deadline = None

    def take(self) -> typing.Optional[int]:
        with self._lock:
            if self._pending is None or self._clock() < self._deadline:
                return None
            ticket, self._pending, self._deadline = self._pending, None, None
            return ticket

    def accept(self, ticket: int) -> bool:
        with self._lock:
            if ticket != self._latest or ticket <= self._applied:
                logger.debug('dropping superseded recomputation %d (latest %d)', ticket, self._latest)
                return False
            self._applied = ticket
            return True

    def poll(self):
        ticket = self.take()
        if ticket is None:
            return None
        result = self._compute()
        return result if self.accept(ticket) else None

    def flush(self):
        with self._lock:
            if self._pending is not None:
                self._deadline = self._clock()
        return self.poll()


@dataclasses.dataclass(frozen=True)
class DashboardView:
    generation: int
    filter_state: FilterState
    grouping: str
    display: str
    rows: typing.Tuple[TimeEntryRow, ...]
    filtered: typing.Tuple[TimeEntryRow, ...]


class DashboardState:

    def __init__(self, context: DashboardContext, today=None, clock: typing.Callable[[], float] = time.monotonic):
        self._context = context
        self._today = today
        self._lock = threading.Lock()
        self._rows = ()
        self._generation = 0
        self._filters = FilterState()
        self._grouping = CATEGORY
        self._display = HOURS
        self._view = None
        self._scheduler = RecomputeScheduler(self.recompute, context.debounce, clock)

    @property
    def context(self) -> DashboardContext:
        return self._context

    @property
    def scheduler(self) -> RecomputeScheduler:
        return self._scheduler

    @property
    def filters(self) -> FilterState:
        return self._filters

    @property
    def grouping(self) -> str:
        return self._grouping

    @property
    def display(self) -> str:
        return self._display

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def rows(self) -> typing.Tuple[TimeEntryRow, ...]:
        return self._rows

    @property
    def view(self) -> typing.Optional[DashboardView]:
        return self._view

    def commit_rows(self, rows: typing.Iterable[TimeEntryRow]) -> int:
        rows = tuple(rows)
        with self._lock:
            self._rows = rows
            self._generation += 1
            logger.debug('committed %d rows as generation %d', len(rows), self._generation)
            return self._generation

    def apply_filters(self, **changes) -> Result:
        with self._lock:
            try:
                candidate = self._filters.update(**changes)
            except TypeError as e:
                return Result.failure(ValidationError(str(e)))
            if not candidate.has_valid_week_range:
                return Result.failure(ValidationError('start week must not be after end week',
                                                      {'start': candidate.start_week, 'end': candidate.end_week}))
            self._filters = candidate
        self._scheduler.request()
        return Result.success(candidate)

    def reset_filters(self) -> FilterState:
        with self._lock:
            self._filters = self._filters.reset()
        self._scheduler.request()
        return self._filters

    def set_modes(self, grouping: str = None, display: str = None) -> Result:
        if grouping is not None and grouping not in GROUPING_MODES:
            return Result.failure(ValidationError(f'invalid level mode: {grouping}'))
        if display is not None and display not in DISPLAY_MODES:
            return Result.failure(ValidationError(f'invalid display mode: {display}'))
        with self._lock:
            self._grouping = grouping or self._grouping
            self._display = display or self._display
        self._scheduler.request()
        return Result.success((self._grouping, self._display))

    def snapshot(self):
        with self._lock:
            return self._generation, self._rows, self._filters, self._grouping, self._display

    def recompute(self) -> DashboardView:
        generation, rows, filters, grouping, display = self.snapshot()
        filtered = tuple(self._context.pipeline(self._today).apply(rows, filters))
        return DashboardView(generation, filters, grouping, display, rows, filtered)

    def poll(self) -> typing.Optional[DashboardView]:
        view = self._scheduler.poll()
        if view is not None:
            self._view = view
        return view

    def refresh(self) -> DashboardView:
        self._scheduler.request()
        view = self._scheduler.flush()
        if view is not None:
            self._view = view
        return self._view

    def reload_config(self, config: typing.Mapping) -> DashboardContext:
        self._context.colors.clear()
        self._context = DashboardContext(config)
        self._scheduler.request()
        return self._context
