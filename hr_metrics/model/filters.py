import abc
import dataclasses
import datetime
import typing

from hr_metrics.common import ALL
from hr_metrics.model.categories import CategoryIndex
from hr_metrics.model.entry import TimeEntryRow
from hr_metrics.model.week_range import within_week_range, validate_week_selection


@dataclasses.dataclass(frozen=True)
class FilterState:
    start_week: str = ALL
    end_week: str = ALL
    employee: str = ALL
    search: str = ''
    category: str = ALL

    @property
    def is_unrestricted(self) -> bool:
        return self == FilterState()

    @property
    def has_valid_week_range(self) -> bool:
        return validate_week_selection(self.start_week, self.end_week)

    def update(self, **changes):
        return dataclasses.replace(self, **{key: value for key, value in changes.items() if value is not None})

    def reset(self):
        return FilterState()


class RowCondition(abc.ABC):

    @abc.abstractmethod
    def matches(self, row: TimeEntryRow) -> bool:
        return True

    @property
    def active(self) -> bool:
        return True


class AllOfCondition(RowCondition):

    def __init__(self, conditions: typing.Iterable[RowCondition]):
        self._conditions = [condition for condition in conditions if condition.active]

    def matches(self, row: TimeEntryRow) -> bool:
        return all(condition.matches(row) for condition in self._conditions)

    @property
    def active(self) -> bool:
        return bool(self._conditions)


class WeekRangeCondition(RowCondition):

    def __init__(self, start_week=ALL, end_week=ALL, today: datetime.date = None):
        self._start_week = start_week or ALL
        self._end_week = end_week or ALL
        self._today = today

    @property
    def active(self) -> bool:
        return self._start_week != ALL or self._end_week != ALL

    def matches(self, row: TimeEntryRow) -> bool:
        return within_week_range(row.week_range, self._start_week, self._end_week, self._today)


class EmployeeCondition(RowCondition):

    def __init__(self, employee=ALL):
        self._employee = (employee or ALL).lower()

    @property
    def active(self) -> bool:
        return self._employee != ALL

    def matches(self, row: TimeEntryRow) -> bool:
        return self._employee in row.user.lower()


class SearchCondition(RowCondition):

    def __init__(self, query=''):
        self._query = (query or '').lower()

    @property
    def active(self) -> bool:
        return bool(self._query)

    def matches(self, row: TimeEntryRow) -> bool:
        return any(self._query in value.lower() for value in row.raw.values() if isinstance(value, str))


class CategoryCondition(RowCondition):

    def __init__(self, categories: CategoryIndex, category=ALL):
        self._category = category or ALL
        self._tasks = categories.tasks_of(self._category) if self.active else ()

    @property
    def active(self) -> bool:
        return self._category != ALL

    def matches(self, row: TimeEntryRow) -> bool:
        return any(row.hours_for(task) > 0 for task in self._tasks)


class FilterPipeline:

    def __init__(self, categories: CategoryIndex, today: datetime.date = None):
        self._categories = categories
        self._today = today

    def condition(self, state: FilterState) -> AllOfCondition:
        return AllOfCondition([
            WeekRangeCondition(state.start_week, state.end_week, self._today),
            EmployeeCondition(state.employee),
            SearchCondition(state.search),
            CategoryCondition(self._categories, state.category),
        ])

    def apply(self, rows: typing.Iterable[TimeEntryRow], state: FilterState) -> typing.List[TimeEntryRow]:
        condition = self.condition(state)
        if not condition.active:
            return list(rows)
        return [row for row in rows if condition.matches(row)]

    def __call__(self, rows, state: FilterState):
        return self.apply(rows, state)
