"""Folds time entry rows into hours and cost buckets and chart series.

Buckets are always recomputed from scratch for the rows they are given;
cost is accumulated per row using that row's hourly rate, so a bucket fed by
several employees is not ``hours * one rate``.
"""
import dataclasses
import logging
import math
import typing

from hr_metrics.model.categories import CategoryIndex, NO_CATEGORY
from hr_metrics.model.colors import ColorCache
from hr_metrics.model.entry import TimeEntryRow, discover_tasks
from hr_metrics.model.week_range import sort_week_ranges

logger = logging.getLogger(__name__)

CATEGORY = 'category'
TASK = 'task'
GROUPING_MODES = (CATEGORY, TASK)

HOURS = 'hours'
COST = 'cost'
DISPLAY_MODES = (HOURS, COST)

TOP_SERIES = 3
MIN_TREND_WEEKS = 2

TOTAL_COLOR = '#FF5733'
TOTAL_FILL_COLOR = 'rgba(255, 87, 51, 0.8)'


def check_grouping(grouping: str) -> str:
    if grouping not in GROUPING_MODES:
        raise ValueError(f'unknown grouping mode: {grouping}, please provide one of {GROUPING_MODES}')
    return grouping


def check_display(display: str) -> str:
    if display not in DISPLAY_MODES:
        raise ValueError(f'unknown display mode: {display}, please provide one of {DISPLAY_MODES}')
    return display


def percentage(value: float, total: float) -> typing.Optional[float]:
    if not total:
        return None
    return math.floor(value / total * 1000 + 0.5) / 10


class AggregateBucket:

    def __init__(self, name: str, hours: float = 0.0, cost: float = 0.0,
                 by_employee: typing.Mapping[str, 'AggregateBucket'] = None):
        self._name = name
        self._hours = hours
        self._cost = cost
        self._by_employee = dict(by_employee or {})

    def __repr__(self):
        return f'AggregateBucket({self._name!r}, hours={self._hours:g}, cost={self._cost:.2f})'

    @property
    def name(self) -> str:
        return self._name

    @property
    def hours(self) -> float:
        return self._hours

    @property
    def cost(self) -> float:
        return self._cost

    @property
    def by_employee(self) -> typing.Mapping[str, 'AggregateBucket']:
        return self._by_employee

    def value(self, display: str) -> float:
        return self._cost if display == COST else self._hours

    def add(self, hours: float, cost: float, employee: str = None):
        self._hours += hours
        self._cost += cost
        if employee is not None:
            if employee not in self._by_employee:
                self._by_employee[employee] = AggregateBucket(employee)
            self._by_employee[employee].add(hours, cost)

    def merge(self, other, name: str = None):
        result = AggregateBucket(name or self._name, self._hours + other.hours, self._cost + other.cost)
        for bucket in (self, other):
            for employee, sub in bucket.by_employee.items():
                result.by_employee.setdefault(employee, AggregateBucket(employee))
                result.by_employee[employee].add(sub.hours, sub.cost)
        return result


@dataclasses.dataclass
class ChartItem:
    name: str
    hours: float
    cost: float
    type: str

    def value(self, display: str) -> float:
        return self.cost if display == COST else self.hours


@dataclasses.dataclass
class PieSlice:
    name: str
    value: float
    percentage: float

    @property
    def label(self) -> str:
        return f'{self.name}: {self.percentage:.1f}%'


@dataclasses.dataclass
class ActivityRanking:
    name: str
    hours: float
    cost: float
    percentage: float


@dataclasses.dataclass
class Dataset:
    label: str
    data: typing.List[float]
    color: str
    border_color: str


@dataclasses.dataclass
class Series:
    labels: typing.List[str]
    datasets: typing.List[Dataset]

    def __bool__(self):
        return bool(self.labels) and bool(self.datasets)

    @classmethod
    def empty(cls):
        return cls([], [])


@dataclasses.dataclass
class EmployeeSummary:
    employee: str
    total_hours: float
    total_cost: float
    weeks: typing.List[str]
    top_activity: typing.Optional[ActivityRanking]

    @property
    def weeks_count(self) -> int:
        return len(self.weeks)

    @property
    def weekly_average_hours(self) -> float:
        return self.total_hours / len(self.weeks) if self.weeks else 0.0

    @property
    def weekly_average_cost(self) -> float:
        return self.total_cost / len(self.weeks) if self.weeks else 0.0


class AggregationEngine:

    def __init__(self, categories: CategoryIndex, colors: ColorCache = None, today=None):
        self._categories = categories
        self._colors = colors
        self._today = today

    @property
    def categories(self) -> CategoryIndex:
        return self._categories

    @property
    def colors(self) -> typing.Optional[ColorCache]:
        return self._colors

    def vocabulary(self, rows: typing.Iterable[TimeEntryRow]) -> typing.List[str]:
        tasks = dict.fromkeys(self._categories.task_order)
        tasks.update(dict.fromkeys(self._categories.tasks))
        tasks.update(dict.fromkeys(discover_tasks(rows)))
        return list(tasks)

    def _fold(self, rows, key, tasks) -> typing.Dict[str, AggregateBucket]:
        buckets = {}
        for row in rows:
            for task in tasks:
                hours = row.hours_for(task)
                if hours > 0:
                    name = key(row, task)
                    if name not in buckets:
                        buckets[name] = AggregateBucket(name)
                    buckets[name].add(hours, hours * row.hourly_rate, row.employee_key)
        return buckets

    def task_buckets(self, rows: typing.Sequence[TimeEntryRow],
                     tasks: typing.Iterable[str] = None) -> typing.Dict[str, AggregateBucket]:
        tasks = list(tasks) if tasks is not None else self.vocabulary(rows)
        folded = self._fold(rows, lambda row, task: task, tasks)
        return {task: folded.get(task, AggregateBucket(task)) for task in tasks}

    def category_buckets(self, task_buckets: typing.Mapping[str, AggregateBucket]) -> typing.Dict[str, AggregateBucket]:
        result = {}
        for category in self._categories:
            bucket = AggregateBucket(category.name)
            for task in category.tasks:
                if task in task_buckets and task_buckets[task].hours > 0:
                    bucket = bucket.merge(task_buckets[task])
            result[category.name] = bucket
        return result

    def employee_buckets(self, rows: typing.Sequence[TimeEntryRow],
                         tasks: typing.Iterable[str] = None) -> typing.Dict[str, AggregateBucket]:
        tasks = list(tasks) if tasks is not None else self.vocabulary(rows)
        return self._fold(rows, lambda row, task: row.employee_key, tasks)

    def week_buckets(self, rows: typing.Sequence[TimeEntryRow],
                     tasks: typing.Iterable[str] = None) -> typing.Dict[str, AggregateBucket]:
        tasks = list(tasks) if tasks is not None else self.vocabulary(rows)
        folded = self._fold(rows, lambda row, task: row.week_range, tasks)
        weeks = sort_week_ranges((row.week_range for row in rows), self._today)
        return {week: folded.get(week, AggregateBucket(week)) for week in weeks}

    def grouped_buckets(self, rows: typing.Sequence[TimeEntryRow], grouping: str) -> typing.Dict[str, AggregateBucket]:
        task_buckets = self.task_buckets(rows)
        if check_grouping(grouping) == CATEGORY:
            return self.category_buckets(task_buckets)
        return task_buckets

    def chart_items(self, rows: typing.Sequence[TimeEntryRow], grouping: str) -> typing.List[ChartItem]:
        buckets = self.grouped_buckets(rows, grouping)
        if grouping == CATEGORY:
            items = [ChartItem(bucket.name, bucket.hours, bucket.cost, bucket.name)
                     for bucket in buckets.values() if bucket.hours > 0]
            return sorted(items, key=lambda item: -item.hours)
        items = [ChartItem(bucket.name, bucket.hours, bucket.cost, self._categories.category_of(bucket.name))
                 for bucket in buckets.values() if bucket.hours > 0]
        ordered = sorted((item for item in items if self._categories.task_position(item.name) is not None),
                         key=lambda item: self._categories.task_position(item.name))
        unordered = sorted((item for item in items if self._categories.task_position(item.name) is None),
                           key=lambda item: -item.hours)
        return ordered + unordered

    @staticmethod
    def pie_slices(items: typing.Sequence[ChartItem], display: str) -> typing.List[PieSlice]:
        total = sum(item.value(display) for item in items)
        if not total:
            return []
        return [PieSlice(item.name, item.value(display), percentage(item.value(display), total))
                for item in items if item.hours > 0]

    @staticmethod
    def most_time_activity(items: typing.Sequence[ChartItem]) -> typing.Optional[ActivityRanking]:
        ranked = sorted((item for item in items if item.hours > 0), key=lambda item: -item.hours)
        if not ranked:
            return None
        top = ranked[0]
        total_hours = sum(item.hours for item in ranked)
        return ActivityRanking(top.name, top.hours, top.cost, percentage(top.hours, total_hours))

    def top_groups(self, rows: typing.Sequence[TimeEntryRow], grouping: str, limit: int = TOP_SERIES) -> typing.List[str]:
        buckets = self.grouped_buckets(rows, grouping)
        ranked = sorted((bucket for bucket in buckets.values() if bucket.hours > 0), key=lambda bucket: -bucket.hours)
        return [bucket.name for bucket in ranked[:limit]]

    def weekly_trend(self, rows: typing.Sequence[TimeEntryRow], grouping: str, display: str) -> Series:
        check_grouping(grouping)
        check_display(display)
        weeks = sort_week_ranges((row.week_range for row in rows), self._today)
        if len(weeks) < MIN_TREND_WEEKS:
            return Series.empty()
        datasets = []
        for group in self.top_groups(rows, grouping):
            tasks = self._categories.tasks_of(group) if grouping == CATEGORY else (group,)
            buckets = self.week_buckets(rows, tasks)
            datasets.append(Dataset(group,
                                    [buckets[week].value(display) for week in weeks],
                                    self._color(group, grouping),
                                    self._border_color(group, grouping)))
        totals = self.week_buckets(rows)
        datasets.append(Dataset('Total Cost' if display == COST else 'Total Hours',
                                [totals[week].value(display) for week in weeks],
                                TOTAL_FILL_COLOR, TOTAL_COLOR))
        return Series(weeks, datasets)

    def employee_summary(self, rows: typing.Sequence[TimeEntryRow], employee: str,
                         grouping: str = TASK) -> EmployeeSummary:
        buckets = self.task_buckets(rows)
        total_hours = sum(bucket.hours for bucket in buckets.values())
        total_cost = sum(bucket.cost for bucket in buckets.values())
        weeks = sort_week_ranges((row.week_range for row in rows), self._today)
        return EmployeeSummary(employee, total_hours, total_cost, weeks,
                               self.most_time_activity(self.chart_items(rows, grouping)))

    @staticmethod
    def employees(rows: typing.Iterable[TimeEntryRow], known: typing.Iterable[str] = ()) -> typing.List[str]:
        seen = {employee: False for employee in known}
        for row in rows:
            seen[row.employee_key] = True
        return [employee for employee, present in seen.items() if present]

    def team_comparison(self, rows: typing.Sequence[TimeEntryRow], grouping: str, display: str,
                        employees: typing.Iterable[str] = ()) -> Series:
        check_display(display)
        employees = self.employees(rows, employees)
        buckets = self.grouped_buckets(rows, grouping)
        datasets = []
        for bucket in buckets.values():
            if bucket.hours <= 0:
                continue
            data = [bucket.by_employee[employee].value(display) if employee in bucket.by_employee else 0.0
                    for employee in employees]
            datasets.append(Dataset(bucket.name, data,
                                    self._color(bucket.name, grouping),
                                    self._border_color(bucket.name, grouping)))
        return Series(employees, datasets)

    def _color(self, name, grouping):
        if self._colors is None:
            return None
        return self._colors.color(name, grouping)

    def _border_color(self, name, grouping):
        if self._colors is None:
            return None
        return self._colors.border_color(name, grouping)


def uncategorized(items: typing.Iterable[ChartItem]) -> typing.List[str]:
    return [item.name for item in items if item.type == NO_CATEGORY]
