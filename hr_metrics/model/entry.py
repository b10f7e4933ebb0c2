import datetime
import logging
import typing

import dateutil.parser

from hr_metrics.common import (DATE_COLUMN, USER_COLUMN, WEEK_RANGE_COLUMN, META_COLUMNS, Result,
                               as_hours)
from hr_metrics.errors import ValidationError

logger = logging.getLogger(__name__)


def employee_key(user: str) -> str:
    return user.strip().lower().split('@')[0]


class EmployeeRates:

    def __init__(self, config: typing.Mapping[str, float]):
        rates = {employee_key(str(name)): float(rate) for name, rate in config.items()}
        if 'default' not in rates:
            raise ValidationError('missing default hourly rate', {'rates': sorted(rates)})
        for name, rate in rates.items():
            if rate < 0:
                raise ValidationError(f'negative hourly rate for {name}: {rate}')
        self._default = rates.pop('default')
        self._rates = rates

    def __contains__(self, name):
        return employee_key(name) in self._rates

    def __len__(self):
        return len(self._rates)

    @property
    def default(self) -> float:
        return self._default

    @property
    def employees(self) -> typing.List[str]:
        return list(self._rates)

    def rate_for(self, name) -> float:
        if not name:
            return self._default
        key = employee_key(name)
        if key not in self._rates:
            logger.debug('no hourly rate for %s, using default %.2f', key, self._default)
            return self._default
        return self._rates[key]


class TimeEntryRow:

    def __init__(self, user: str, week_range: str, hours: typing.Mapping[str, float], hourly_rate: float,
                 date=None, raw: typing.Mapping = None):
        self._user = user
        self._employee_key = employee_key(user)
        self._week_range = week_range
        self._hours = dict(hours)
        self._hourly_rate = hourly_rate
        self._date = date
        self._raw = dict(raw) if raw is not None else {
            DATE_COLUMN: date, USER_COLUMN: user, WEEK_RANGE_COLUMN: week_range, **self._hours}

    def __repr__(self):
        return f'TimeEntryRow({self._employee_key!r}, {self._week_range!r}, {self.total_hours:g}h)'

    @property
    def user(self) -> str:
        return self._user

    @property
    def employee_key(self) -> str:
        return self._employee_key

    @property
    def week_range(self) -> str:
        return self._week_range

    @property
    def hours(self) -> typing.Mapping[str, float]:
        return self._hours

    @property
    def hourly_rate(self) -> float:
        return self._hourly_rate

    @property
    def date(self):
        return self._date

    @property
    def raw(self) -> typing.Mapping:
        return self._raw

    @property
    def total_hours(self) -> float:
        return sum(self._hours.values())

    @property
    def parsed_date(self) -> typing.Optional[datetime.date]:
        if isinstance(self._date, datetime.date):
            return self._date
        if not isinstance(self._date, str) or not self._date.strip():
            return None
        try:
            return dateutil.parser.parse(self._date).date()
        except (ValueError, OverflowError):
            return None

    def hours_for(self, task: str) -> float:
        return self._hours.get(task, 0.0)

    def cost_for(self, task: str) -> float:
        return self.hours_for(task) * self._hourly_rate

    @property
    def tasks(self) -> typing.List[str]:
        return list(self._hours)

    @classmethod
    def from_record(cls, record: typing.Mapping, rates: EmployeeRates):
        user = record.get(USER_COLUMN)
        if user is None or not str(user).strip():
            raise ValidationError('missing User field', {'record': dict(record)})
        user = str(user)
        week_range = record.get(WEEK_RANGE_COLUMN)
        hours = {str(key): as_hours(value) for key, value in record.items() if key not in META_COLUMNS}
        return cls(user=user,
                   week_range='' if week_range is None else str(week_range),
                   hours=hours,
                   hourly_rate=rates.rate_for(user),
                   date=record.get(DATE_COLUMN),
                   raw=record)


def normalize_row(record: typing.Mapping, rates: EmployeeRates) -> TimeEntryRow:
    return TimeEntryRow.from_record(record, rates)


def load_rows(records: typing.Iterable[typing.Mapping], rates: EmployeeRates,
              header: typing.Iterable[str] = None) -> Result:
    records = list(records)
    if not records:
        return Result.failure(ValidationError('No data found in the CSV'))
    columns = set(header) if header is not None else set().union(*(record.keys() for record in records))
    if USER_COLUMN not in columns:
        return Result.failure(ValidationError(f'missing required column: {USER_COLUMN}',
                                              {'columns': sorted(columns)}))
    rows = []
    warnings = []
    for number, record in enumerate(records, start=1):
        try:
            rows.append(TimeEntryRow.from_record(record, rates))
        except ValidationError as e:
            logger.warning('skipping record %d: %s', number, e)
            warnings.append(f'record {number}: {e}')
    if not rows:
        return Result.failure(ValidationError('no usable rows in data', {'skipped': warnings}))
    return Result.success(rows, warnings)


def discover_tasks(rows: typing.Iterable[TimeEntryRow]) -> typing.List[str]:
    tasks = {}
    for row in rows:
        for task in row.tasks:
            tasks.setdefault(task, None)
    return list(tasks)
