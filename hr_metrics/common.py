import csv
import io
import math
import typing

from hr_metrics.errors import DashboardError

DATE_COLUMN = 'Date'
USER_COLUMN = 'User'
WEEK_RANGE_COLUMN = 'Week Range'
META_COLUMNS = (DATE_COLUMN, USER_COLUMN, WEEK_RANGE_COLUMN)

ALL = 'all'


class Result:
    """Outcome of a load or apply action.

    A successful result may still carry warnings, which marks it as degraded
    (some records were skipped or stale data was served). A failed result
    carries the error instead of a value.
    """

    def __init__(self, value=None, error: DashboardError = None, warnings: typing.Iterable[str] = ()):
        if error is not None and value is not None:
            raise ValueError('result cannot carry both a value and an error')
        self._value = value
        self._error = error
        self._warnings = tuple(warnings)

    def __bool__(self):
        return self.ok

    def __repr__(self):
        if self.ok:
            return f'Result(ok, warnings={len(self._warnings)})'
        return f'Result(failed, {self._error.__class__.__name__}: {self._error})'

    @property
    def ok(self) -> bool:
        return self._error is None

    @property
    def degraded(self) -> bool:
        return self.ok and bool(self._warnings)

    @property
    def value(self):
        return self._value

    @property
    def error(self) -> typing.Optional[DashboardError]:
        return self._error

    @property
    def warnings(self) -> typing.Tuple[str, ...]:
        return self._warnings

    def unwrap(self):
        if self._error is not None:
            raise self._error
        return self._value

    @classmethod
    def success(cls, value, warnings: typing.Iterable[str] = ()):
        return cls(value, warnings=warnings)

    @classmethod
    def failure(cls, error: DashboardError):
        return cls(error=error)


def dynamic_value(value):
    """Types a raw CSV cell: blanks become None, numbers become float."""
    if value is None:
        return None
    if not isinstance(value, str):
        return value
    stripped = value.strip()
    if not stripped:
        return None
    try:
        number = float(stripped)
    except ValueError:
        return value
    if math.isnan(number) or math.isinf(number):
        return value
    return number


def as_hours(value) -> float:
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, str):
        value = dynamic_value(value)
        if not isinstance(value, float):
            return 0.0
    try:
        hours = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(hours) or math.isinf(hours) or hours < 0:
        return 0.0
    return hours


def format_hours(value: float) -> str:
    return f"{float(f'{value:.2f}'):g}"


def format_currency(value: float, decimals: int = 2) -> str:
    return f'${value:.{decimals}f}'


def parse_csv_text(text: str, delimiter=',') -> typing.List[dict]:
    reader = csv.DictReader(io.StringIO(text), delimiter=delimiter)
    return [typed_record(row) for row in reader if not is_empty_record(row)]


def typed_record(row: typing.Mapping) -> dict:
    return {key.strip(): dynamic_value(value) for key, value in row.items() if key is not None}


def is_empty_record(row: typing.Mapping) -> bool:
    return all(value is None or (isinstance(value, str) and not value.strip()) for value in row.values())


class CsvReader:

    def __init__(self, path, delimiter=','):
        self._path = path
        self._delimiter = delimiter

    def __enter__(self):
        self._file = open(self._path, newline='', encoding='utf-8-sig').__enter__()
        self._reader = csv.DictReader(self._file, delimiter=self._delimiter)
        return self

    @property
    def header(self) -> typing.List[str]:
        return [name.strip() for name in (self._reader.fieldnames or [])]

    def __iter__(self):
        for row in self._reader:
            if not is_empty_record(row):
                yield typed_record(row)

    def __exit__(self, exc_type, exc_val, exc_tb):
        self._file.__exit__(exc_type, exc_val, exc_tb)


class CsvWriter:

    def __init__(self, filepath, header=None):
        self._filepath = filepath
        self._header = header

    def __enter__(self):
        self._file = open(self._filepath, 'w+', newline='')
        self._writer = csv.writer(self._file)
        if self._header:
            self._writer.writerow(self._header)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self._file.close()

    def write(self, row: list):
        self._writer.writerow(row)
