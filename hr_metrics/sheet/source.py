import csv
import logging
import os
import typing

from hr_metrics.common import CsvReader, Result
from hr_metrics.errors import DataFetchError, ValidationError
from hr_metrics.model.cache import DataCache
from hr_metrics.model.entry import EmployeeRates, load_rows
from hr_metrics.sheet.api import SpreadsheetAPI

logger = logging.getLogger(__name__)

ROWS_KEY = 'rows'


class DataSource:
    """Loads time entry rows from the spreadsheet or a local CSV file.

    Fresh rows are served from the time-boxed cache. When the spreadsheet
    cannot be reached the last rows that loaded successfully are returned
    as a degraded result.
    """

    def __init__(self, api: typing.Optional[SpreadsheetAPI], rates: EmployeeRates, cache: DataCache = None):
        self._api = api
        self._rates = rates
        self._cache = cache or DataCache()
        self._last_good = None

    @property
    def cache(self) -> DataCache:
        return self._cache

    @property
    def last_good(self):
        return self._last_good

    def load(self, refresh: bool = False) -> Result:
        if not refresh:
            cached = self._cache.get(ROWS_KEY)
            if cached is not None:
                return Result.success(cached)
        if self._api is None:
            return Result.failure(DataFetchError('no spreadsheet configured'))
        try:
            records = list(self._api.iterate_records())
        except DataFetchError as e:
            return self._fallback(e)
        result = load_rows(records, self._rates)
        if not result:
            return self._fallback(result.error)
        self._remember(result.value)
        return result

    def load_file(self, path) -> Result:
        if not os.path.isfile(path):
            return Result.failure(DataFetchError(f'file not found: {path}', {'path': str(path)}))
        try:
            with CsvReader(path) as reader:
                records = list(reader)
                header = reader.header
        except (UnicodeDecodeError, csv.Error) as e:
            logger.warning('cannot read %s: %s', path, e)
            return Result.failure(ValidationError(f'cannot read {path}: {e}', {'path': str(path)}))
        result = load_rows(records, self._rates, header=header)
        if result:
            self._remember(result.value)
        return result

    def _remember(self, rows):
        self._cache.set(ROWS_KEY, rows)
        self._last_good = rows

    def _fallback(self, error) -> Result:
        if self._last_good is None:
            return Result.failure(error)
        logger.warning('serving last known good data: %s', error)
        return Result.success(self._last_good, [f'using cached data: {error}'])

    def invalidate(self):
        self._cache.delete(ROWS_KEY)
