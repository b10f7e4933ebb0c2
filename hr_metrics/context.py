import copy
import logging
import typing

import click
from yaml import load
try:
    from yaml import CLoader as Loader
except ImportError:
    from yaml import Loader

from hr_metrics.defaults import DEFAULT_CONFIG
from hr_metrics.errors import ValidationError
from hr_metrics.model.aggregation import AggregationEngine
from hr_metrics.model.cache import DataCache
from hr_metrics.model.categories import CategoryIndex
from hr_metrics.model.colors import ColorCache
from hr_metrics.model.entry import EmployeeRates
from hr_metrics.model.filters import FilterPipeline
from hr_metrics.sheet.api import SpreadsheetAPI
from hr_metrics.sheet.source import DataSource

logger = logging.getLogger(__name__)


class SpreadsheetSettings:

    def __init__(self, config):
        self._config = config or {}

    @property
    def id(self) -> typing.Optional[str]:
        return self._config.get('id')

    @property
    def export_format(self) -> str:
        return self._config.get('format', 'csv')

    @property
    def gid(self):
        return self._config.get('gid', 0)

    @property
    def refresh_interval(self) -> float:
        return float(self._config.get('refreshInterval', 300))

    @property
    def cache_ttl(self) -> float:
        return float(self._config.get('cacheTtl', 300))

    @property
    def timeout(self) -> float:
        return float(self._config.get('timeout', 30))


class DashboardContext:

    def __init__(self, config: typing.Mapping = None):
        self._config = merge_config(DEFAULT_CONFIG, config or {})
        self._rates = EmployeeRates(self._config['rates'])
        self._categories = CategoryIndex(self._config['categories'], self._config.get('taskOrder'))
        self._colors = ColorCache(self._config.get('categoryColors', {}), self._categories,
                                  self._config.get('employeeColors', {}))
        self._colors.initialize()
        self._spreadsheet = SpreadsheetSettings(self._config.get('spreadsheet'))
        self._cache = DataCache(self._spreadsheet.cache_ttl)
        self._source = None
        missing, extra = self._categories.inconsistencies()
        if missing:
            logger.warning('tasks in taskOrder not found in categories: %s', ', '.join(missing))
        if extra:
            logger.warning('tasks in categories not found in taskOrder: %s', ', '.join(extra))

    @classmethod
    def from_file(cls, path):
        with open(path, 'r') as f:
            config = load(f.read(), Loader=Loader)
        if config is not None and not isinstance(config, dict):
            raise ValidationError(f'configuration in {path} must be a mapping')
        return cls(config)

    @property
    def config(self) -> dict:
        return self._config

    @property
    def rates(self) -> EmployeeRates:
        return self._rates

    @property
    def categories(self) -> CategoryIndex:
        return self._categories

    @property
    def colors(self) -> ColorCache:
        return self._colors

    @property
    def spreadsheet(self) -> SpreadsheetSettings:
        return self._spreadsheet

    @property
    def employees(self) -> typing.List[str]:
        return list(self._config.get('employees') or self._rates.employees)

    @property
    def debounce(self) -> float:
        return float(self._config.get('debounce', 0.25))

    @property
    def option_defaults(self) -> dict:
        return dict(self._config.get('defaults') or {})

    @property
    def source(self) -> DataSource:
        if self._source is None:
            api = None
            if self._spreadsheet.id:
                api = SpreadsheetAPI(self._spreadsheet.id, self._spreadsheet.export_format,
                                     self._spreadsheet.gid, self._spreadsheet.timeout)
            self._source = DataSource(api, self._rates, self._cache)
        return self._source

    def engine(self, today=None) -> AggregationEngine:
        return AggregationEngine(self._categories, self._colors, today)

    def pipeline(self, today=None) -> FilterPipeline:
        return FilterPipeline(self._categories, today)


def merge_config(defaults: typing.Mapping, overrides: typing.Mapping) -> dict:
    result = copy.deepcopy(dict(defaults))
    for key, value in overrides.items():
        if key == 'spreadsheet' and isinstance(value, dict):
            result[key] = {**result.get(key, {}), **value}
        else:
            result[key] = copy.deepcopy(value)
    return result


pass_dashboard = click.make_pass_decorator(DashboardContext)
