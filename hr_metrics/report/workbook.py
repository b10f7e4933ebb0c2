import re
import typing

from openpyxl.chart import BarChart, LineChart, PieChart, Reference
from openpyxl.workbook import Workbook

from hr_metrics.model.aggregation import AggregationEngine, COST, Series
from hr_metrics.model.entry import TimeEntryRow
from hr_metrics.model.excel import BaseSheet, fill_for

HOURS_FORMAT = '0.0'
COST_FORMAT = '"$"#,##0.00'
PERCENT_FORMAT = '0.0"%"'

BREAKDOWN_ROW = 10

INVALID_TITLE_CHARACTERS = re.compile(r'[\\/\[\]:*?]')
UNTITLED = 'Employee'


def sheet_title(name: str) -> str:
    """Worksheet title for a dashboard name, without the characters Excel forbids."""
    title = INVALID_TITLE_CHARACTERS.sub('', name or '').strip().strip("'")
    return title.capitalize() or UNTITLED


class DashboardSheet(BaseSheet):

    _header = {
        'A2': 'Total hours',
        'A3': 'Total cost',
        'A4': 'Weeks tracked',
        'A5': 'Weekly average hours',
        'A6': 'Weekly average cost',
        'A7': 'Most time-consuming activity',
        'A8': 'Hourly rate',
    }
    _columns_width = {
        'A': 32,
        'B': 24,
        'C': 12,
        'D': 14,
        'E': 12,
    }

    def __init__(self, sheet, engine: AggregationEngine, rows: typing.Sequence[TimeEntryRow], grouping: str,
                 display: str, name: str, hourly_rate: float = None, **kwargs):
        super().__init__(sheet, title=kwargs.pop('title', sheet_title(name)), **kwargs)
        self._engine = engine
        self._grouping = grouping
        self._display = display
        self.set_value('A1', f'{name.capitalize()} {grouping} breakdown ({display})', font=self._header_font)
        if hourly_rate is not None:
            self.set_value('B8', hourly_rate, number_format=COST_FORMAT)
        if not rows:
            self['A10'] = 'No data available for the selected date range.'
            return
        self.write_summary(engine.employee_summary(rows, name))
        last = self.write_breakdown(engine.chart_items(rows, grouping))
        self.write_trend(engine.weekly_trend(rows, grouping, display), last + 3)

    def write_summary(self, summary):
        self.set_value('B2', summary.total_hours, number_format=HOURS_FORMAT)
        self.set_value('B3', summary.total_cost, number_format=COST_FORMAT)
        self['B4'] = summary.weeks_count
        self.set_value('B5', summary.weekly_average_hours, number_format=HOURS_FORMAT)
        self.set_value('B6', summary.weekly_average_cost, number_format=COST_FORMAT)
        top = summary.top_activity
        if top is None:
            self['B7'] = 'None'
            return
        self['B7'] = top.name
        self.set_value('C7', top.hours, number_format=HOURS_FORMAT)
        self.set_value('D7', top.cost, number_format=COST_FORMAT)
        self.set_value('E7', top.percentage, number_format=PERCENT_FORMAT)

    def write_breakdown(self, items) -> int:
        slices = {piece.name: piece for piece in self._engine.pie_slices(items, self._display)}
        last = self.write_table(BREAKDOWN_ROW, 1, ['Name', 'Category', 'Hours', 'Cost', 'Share'],
                                ([item.name, item.type, item.hours, item.cost,
                                  slices[item.name].percentage if item.name in slices else None]
                                 for item in items),
                                {2: HOURS_FORMAT, 3: COST_FORMAT, 4: PERCENT_FORMAT})
        colors = self._engine.colors
        for row, item in enumerate(items, start=BREAKDOWN_ROW + 1):
            fill = fill_for(colors.border_color(item.name, self._grouping)) if colors else None
            if fill:
                self.sheet.cell(row=row, column=1).fill = fill
        if last > BREAKDOWN_ROW:
            value_column = 4 if self._display == COST else 3
            data = Reference(self.sheet, min_col=value_column, min_row=BREAKDOWN_ROW, max_row=last)
            labels = Reference(self.sheet, min_col=1, min_row=BREAKDOWN_ROW + 1, max_row=last)
            pie = PieChart()
            pie.title = f'{self._grouping.capitalize()} distribution ({self._display})'
            pie.add_data(data, titles_from_data=True)
            pie.set_categories(labels)
            self.sheet.add_chart(pie, 'G2')
            bar = BarChart()
            bar.type = 'bar'
            bar.title = f'{self._grouping.capitalize()} breakdown ({self._display})'
            bar.add_data(data, titles_from_data=True)
            bar.set_categories(labels)
            self.sheet.add_chart(bar, 'G18')
        return last

    def write_trend(self, trend: Series, row: int):
        if not trend:
            self[f'A{row}'] = 'Weekly trend data not available - not enough weeks in the selected range.'
            return
        last = write_series(self, trend, row, 'Week', self._display)
        chart = LineChart()
        chart.title = f'Weekly trend ({self._display})'
        chart.add_data(Reference(self.sheet, min_col=2, max_col=len(trend.datasets) + 1, min_row=row, max_row=last),
                       titles_from_data=True)
        chart.set_categories(Reference(self.sheet, min_col=1, min_row=row + 1, max_row=last))
        self.sheet.add_chart(chart, 'G34')


class ComparisonSheet(BaseSheet):

    _title = 'Comparison'
    _columns_width = {'A': 20}

    def __init__(self, sheet, engine: AggregationEngine, rows, grouping: str, display: str,
                 employees: typing.Iterable[str] = (), **kwargs):
        super().__init__(sheet, **kwargs)
        self.set_value('A1', f'Employee time allocation comparison ({display})', font=self._header_font)
        comparison = engine.team_comparison(rows, grouping, display, employees)
        if not comparison:
            self['A3'] = 'No data available for the selected date range.'
            return
        last = write_series(self, comparison, 3, 'Employee', display)
        chart = BarChart()
        chart.type = 'col'
        chart.grouping = 'stacked'
        chart.overlap = 100
        chart.title = f'Employee time allocation comparison ({display})'
        chart.add_data(Reference(self.sheet, min_col=2, max_col=len(comparison.datasets) + 1, min_row=3,
                                 max_row=last), titles_from_data=True)
        chart.set_categories(Reference(self.sheet, min_col=1, min_row=4, max_row=last))
        self.sheet.add_chart(chart, f'A{last + 3}')


def write_series(sheet: BaseSheet, series: Series, row: int, first_header: str, display: str) -> int:
    number_format = COST_FORMAT if display == COST else HOURS_FORMAT
    return sheet.write_table(row, 1, [first_header] + [dataset.label for dataset in series.datasets],
                             ([label] + [dataset.data[index] for dataset in series.datasets]
                              for index, label in enumerate(series.labels)),
                             {index + 1: number_format for index in range(len(series.datasets))})


class DashboardWorkbookWriter:

    def __init__(self, path, engine: AggregationEngine, grouping: str, display: str):
        self._path = path
        self._engine = engine
        self._grouping = grouping
        self._display = display

    def __enter__(self):
        self._workbook = Workbook()
        self._first = True
        return self

    def _next_sheet(self):
        if self._first:
            self._first = False
            return self._workbook.active
        return self._workbook.create_sheet()

    def write_team(self, rows: typing.Sequence[TimeEntryRow]):
        return DashboardSheet(self._next_sheet(), self._engine, rows, self._grouping, self._display, 'team')

    def write_employee(self, employee: str, rows: typing.Sequence[TimeEntryRow], hourly_rate: float = None):
        return DashboardSheet(self._next_sheet(), self._engine, rows, self._grouping, self._display, employee,
                              hourly_rate=hourly_rate)

    def write_comparison(self, rows: typing.Sequence[TimeEntryRow], employees: typing.Iterable[str] = ()):
        return ComparisonSheet(self._next_sheet(), self._engine, rows, self._grouping, self._display, employees)

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None:
            self._workbook.save(filename=self._path)
