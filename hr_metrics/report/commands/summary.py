import os

import click

from hr_metrics.common import CsvWriter, format_currency, format_hours
from hr_metrics.context import pass_dashboard, DashboardContext
from hr_metrics.model.aggregation import AggregationEngine, ChartItem, COST, uncategorized
from hr_metrics.model.week_range import sort_week_ranges
from hr_metrics.report.commands.options import filter_options, load_state, rows_by_employee


class BreakdownCsvWriter(CsvWriter):

    _header = ['Name', 'Category', 'Hours', 'Cost', 'Share']

    def __init__(self, filepath):
        super().__init__(filepath, self._header)

    def write_item(self, item: ChartItem, share):
        self.write([item.name, item.type, f'{item.hours:.2f}', f'{item.cost:.2f}',
                    '' if share is None else f'{share:.1f}'])


def format_value(value: float, display: str) -> str:
    return format_currency(value) if display == COST else f'{format_hours(value)}h'


def echo_summary(engine: AggregationEngine, name: str, rows):
    summary = engine.employee_summary(rows, name)
    click.echo(f'{name}: {format_hours(summary.total_hours)}h, {format_currency(summary.total_cost)} '
               f'over {summary.weeks_count} week(s), '
               f'weekly average {format_hours(summary.weekly_average_hours)}h / '
               f'{format_currency(summary.weekly_average_cost)}')
    top = summary.top_activity
    if top is not None:
        click.echo(f'  most time: {top.name} ({format_hours(top.hours)}h, {format_currency(top.cost)}, '
                   f'{top.percentage:.1f}%)')
    return summary


@click.option('--output', '-o', help='Write the breakdown to this CSV file', required=False,
              type=click.Path(exists=False, file_okay=True, dir_okay=False))
@filter_options
@click.command()
@pass_dashboard
def summary(dashboard: DashboardContext, input_path, start_week, end_week, employee, search, category, level,
            display, output):
    state = load_state(dashboard, input_path, start_week, end_week, employee, search, category, level, display)
    view = state.view
    engine = dashboard.engine()
    if not view.filtered:
        click.echo('No data available for the selected filters.')
        return
    echo_summary(engine, 'team', view.filtered)
    for name, rows in rows_by_employee(state).items():
        echo_summary(engine, name, rows)
    items = engine.chart_items(view.filtered, view.grouping)
    shares = {piece.name: piece.percentage for piece in engine.pie_slices(items, view.display)}
    click.echo(f'{view.grouping} breakdown ({view.display}):')
    for item in items:
        share = shares.get(item.name)
        click.echo(f'  {item.name:<40} {format_value(item.value(view.display), view.display):>12}'
                   f'{"" if share is None else f"  {share:.1f}%"}')
    missing = uncategorized(items)
    if missing:
        click.echo(f'tasks without a category: {", ".join(missing)}', err=True)
    if output:
        directory = os.path.dirname(output)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with BreakdownCsvWriter(output) as writer:
            for item in items:
                writer.write_item(item, shares.get(item.name))
        click.echo(f'breakdown saved to {output}')


@click.option('--input', '-i', 'input_path', help='Time entries CSV file, the spreadsheet is used when omitted',
              required=False, type=click.Path(exists=True, file_okay=True, dir_okay=False))
@click.command()
@pass_dashboard
def weeks(dashboard: DashboardContext, input_path):
    source = dashboard.source
    result = source.load_file(input_path) if input_path else source.load()
    if not result:
        raise click.ClickException(str(result.error))
    for week in sort_week_ranges(row.week_range for row in result.value):
        click.echo(week)


@filter_options
@click.command()
@pass_dashboard
def trend(dashboard: DashboardContext, input_path, start_week, end_week, employee, search, category, level, display):
    state = load_state(dashboard, input_path, start_week, end_week, employee, search, category, level, display)
    view = state.view
    series = dashboard.engine().weekly_trend(view.filtered, view.grouping, view.display)
    if not series:
        click.echo('Weekly trend data not available - not enough weeks in the selected range.')
        return
    click.echo('\t'.join(['Week'] + [dataset.label for dataset in series.datasets]))
    for index, week in enumerate(series.labels):
        click.echo('\t'.join([week] + [format_value(dataset.data[index], view.display)
                                       for dataset in series.datasets]))
