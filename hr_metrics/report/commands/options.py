import typing

import click

from hr_metrics.common import ALL
from hr_metrics.context import DashboardContext
from hr_metrics.model.aggregation import CATEGORY, HOURS, GROUPING_MODES, DISPLAY_MODES
from hr_metrics.model.week_range import describe_week_selection
from hr_metrics.state import DashboardState

FILTER_OPTIONS = [
    click.option('--input', '-i', 'input_path', help='Time entries CSV file, the spreadsheet is used when omitted',
                 required=False, type=click.Path(exists=True, file_okay=True, dir_okay=False)),
    click.option('--start-week', help='First week range to include', default=ALL, show_default=True),
    click.option('--end-week', help='Last week range to include', default=ALL, show_default=True),
    click.option('--employee', help='Employee name or email fragment', default=ALL, show_default=True),
    click.option('--search', help='Free text search across text fields', default=''),
    click.option('--category', help='Only rows with hours in this category', default=ALL, show_default=True),
    click.option('--level', help='Grouping level', type=click.Choice(GROUPING_MODES), default=CATEGORY,
                 show_default=True),
    click.option('--display', help='Show hours or cost', type=click.Choice(DISPLAY_MODES), default=HOURS,
                 show_default=True),
]


def filter_options(func):
    for option in reversed(FILTER_OPTIONS):
        func = option(func)
    return func


def load_state(dashboard: DashboardContext, input_path, start_week, end_week, employee, search, category, level,
               display) -> DashboardState:
    source = dashboard.source
    result = source.load_file(input_path) if input_path else source.load()
    if not result:
        raise click.ClickException(f'{result.error}, please check the data source or pass a CSV file with --input')
    for warning in result.warnings:
        click.echo(f'warning: {warning}', err=True)
    state = DashboardState(dashboard)
    state.commit_rows(result.value)
    applied = state.apply_filters(start_week=start_week, end_week=end_week, employee=employee, search=search,
                                  category=category)
    if not applied:
        raise click.BadParameter(str(applied.error), param_hint="'--start-week' / '--end-week'")
    modes = state.set_modes(level, display)
    if not modes:
        raise click.BadParameter(str(modes.error))
    state.refresh()
    description = describe_week_selection(start_week, end_week)
    if description:
        click.echo(f'filter: {description}')
    return state


def rows_by_employee(state: DashboardState) -> typing.Dict[str, list]:
    engine = state.context.engine()
    rows = state.view.filtered
    return {employee: [row for row in rows if row.employee_key == employee]
            for employee in engine.employees(rows, state.context.employees)}
