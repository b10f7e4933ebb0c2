import os

import click

from hr_metrics.context import pass_dashboard, DashboardContext
from hr_metrics.report.commands.options import filter_options, load_state, rows_by_employee
from hr_metrics.report.workbook import DashboardWorkbookWriter


@click.option('--output', '-o', help='Workbook output path', required=True, default='reports/dashboard.xlsx',
              type=click.Path(exists=False, file_okay=True, dir_okay=False))
@filter_options
@click.command()
@pass_dashboard
def export(dashboard: DashboardContext, input_path, start_week, end_week, employee, search, category, level,
           display, output):
    state = load_state(dashboard, input_path, start_week, end_week, employee, search, category, level, display)
    view = state.view
    directory = os.path.dirname(output)
    if directory:
        os.makedirs(directory, exist_ok=True)
    employees = rows_by_employee(state)
    with DashboardWorkbookWriter(output, dashboard.engine(), view.grouping, view.display) as writer:
        writer.write_team(view.filtered)
        for name, rows in employees.items():
            writer.write_employee(name, rows, dashboard.rates.rate_for(name))
        writer.write_comparison(view.filtered, dashboard.employees)
    click.echo(f'dashboard with {len(employees)} employee sheet(s) saved to {output}')
