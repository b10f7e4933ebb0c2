import logging
import time

import click

from hr_metrics.context import pass_dashboard, DashboardContext
from hr_metrics.report.commands.options import filter_options, load_state
from hr_metrics.report.commands.summary import echo_summary

logger = logging.getLogger(__name__)


@click.option('--count', '-n', help='Number of refresh cycles, 0 runs until interrupted', type=int, default=0,
              show_default=True)
@click.option('--interval', help='Seconds between refreshes, defaults to spreadsheet.refreshInterval', type=float,
              required=False)
@filter_options
@click.command()
@pass_dashboard
def watch(dashboard: DashboardContext, input_path, start_week, end_week, employee, search, category, level, display,
          count, interval):
    state = load_state(dashboard, input_path, start_week, end_week, employee, search, category, level, display)
    interval = dashboard.spreadsheet.refresh_interval if interval is None else interval
    engine = dashboard.engine()
    cycle = 0
    while True:
        view = state.view
        click.echo(f'[{time.strftime("%H:%M:%S")}] generation {view.generation}, {len(view.filtered)} row(s)')
        echo_summary(engine, 'team', view.filtered)
        cycle += 1
        if count and cycle >= count:
            break
        time.sleep(interval)
        source = dashboard.source
        result = source.load_file(input_path) if input_path else source.load(refresh=True)
        if not result:
            logger.warning('refresh failed: %s', result.error)
            click.echo(f'refresh failed: {result.error}', err=True)
            continue
        for warning in result.warnings:
            click.echo(f'warning: {warning}', err=True)
        state.commit_rows(result.value)
        state.refresh()
