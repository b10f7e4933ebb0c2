import os

import click

from hr_metrics.common import parse_csv_text
from hr_metrics.context import pass_dashboard, DashboardContext
from hr_metrics.errors import DataFetchError
from hr_metrics.sheet.api import SpreadsheetAPI


@click.option('--spreadsheet-id', help='Spreadsheet ID, overrides the configured one', required=False)
@click.option('--output', '-o', help='CSV output path', required=True, default='reports/time-entries.csv',
              type=click.Path(exists=False, file_okay=True, dir_okay=False))
@click.command()
@pass_dashboard
def fetch(dashboard: DashboardContext, spreadsheet_id, output):
    settings = dashboard.spreadsheet
    spreadsheet_id = spreadsheet_id or settings.id
    if not spreadsheet_id:
        raise click.ClickException('no spreadsheet configured, please provide --spreadsheet-id')
    api = SpreadsheetAPI(spreadsheet_id, settings.export_format, settings.gid, settings.timeout)
    click.echo(f'fetching time entries from {api.export_url}')
    try:
        text = api.fetch_text()
    except DataFetchError as e:
        for url, reason in e.details.get('attempts', {}).items():
            click.echo(f'  {url}: {reason}', err=True)
        raise click.ClickException(f'{e}, please download the CSV manually and pass it with --input')
    directory = os.path.dirname(output)
    if directory:
        os.makedirs(directory, exist_ok=True)
    with open(output, 'w', newline='') as f:
        f.write(text)
    click.echo(f'saved {len(parse_csv_text(text))} time entries to {output}')
