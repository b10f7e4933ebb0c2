import logging
import os

import click

from hr_metrics.context import DashboardContext
from hr_metrics.errors import DashboardError
from hr_metrics.report.commands import report
from hr_metrics.sheet.commands import sheet


@click.group(context_settings={'auto_envvar_prefix': 'HR_METRICS'})
@click.option('--config', default='config.yaml', type=click.Path(), help='YAML configuration file')
@click.option('--verbose', '-v', is_flag=True, help='Enable debug logging')
@click.pass_context
def entry_point(ctx, config, verbose):
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING,
                        format='%(levelname)s %(name)s: %(message)s')
    try:
        if os.path.exists(config):
            dashboard = DashboardContext.from_file(config)
        else:
            dashboard = DashboardContext()
    except (DashboardError, ValueError, TypeError, AttributeError) as e:
        raise click.ClickException(f'invalid configuration in {config}: {e}')
    ctx.default_map = dashboard.option_defaults
    ctx.obj = dashboard


entry_point.add_command(sheet)
entry_point.add_command(report)


if __name__ == '__main__':
    entry_point()
