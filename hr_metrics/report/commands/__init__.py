import click
from .export import export
from .summary import summary, trend, weeks
from .watch import watch


@click.group()
def report():
    pass


report.add_command(summary)
report.add_command(weeks)
report.add_command(trend)
report.add_command(export)
report.add_command(watch)
