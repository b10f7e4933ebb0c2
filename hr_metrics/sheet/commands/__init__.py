import click
from .fetch import fetch


@click.group()
def sheet():
    pass


sheet.add_command(fetch)
