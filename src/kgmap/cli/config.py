"""
Config command for the kgmap CLI.
"""

import sys

import click
from rich.console import Console
from rich.table import Table

from kgmap.config import load_options

console = Console()


@click.command("config")
@click.option(
    "--get",
    "-g",
    type=str,
    help="Get configuration value"
)
@click.pass_context
def config_cmd(ctx: click.Context, get):
    """
    Show the effective mapping options.

    Options are merged from ~/.kgconf/kgmap.yaml, ./kgmap.yaml, the file
    given with --config and KGMAP_* environment variables.
    """
    options = load_options(ctx.obj.get("config"))
    values = options.model_dump()

    if get:
        if get in values:
            console.print(f"[green]{get}:[/green] {values[get]}")
        else:
            console.print(f"[red]Configuration key not found:[/red] {get}")
            sys.exit(1)
        return

    table = Table(title="kgmap Configuration")
    table.add_column("Key", style="cyan")
    table.add_column("Value", style="green")
    table.add_column("Type", style="magenta")
    for key, value in values.items():
        table.add_row(key, str(value), type(value).__name__)
    console.print(table)
