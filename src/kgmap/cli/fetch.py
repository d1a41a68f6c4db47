"""
Fetch command for the kgmap CLI.

Materializes a resource as an instance of a mapped type and prints it.
"""

import sys

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from kgmap.config import load_options
from kgmap.errors import MappingError
from kgmap.mapper import Mapper
from kgmap.proxy import is_reference
from .util import load_type, open_source, source_options

console = Console()


@click.command("fetch")
@click.argument("type_name", metavar="TYPE")
@click.argument("resource")
@source_options
@click.option(
    "--init",
    "-i",
    "init_types",
    multiple=True,
    help="Additional type (module:Class) to register for type refinement"
)
@click.pass_context
def fetch_cmd(ctx: click.Context, type_name, resource, file_path, endpoint, dialect, user, password, init_types):
    """
    Load RESOURCE as an instance of TYPE (module:Class).
    """
    cls = load_type(type_name)
    mapper = Mapper(load_options(ctx.obj.get("config")))
    mapper.init([cls, *(load_type(t) for t in init_types)])
    source = open_source(file_path, endpoint, dialect, user, password)

    try:
        record = mapper.from_graph(cls, resource, source)
    except MappingError as e:
        console.print(f"[red]✗ Fetch failed:[/red] {e}")
        sys.exit(1)

    binding = mapper.resolve_bindings(type(record))
    console.print(Panel(f"[bold blue]{type(record).__name__}[/bold blue] {record.rdf_id}"))

    table = Table()
    table.add_column("Member", style="cyan")
    table.add_column("Predicate", style="magenta")
    table.add_column("Value", style="green")
    for member in binding.members:
        if member.transient:
            continue
        value = getattr(record, member.name, None)
        shown = repr(value) if is_reference(value) or not hasattr(value, "rdf_id") else str(value.rdf_id)
        table.add_row(member.name, str(member.predicate), shown)
    console.print(table)
