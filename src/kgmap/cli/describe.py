"""
Describe command for the kgmap CLI.
"""

import sys

import click
from rich.console import Console
from rich.table import Table

from kgmap.common.types import as_resource
from kgmap.errors import GraphSourceError
from .util import open_source, source_options

console = Console()


@click.command("describe")
@click.argument("resource")
@source_options
def describe_cmd(resource, file_path, endpoint, dialect, user, password):
    """
    Show the triples describing RESOURCE.
    """
    source = open_source(file_path, endpoint, dialect, user, password)
    key = as_resource(resource)
    try:
        graph = source.describe(key)
    except GraphSourceError as e:
        console.print(f"[red]✗ Describe failed:[/red] {e}")
        sys.exit(1)

    if len(graph) == 0:
        console.print(f"[yellow]No triples found for {resource}[/yellow]")
        return

    table = Table(title=str(key))
    table.add_column("Subject", style="cyan")
    table.add_column("Predicate", style="magenta")
    table.add_column("Object", style="green")
    for s, p, o in sorted(graph):
        nsm = graph.namespace_manager
        table.add_row(s.n3(nsm), p.n3(nsm), o.n3(nsm))
    console.print(table)
    console.print(f"[dim]{len(graph)} triples[/dim]")
