"""
Helpers shared by the CLI commands.
"""
import importlib
from typing import Optional

import click

from kgmap.source import GraphSource, create_source


def source_options(fn):
    """Attach the options selecting a graph source to a command."""
    fn = click.option("--password", type=str, envvar="KGMAP_PASSWORD", help="Endpoint password")(fn)
    fn = click.option("--user", "-u", type=str, envvar="KGMAP_USER", help="Endpoint user")(fn)
    fn = click.option("--dialect", type=click.Choice(["sparql", "arq", "serql"]), default="sparql",
                      show_default=True, help="Query dialect of the endpoint")(fn)
    fn = click.option("--endpoint", "-e", type=str, help="SPARQL endpoint URL")(fn)
    fn = click.option("--file", "-f", "file_path", type=click.Path(exists=True, dir_okay=False),
                      help="RDF file to read from")(fn)
    return fn


def open_source(file_path: Optional[str], endpoint: Optional[str], dialect: str = "sparql",
                user: Optional[str] = None, password: Optional[str] = None) -> GraphSource:
    if bool(file_path) == bool(endpoint):
        raise click.UsageError("Exactly one of --file or --endpoint is required")
    if file_path:
        return create_source("file", file_path=file_path)
    return create_source("sparql", endpoint=endpoint, username=user, password=password, dialect=dialect)


def load_type(spec: str) -> type:
    """Import a type given as ``module:Class``."""
    module_name, sep, attr = spec.partition(":")
    if not sep or not module_name or not attr:
        raise click.BadParameter(f"Expected module:Class, got '{spec}'")
    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise click.BadParameter(f"Could not import {module_name}: {e}") from e
    obj = module
    for part in attr.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError as e:
            raise click.BadParameter(f"{module_name} has no attribute {attr}") from e
    if not isinstance(obj, type):
        raise click.BadParameter(f"{spec} is not a class")
    return obj
