#!/usr/bin/env python3
"""
Main CLI entry point for kgmap.

This module defines the main CLI group and registers all subcommands.
"""

import logging
from typing import Optional

import click
from rich.console import Console

from kgmap.common import setup_logging
from kgmap.config import load_options
from .config import config_cmd
from .describe import describe_cmd
from .fetch import fetch_cmd

console = Console()


@click.group()
@click.version_option(version="0.1.0", prog_name="kgmap")
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True),
    help="Path to configuration file"
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output"
)
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False),
    help="Write log messages to this file"
)
@click.pass_context
def cli(ctx: click.Context, config: Optional[str], verbose: bool, log_file: Optional[str]):
    """
    kgmap - map Python records to RDF graphs and back.
    """
    ctx.ensure_object(dict)
    ctx.obj["config"] = config
    ctx.obj["verbose"] = verbose
    if verbose:
        level = logging.DEBUG
    else:
        level = getattr(logging, load_options(config).log_level.upper(), logging.WARNING)
    setup_logging(log_file, level)


cli.add_command(config_cmd)
cli.add_command(describe_cmd)
cli.add_command(fetch_cmd)


if __name__ == "__main__":
    cli()
