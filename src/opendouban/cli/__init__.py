"""Command-line interface for opendouban.

This package provides the Typer app and global console shared by all CLI
commands. Commands are registered in ``opendouban.cli.commands``.
"""

import os

import typer
from rich.console import Console
from rich.traceback import install

from opendouban.metadata import cache

# Install rich traceback handler for all CLI commands
install(show_locals=False)

console = Console()

app = typer.Typer(
    name="opendouban",
    help="Look up Douban metadata and artwork for movies and TV series.",
    add_completion=True,
)


@app.callback()
def callback(
    no_cache: bool = typer.Option(
        False,
        "--no-cache",
        help="Bypass the response cache for this invocation.",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Enable debug logging. Same as setting OPENDOUBAN_DEBUG=1.",
    ),
) -> None:
    """Top-level CLI callback adding global options."""
    if no_cache:
        cache.BYPASS_CACHE = True
    if debug:
        os.environ["OPENDOUBAN_DEBUG"] = "1"


@app.command()
def version() -> None:
    """Show the version of opendouban."""
    from opendouban.__about__ import __version__

    console.print(f"OpenDouban version: [bold]{__version__}[/bold]")
