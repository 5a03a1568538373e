"""``versolve show <index> <name>`` --- Inspect one package in an index.

Exit Codes:
    0 — Package shown.
    2 — The index is invalid or does not contain the package.
"""

from __future__ import annotations

import sys
from pathlib import Path

import click

from versolve.cli.output import print_container
from versolve.exceptions import ContainerLoadError, IndexFormatError
from versolve.index import load_index


@click.command("show")
@click.argument("index", type=click.Path(exists=True, dir_okay=False))
@click.argument("name")
def show_command(index: str, name: str) -> None:
    """List the versions of package NAME in INDEX and their dependencies."""
    try:
        provider = load_index(Path(index))
        container = provider.get_container(name)
    except (IndexFormatError, ContainerLoadError) as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(2)
    print_container(container)
