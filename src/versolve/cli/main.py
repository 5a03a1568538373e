"""Versolve CLI --- resolve package versions against an index file.

Entry point for the ``versolve`` command-line tool. Registers all
subcommands under a single Click group.

Commands:
    resolve — Resolve requirements to one version per package.
    show    — List a package's versions and their dependencies.

Usage::

    versolve resolve index.yaml "app>=1.0.0"
    versolve resolve index.yaml app "legacy none" --json
    versolve resolve index.yaml app --output versolve.lock
    versolve show index.yaml app
"""

from __future__ import annotations

import logging

import click

from versolve import __version__
from versolve.cli.resolve_cmd import resolve_command
from versolve.cli.show_cmd import show_command

LOG_FORMAT = "[%(levelname)s] %(name)s: %(message)s"


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    show_default=True,
    help="Logging verbosity.",
)
def cli(log_level: str) -> None:
    """Versolve: Latest-first version resolution for package containers.

    Reads a package index, picks the newest compatible version of every
    required package, and reports or locks the result.
    """
    logging.basicConfig(level=getattr(logging, log_level.upper()), format=LOG_FORMAT)


cli.add_command(resolve_command)
cli.add_command(show_command)
