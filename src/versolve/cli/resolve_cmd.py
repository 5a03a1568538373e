"""``versolve resolve <index> <requirement>...`` --- Resolve package versions.

Loads the package index, resolves the requirements latest-version-first,
and prints the result as a table or JSON. ``--output`` also writes a
deterministic lock document.

Exit Codes:
    0 — Resolution succeeded.
    1 — No acceptable version could be found for a required package.
    2 — The index or a requirement is invalid, or a package failed to load.
"""

from __future__ import annotations

import sys
from pathlib import Path

import click

from versolve.cli.output import ProgressDelegate, print_resolution_failure, print_resolution_summary
from versolve.core.delegates import NullDelegate
from versolve.core.resolver import DependencyResolver
from versolve.exceptions import (
    ConstraintParseError,
    ContainerLoadError,
    IndexFormatError,
    ResolutionError,
)
from versolve.index import load_index, parse_requirement
from versolve.lockfile import Lock


@click.command("resolve")
@click.argument("index", type=click.Path(exists=True, dir_okay=False))
@click.argument("requirements", nargs=-1)
@click.option("--json", "json_output", is_flag=True, help="Print the result as JSON.")
@click.option(
    "--output", "-o",
    type=click.Path(dir_okay=False),
    default=None,
    help="Write a lock document to this path.",
)
@click.option(
    "--jobs", "-j",
    type=click.IntRange(min=1),
    default=1,
    show_default=True,
    help="Number of concurrent container fetches.",
)
@click.option("--quiet", "-q", is_flag=True, help="Do not report progress.")
def resolve_command(
    index: str,
    requirements: tuple[str, ...],
    json_output: bool,
    output: str | None,
    jobs: int,
    quiet: bool,
) -> None:
    """Resolve REQUIREMENTS against the package INDEX.

    Each requirement is a package name optionally followed by a version
    requirement, e.g. "http>=1.0.0,<2.0.0", "log ^0.3.0" or "legacy none".
    """
    try:
        provider = load_index(Path(index))
        constraints = [parse_requirement(r) for r in requirements]
    except (IndexFormatError, ConstraintParseError) as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(2)

    delegate = NullDelegate() if quiet or json_output else ProgressDelegate()
    resolver = DependencyResolver(constraints, provider, delegate, max_workers=jobs)
    try:
        assignment = resolver.resolve_assignment()
    except ContainerLoadError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(2)
    except ResolutionError as exc:
        if json_output:
            click.echo(f"Error: {exc}", err=True)
        else:
            print_resolution_failure(str(exc))
        sys.exit(1)

    lock = Lock.from_assignment(assignment, constraints)
    if json_output:
        click.echo(lock.to_json())
    else:
        print_resolution_summary(lock)

    if output:
        lock.write(Path(output))
        if not json_output:
            click.echo(f"\nLock written to: {output}")
    sys.exit(0)
