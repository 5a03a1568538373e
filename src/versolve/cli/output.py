"""Rich output formatting helpers for the Versolve CLI.

Tables and panels go to stdout; progress notes go to stderr so that
``--json`` output stays machine-readable.
"""

from __future__ import annotations

from typing import Hashable

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from versolve.core.containers import PackageContainer, dependencies_at
from versolve.lockfile import Lock

console = Console()
err_console = Console(stderr=True)


class ProgressDelegate:
    """Resolver delegate that reports each container it starts considering."""

    def added(self, identifier: Hashable) -> None:
        err_console.print(f"[dim]Considering {identifier}[/dim]")


def print_resolution_summary(lock: Lock) -> None:
    """Print the resolved versions and exclusions of a successful resolution."""
    console.print(
        Panel("[bold green]Resolution successful[/bold green]",
              title="Dependency Resolution")
    )
    if not lock.resolved and not lock.excluded:
        console.print("[dim]No packages to resolve.[/dim]")
        return

    table = Table(show_header=True)
    table.add_column("Package", style="bold")
    table.add_column("Resolved Version")
    for name in sorted(lock.resolved):
        table.add_row(name, lock.resolved[name])
    for name in sorted(lock.excluded):
        table.add_row(name, "[dim]excluded[/dim]")
    console.print(table)


def print_resolution_failure(message: str) -> None:
    """Print why a resolution could not produce an assignment."""
    console.print(
        Panel("[bold red]Resolution failed[/bold red]",
              title="Dependency Resolution")
    )
    console.print(f"  [red]- {message}[/red]")


def print_container(container: PackageContainer) -> None:
    """Print every version of *container*, latest first, with its dependencies."""
    table = Table(title=f"Package {container.identifier}", show_header=True)
    table.add_column("Version", style="bold")
    table.add_column("Dependencies")
    for version in reversed(list(container.versions)):
        deps = dependencies_at(container, version)
        rendered = ", ".join(str(dep) for dep in deps) if deps else "[dim]-[/dim]"
        table.add_row(str(version), rendered)
    console.print(table)
