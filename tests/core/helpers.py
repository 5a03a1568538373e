"""Shared test helpers for building containers and providers.

Indexes are written as plain dictionaries in the same shape as an index
file, so tests read like the YAML a user would write.
"""

from __future__ import annotations

from typing import Any

from versolve.core import Version
from versolve.index import IndexContainer, InMemoryProvider, parse_index


def v(text: str) -> Version:
    """Shorthand for ``Version.parse``."""
    return Version.parse(text)


def make_provider(packages: dict[str, dict[str, Any]], unavailable=()) -> InMemoryProvider:
    """Build an ``InMemoryProvider`` from ``{name: {version: {dep: req}}}``."""
    provider = parse_index({"packages": packages})
    return InMemoryProvider(
        (provider.get_container(name) for name in packages),
        unavailable=unavailable,
    )


def make_container(name: str, releases: dict[str, Any]) -> IndexContainer:
    """Build a single ``IndexContainer`` from ``{version: {dep: req}}``."""
    return parse_index({"packages": {name: releases}}).get_container(name)


class UnsortedContainer:
    """Container double whose versions violate the ascending-order contract."""

    def __init__(self, identifier: str, versions: list[str]) -> None:
        self.identifier = identifier
        self.versions = [v(x) for x in versions]

    def get_dependencies(self, version: Version) -> list:
        return []


class StaticProvider:
    """Provider double returning prebuilt container objects."""

    def __init__(self, *containers: Any) -> None:
        self._containers = {c.identifier: c for c in containers}
        self.requested: list[str] = []

    def get_container(self, identifier: str) -> Any:
        self.requested.append(identifier)
        return self._containers[identifier]
