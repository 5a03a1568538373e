"""Package index files and requirement strings.

An index file is YAML (or JSON, which YAML accepts) of the form::

    packages:
      app:
        1.0.0:
          http: ">=1.0.0,<2.0.0"
        2.0.0:
          http: "^2.0.0"
          log: "*"
      http:
        1.4.0: {}
        2.1.0:
      log:
        0.3.1:

Each package maps version strings to its dependencies for that version, a
mapping of package name to requirement string. An empty or null value means
the version has no dependencies.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any

import yaml

from versolve.core.containers import PackageContainerConstraint
from versolve.core.specifiers import VersionSetSpecifier
from versolve.core.versions import Version
from versolve.exceptions import ConstraintParseError, IndexFormatError, VersionParseError
from versolve.index.models import IndexContainer, InMemoryProvider

logger = logging.getLogger(__name__)

_REQUIREMENT_RE = re.compile(r"^(?P<name>[A-Za-z0-9_][A-Za-z0-9._\-/]*)\s*(?P<req>.*)$")


def parse_requirement(text: str) -> PackageContainerConstraint[str]:
    """Parse ``name[requirement]`` into a constraint.

    Examples: ``"http"`` (any version), ``"http>=1.0.0,<2.0.0"``,
    ``"log ^0.3.0"``, ``"legacy none"`` (must be excluded).

    Raises:
        ConstraintParseError: If the name or requirement is malformed.
    """
    m = _REQUIREMENT_RE.match(text.strip())
    if not m:
        raise ConstraintParseError(f"Invalid requirement: {text!r}")
    req = m.group("req").strip()
    requirement = VersionSetSpecifier.parse(req) if req else VersionSetSpecifier.any()
    return PackageContainerConstraint(m.group("name"), requirement)


def load_index(path: Path | str) -> InMemoryProvider:
    """Load an index file into an ``InMemoryProvider``.

    Args:
        path: Path to a YAML or JSON index file.

    Returns:
        A provider serving every package in the index.

    Raises:
        IndexFormatError: If the file cannot be read or is malformed.
    """
    path = Path(path)
    try:
        raw = path.read_text(encoding="utf-8")
        data = yaml.safe_load(raw)
    except (OSError, UnicodeDecodeError, yaml.YAMLError) as exc:
        raise IndexFormatError(f"Cannot read index {path}: {exc}") from exc
    provider = parse_index(data)
    logger.info("Loaded %d packages from %s", len(provider), path)
    return provider


def parse_index(data: Any) -> InMemoryProvider:
    """Build a provider from an already-parsed index document.

    Raises:
        IndexFormatError: If the document does not match the index schema.
    """
    if not isinstance(data, dict) or not isinstance(data.get("packages"), dict):
        raise IndexFormatError("Index must be a mapping with a 'packages' mapping")

    provider = InMemoryProvider()
    for name, releases in data["packages"].items():
        provider.add(_parse_package(str(name), releases))
    return provider


def _parse_package(name: str, releases: Any) -> IndexContainer:
    if not isinstance(releases, dict) or not releases:
        raise IndexFormatError(f"Package {name!r} must map at least one version to its dependencies")

    parsed: dict[Version, list[PackageContainerConstraint[str]]] = {}
    for raw_version, deps in releases.items():
        try:
            version = Version.parse(str(raw_version))
        except VersionParseError as exc:
            raise IndexFormatError(f"Package {name!r}: {exc}") from exc
        if version in parsed:
            raise IndexFormatError(f"Package {name!r} lists version {version} twice")
        parsed[version] = _parse_dependencies(name, version, deps)
    return IndexContainer(name, parsed)


def _parse_dependencies(
    name: str, version: Version, deps: Any
) -> list[PackageContainerConstraint[str]]:
    if deps is None:
        return []
    if not isinstance(deps, dict):
        raise IndexFormatError(f"Dependencies of {name} {version} must be a mapping")

    constraints = []
    for dep_name, raw_req in deps.items():
        req = "*" if raw_req is None else str(raw_req)
        try:
            requirement = VersionSetSpecifier.parse(req)
        except ConstraintParseError as exc:
            raise IndexFormatError(f"Dependency {dep_name!r} of {name} {version}: {exc}") from exc
        constraints.append(PackageContainerConstraint(str(dep_name), requirement))
    return constraints
