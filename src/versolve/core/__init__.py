"""Version resolution core.

This package implements the version set algebra, the container protocols
the resolver consumes, the version assignment data structure, and the
resolver itself. All public names are re-exported here, so callers can
write ``from versolve.core import DependencyResolver``.

Data flow
---------
Resolver -> Provider (fetch) -> Container (versions, dependencies)
-> Constraint -> VersionAssignment (accumulate, validate) -> Resolver
-> ``[(identifier, version), ...]``
"""

from versolve.core.assignment import (
    EXCLUDED,
    Bound,
    BoundVersion,
    Excluded,
    VersionAssignment,
)
from versolve.core.containers import (
    PackageContainer,
    PackageContainerConstraint,
    PackageContainerProvider,
    ResolverDelegate,
    check_versions,
    dependencies_at,
)
from versolve.core.delegates import LoggingDelegate, NullDelegate, RecordingDelegate
from versolve.core.resolver import ContainerCache, DependencyResolver
from versolve.core.specifiers import SetKind, VersionSetSpecifier
from versolve.core.versions import Version

__all__ = [
    "Version",
    "SetKind",
    "VersionSetSpecifier",
    "PackageContainer",
    "PackageContainerConstraint",
    "PackageContainerProvider",
    "ResolverDelegate",
    "check_versions",
    "dependencies_at",
    "Bound",
    "Excluded",
    "EXCLUDED",
    "BoundVersion",
    "VersionAssignment",
    "NullDelegate",
    "LoggingDelegate",
    "RecordingDelegate",
    "ContainerCache",
    "DependencyResolver",
]
