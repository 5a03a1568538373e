"""Package containers, providers, constraints and resolver delegates.

A *container* is the unit at which versions are associated: for example a
source repository holding many tagged releases of one package. It can be
identified unambiguously, lists its available versions, and reports the
constraints each version declares on other containers.

The resolver consumes these as structural protocols. Any object with the
right attributes qualifies; no base class is required, so filesystem,
network and in-memory implementations stay decoupled from the engine.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Hashable, Protocol, Sequence, TypeVar, runtime_checkable

from versolve.core.specifiers import VersionSetSpecifier
from versolve.core.versions import Version
from versolve.exceptions import ContractViolation

IdentifierT = TypeVar("IdentifierT", bound=Hashable)


@dataclass(frozen=True)
class PackageContainerConstraint(Generic[IdentifierT]):
    """A requirement that a container's chosen version lie in a version set.

    Multiple constraints on the same identifier combine by intersection.

    Attributes:
        identifier: The container the constraint is on.
        requirement: The acceptable versions.
    """

    identifier: IdentifierT
    requirement: VersionSetSpecifier

    def __str__(self) -> str:
        if self.requirement == VersionSetSpecifier.any():
            return str(self.identifier)
        if self.requirement.is_empty:
            return f"{self.identifier} none"
        return f"{self.identifier}{self.requirement}"


@runtime_checkable
class PackageContainer(Protocol[IdentifierT]):
    """A container of package versions.

    ``versions`` is sorted ascending, latest last, and is never empty.
    """

    @property
    def identifier(self) -> IdentifierT: ...

    @property
    def versions(self) -> Sequence[Version]: ...

    def get_dependencies(
        self, version: Version
    ) -> Sequence[PackageContainerConstraint[IdentifierT]]:
        """Return the constraints declared by *version*.

        Precondition: ``version in self.versions``. Calling it with any other
        version is a contract violation, not a recoverable error.
        """
        ...


@runtime_checkable
class PackageContainerProvider(Protocol[IdentifierT]):
    """Resolves identifiers to containers, fetching them as needed."""

    def get_container(self, identifier: IdentifierT) -> PackageContainer[IdentifierT]:
        """Load the container for *identifier*.

        Raises:
            ContainerLoadError: If the container could not be fetched or loaded.
                Any retry policy belongs to the provider.
        """
        ...


@runtime_checkable
class ResolverDelegate(Protocol[IdentifierT]):
    """Observer notified of resolver progress."""

    def added(self, identifier: IdentifierT) -> None:
        """Called once, the first time a container is loaded in a run."""
        ...


def dependencies_at(
    container: PackageContainer[IdentifierT], version: Version
) -> Sequence[PackageContainerConstraint[IdentifierT]]:
    """Fetch the constraints of *container* at *version*, checking the precondition.

    Raises:
        ContractViolation: If *version* is not one of the container's versions.
    """
    if version not in container.versions:
        raise ContractViolation(
            f"{container.identifier!r} has no version {version}; "
            "dependencies can only be requested for listed versions"
        )
    return container.get_dependencies(version)


def check_versions(container: PackageContainer[IdentifierT]) -> Sequence[Version]:
    """Validate the version list a provider returned for *container*.

    Raises:
        ContractViolation: If the list is empty or not sorted ascending.
    """
    versions = list(container.versions)
    if not versions:
        raise ContractViolation(f"container {container.identifier!r} exposes no versions")
    if any(b < a for a, b in zip(versions, versions[1:])):
        raise ContractViolation(
            f"container {container.identifier!r} versions are improperly ordered"
        )
    return versions
