"""In-memory containers and provider."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence

from versolve.core.containers import PackageContainerConstraint
from versolve.core.versions import Version
from versolve.exceptions import ContainerLoadError, ContractViolation

logger = logging.getLogger(__name__)


class IndexContainer:
    """A container whose versions and dependencies are held in memory.

    Versions are sorted ascending on construction, latest last.

    Args:
        identifier: Container name.
        releases: Mapping of version to the constraints that version declares.
    """

    def __init__(
        self,
        identifier: str,
        releases: Mapping[Version, Sequence[PackageContainerConstraint[str]]],
    ) -> None:
        self._identifier = identifier
        self._releases = {version: list(deps) for version, deps in releases.items()}
        self._versions = sorted(self._releases)

    @property
    def identifier(self) -> str:
        return self._identifier

    @property
    def versions(self) -> list[Version]:
        return list(self._versions)

    def get_dependencies(self, version: Version) -> list[PackageContainerConstraint[str]]:
        try:
            return list(self._releases[version])
        except KeyError:
            raise ContractViolation(
                f"{self._identifier!r} has no version {version}"
            ) from None

    def __repr__(self) -> str:
        return f"IndexContainer({self._identifier!r}, versions={[str(v) for v in self._versions]})"


class InMemoryProvider:
    """Provider serving ``IndexContainer`` objects from a dictionary.

    Unknown identifiers, and identifiers listed in *unavailable*, raise
    ``ContainerLoadError`` the way a failed network fetch would.

    Attributes:
        requested: Every identifier passed to ``get_container``, in call order.
    """

    def __init__(
        self,
        containers: Iterable[IndexContainer] = (),
        unavailable: Iterable[str] = (),
    ) -> None:
        self._containers: dict[str, IndexContainer] = {}
        self._unavailable = set(unavailable)
        self.requested: list[str] = []
        for container in containers:
            self.add(container)

    def add(self, container: IndexContainer) -> None:
        """Add a container, replacing any with the same identifier."""
        self._containers[container.identifier] = container

    def get_container(self, identifier: str) -> IndexContainer:
        self.requested.append(identifier)
        if identifier in self._unavailable:
            raise ContainerLoadError(identifier, "marked unavailable")
        try:
            return self._containers[identifier]
        except KeyError:
            logger.warning("Container %s not found in index", identifier)
            raise ContainerLoadError(identifier, "not found in index") from None

    @property
    def fetch_count(self) -> int:
        return len(self.requested)

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._containers

    def __len__(self) -> int:
        return len(self._containers)
