"""General purpose package dependency resolution.

Given a list of input constraints, where each constraint names a container
and a version requirement, and where each container supplies further
constraints ("dependencies") for every version it holds, choose an
assignment of containers to versions such that:

1. The assignment is *complete*: every container named by the input
   constraints, or by a dependency of an assigned version, is assigned.
2. The assignment is *correct*: each assigned version satisfies every
   constraint that references its container.
3. The assignment is *maximal*: no other assignment satisfying (1) and (2)
   has all of its versions greater than or equal to this one's.

Maximal is not optimal: there may be several maximal assignments, and
choosing between them needs information (such as package priorities) the
resolver does not have.

The general problem is NP-complete, by reduction from 3-SAT: one container
per variable with two versions for true and false, one container per clause
with three versions (one per satisfying literal) that each pin the
corresponding variable, and an input constraint on every clause container.

This resolver does not attempt the general problem. Containers are decided
one at a time in discovery order. Each one takes the latest version that is
compatible with every decision already made; incompatible versions are
rejected and the next lower one is tried. Decisions are never revisited. The
algorithm is sound (any result it returns meets the three guarantees above)
but incomplete: it can raise ``ResolutionError`` for an input that has a
solution.
"""

from __future__ import annotations

import logging
import threading
from collections import deque
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Generic, Iterable, Optional, Sequence

from versolve.core.assignment import EXCLUDED, Bound, BoundVersion, VersionAssignment
from versolve.core.containers import (
    IdentifierT,
    PackageContainer,
    PackageContainerConstraint,
    PackageContainerProvider,
    ResolverDelegate,
    check_versions,
    dependencies_at,
)
from versolve.core.delegates import NullDelegate
from versolve.core.specifiers import VersionSetSpecifier
from versolve.core.versions import Version
from versolve.exceptions import ContractViolation, ResolutionError

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# ContainerCache: fetch-once container loading
# ---------------------------------------------------------------------------


class ContainerCache(Generic[IdentifierT]):
    """Loads containers through a provider, at most once per identifier.

    Concurrent requests for the same identifier are coalesced onto a single
    in-flight fetch. A failed fetch is remembered as well, so every later
    request re-raises the same exception instead of fetching again.

    The delegate is notified by whichever thread performs the fetch, right
    after it succeeds. With a single thread that is first-discovery order;
    with prefetching enabled the order is best-effort.
    """

    def __init__(
        self,
        provider: PackageContainerProvider[IdentifierT],
        delegate: ResolverDelegate[IdentifierT],
    ) -> None:
        self._provider = provider
        self._delegate = delegate
        self._lock = threading.Lock()
        self._futures: dict[IdentifierT, Future] = {}

    def get(self, identifier: IdentifierT) -> PackageContainer[IdentifierT]:
        """Return the container for *identifier*, loading it if necessary.

        Raises:
            ContainerLoadError: Propagated unchanged from the provider.
            ContractViolation: If the provider returned an invalid container.
        """
        with self._lock:
            future = self._futures.get(identifier)
            owner = future is None
            if owner:
                future = Future()
                self._futures[identifier] = future
        if owner:
            self._load(identifier, future)
        return future.result()

    def _load(self, identifier: IdentifierT, future: Future) -> None:
        logger.debug("Loading container %s", identifier)
        try:
            container = self._provider.get_container(identifier)
            check_versions(container)
        except ContractViolation as exc:
            logger.error("Provider returned an invalid container %s: %s", identifier, exc)
            future.set_exception(exc)
            return
        except Exception as exc:
            logger.warning("Failed to load container %s: %s", identifier, exc)
            future.set_exception(exc)
            return
        self._delegate.added(identifier)
        future.set_result(container)

    def __contains__(self, identifier: object) -> bool:
        with self._lock:
            return identifier in self._futures

    @property
    def fetch_count(self) -> int:
        """Number of distinct identifiers requested from the provider."""
        with self._lock:
            return len(self._futures)


# ---------------------------------------------------------------------------
# DependencyResolver
# ---------------------------------------------------------------------------


class DependencyResolver(Generic[IdentifierT]):
    """Latest-version-first dependency resolver over package containers.

    Args:
        constraints: The input constraints. Constraints on the same
            identifier are intersected. A container whose every input
            constraint is empty is excluded; input constraints that are
            individually satisfiable but conflict raise ``ResolutionError``.
        provider: Loads containers by identifier.
        delegate: Optional observer of resolution progress.
        max_workers: When greater than one, the dependencies of each newly
            bound version are fetched ahead of time on a thread pool.
            Decisions themselves are always made sequentially.
    """

    def __init__(
        self,
        constraints: Sequence[PackageContainerConstraint[IdentifierT]],
        provider: PackageContainerProvider[IdentifierT],
        delegate: Optional[ResolverDelegate[IdentifierT]] = None,
        *,
        max_workers: int = 1,
    ) -> None:
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        self.constraints = list(constraints)
        self.provider = provider
        self.delegate = delegate if delegate is not None else NullDelegate()
        self.max_workers = max_workers

    def resolve(self) -> list[tuple[IdentifierT, Version]]:
        """Resolve the input constraints to one version per container.

        Returns:
            ``(identifier, version)`` pairs for every included container, in
            the order the containers were discovered. Excluded containers are
            omitted.

        Raises:
            ContainerLoadError: The first provider failure, unchanged.
            ResolutionError: A required container has no acceptable version,
                or the input constraints on one container conflict.
            ContractViolation: A collaborator broke its interface contract.
        """
        return self.resolve_assignment().bound_versions()

    def resolve_assignment(self) -> VersionAssignment[IdentifierT]:
        """Resolve the input constraints and return the full assignment.

        Unlike ``resolve``, the result also records exclusions. All state
        lives in this call, so concurrent or repeated resolutions with the
        same resolver never share a cache or an assignment.
        """
        cache: ContainerCache[IdentifierT] = ContainerCache(self.provider, self.delegate)
        if self.max_workers > 1:
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                return _ResolutionRun(self.constraints, cache, executor).run()
        return _ResolutionRun(self.constraints, cache, None).run()


class _ResolutionRun(Generic[IdentifierT]):
    """State for one call to ``DependencyResolver.resolve_assignment``."""

    def __init__(
        self,
        constraints: Iterable[PackageContainerConstraint[IdentifierT]],
        cache: ContainerCache[IdentifierT],
        executor: Optional[ThreadPoolExecutor],
    ) -> None:
        self.cache = cache
        self.executor = executor
        self.assignment: VersionAssignment[IdentifierT] = VersionAssignment()
        self.requirements: dict[IdentifierT, VersionSetSpecifier] = {}
        self.inputs: dict[IdentifierT, list[VersionSetSpecifier]] = {}
        for constraint in constraints:
            ident = constraint.identifier
            current = self.requirements.get(ident, VersionSetSpecifier.any())
            self.requirements[ident] = current.intersection(constraint.requirement)
            self.inputs.setdefault(ident, []).append(constraint.requirement)
        # Only an explicitly empty requirement excludes a container.
        self.excluded = {
            ident for ident, reqs in self.inputs.items()
            if all(req.is_empty for req in reqs)
        }

    def run(self) -> VersionAssignment[IdentifierT]:
        for ident, requirement in self.requirements.items():
            if requirement.is_empty and ident not in self.excluded:
                conflicting = ", ".join(str(req) for req in self.inputs[ident])
                raise ResolutionError(
                    ident, requirement, f"input constraints conflict: {conflicting}"
                )

        # Exclusions are decided first, so that versions depending on an
        # excluded container are rejected instead of binding it.
        exclusions = [i for i in self.requirements if i in self.excluded]
        others = [i for i in self.requirements if i not in self.excluded]
        queue: deque[IdentifierT] = deque(exclusions + others)
        seen = set(queue)
        self._prefetch(queue)

        while queue:
            ident = queue.popleft()
            container = self.cache.get(ident)
            binding = self._decide(container)
            if not isinstance(binding, Bound):
                continue
            discovered = []
            for constraint in dependencies_at(container, binding.version):
                if constraint.identifier not in seen:
                    seen.add(constraint.identifier)
                    queue.append(constraint.identifier)
                    discovered.append(constraint.identifier)
            self._prefetch(discovered)

        logger.debug("Resolved %d containers", len(self.assignment))
        return self.assignment

    def _prefetch(self, identifiers: Iterable[IdentifierT]) -> None:
        if self.executor is None:
            return
        for ident in identifiers:
            if ident not in self.cache:
                self.executor.submit(self.cache.get, ident)

    def _decide(self, container: PackageContainer[IdentifierT]) -> BoundVersion:
        """Bind *container* to its best acceptable version, or exclude it."""
        ident = container.identifier
        induced = self.assignment.constraints
        requirement = self.requirements.get(ident, VersionSetSpecifier.any())
        if ident in induced:
            requirement = requirement.intersection(induced[ident])

        if ident in self.excluded:
            if self.assignment.propose(container, EXCLUDED):
                logger.debug("Excluded %s", ident)
                return EXCLUDED
            raise ResolutionError(ident, requirement, "excluded but required by a bound version")

        for version in reversed(container.versions):
            if not requirement.contains(version):
                continue
            if not self._admissible(container, version, induced):
                logger.debug("Rejected %s %s: dependencies cannot be met", ident, version)
                continue
            binding = Bound(version)
            if self.assignment.propose(container, binding):
                logger.debug("Bound %s to %s", ident, version)
                return binding
            logger.debug("Rejected %s %s: conflicts with current assignment", ident, version)

        raise ResolutionError(ident, requirement)

    def _admissible(
        self,
        container: PackageContainer[IdentifierT],
        version: Version,
        induced: dict[IdentifierT, VersionSetSpecifier],
    ) -> bool:
        """Check that undecided dependencies of *version* can still be satisfied.

        Each undecided dependency must have at least one release inside its
        merged requirement (input constraints, current assignment and this
        version). Dependencies are loaded through the cache to check this,
        so they count as discovered even if *version* is rejected.
        """
        merged: dict[IdentifierT, VersionSetSpecifier] = {}
        for constraint in dependencies_at(container, version):
            target = constraint.identifier
            if target in self.assignment:
                continue
            if target not in merged:
                merged[target] = self.requirements.get(target, VersionSetSpecifier.any())
                if target in induced:
                    merged[target] = merged[target].intersection(induced[target])
            merged[target] = merged[target].intersection(constraint.requirement)
            if merged[target].is_empty:
                return False
        for target, requirement in merged.items():
            available = self.cache.get(target).versions
            if not any(requirement.contains(x) for x in available):
                logger.debug("No release of %s satisfies %s", target, requirement)
                return False
        return True
