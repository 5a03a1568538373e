"""Version assignments: the resolver's accumulating decision record.

An assignment maps container identifiers to a *binding*:

- ``Bound(version)``: the container is part of the result at that version.
- ``EXCLUDED``: the container must not be part of the result.

An identifier with no entry is *undecided*, which is different from being
excluded. Bindings can be replaced but never removed.

Validity invariant
------------------
Every write is checked against all *other* current bindings, in both
directions:

1. The incoming binding must satisfy the merged constraints that the other
   bound versions place on its container (an exclusion is only allowed
   while nothing constrains the container at all).
2. The constraints the incoming version declares must be satisfied by the
   containers they target that are already bound; a declared dependency on
   an excluded container is never satisfiable.

Because each write preserves both directions, every stored binding stays
valid against the full current state after any sequence of accepted writes.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Generic, Iterator, NamedTuple, Optional, Union

from versolve.core.containers import IdentifierT, PackageContainer, dependencies_at
from versolve.core.specifiers import VersionSetSpecifier
from versolve.core.versions import Version
from versolve.exceptions import ContractViolation


# ---------------------------------------------------------------------------
# Bindings
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Excluded:
    """Binding stating that the container must not be included."""

    def __str__(self) -> str:
        return "excluded"


@dataclass(frozen=True)
class Bound:
    """Binding selecting a specific version of the container."""

    version: Version

    def __str__(self) -> str:
        return str(self.version)


BoundVersion = Union[Excluded, Bound]

EXCLUDED = Excluded()


class _Entry(NamedTuple):
    container: PackageContainer
    binding: BoundVersion


# ---------------------------------------------------------------------------
# VersionAssignment
# ---------------------------------------------------------------------------


class VersionAssignment(Generic[IdentifierT]):
    """A set of bindings together with the constraints they induce.

    The container behind each binding is retained so that its constraints
    can be re-derived without another fetch. Derived state is recomputed on
    every read and is therefore never stale.

    Check-then-write happens under one lock, so the assignment can be shared
    by threads that propose bindings concurrently.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._entries: dict[IdentifierT, _Entry] = {}

    # -- Reads ----------------------------------------------------------------

    def get(self, identifier: IdentifierT) -> Optional[BoundVersion]:
        """Return the binding for *identifier*, or ``None`` if undecided."""
        with self._lock:
            entry = self._entries.get(identifier)
            return entry.binding if entry is not None else None

    def __getitem__(self, container: PackageContainer[IdentifierT]) -> Optional[BoundVersion]:
        return self.get(container.identifier)

    def __contains__(self, identifier: object) -> bool:
        with self._lock:
            return identifier in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __iter__(self) -> Iterator[IdentifierT]:
        with self._lock:
            return iter(list(self._entries))

    def items(self) -> list[tuple[IdentifierT, BoundVersion]]:
        """Return ``(identifier, binding)`` pairs in the order they were first bound."""
        with self._lock:
            return [(ident, entry.binding) for ident, entry in self._entries.items()]

    def bound_versions(self) -> list[tuple[IdentifierT, Version]]:
        """Return ``(identifier, version)`` for every version-bound container."""
        return [
            (ident, binding.version)
            for ident, binding in self.items()
            if isinstance(binding, Bound)
        ]

    @property
    def constraints(self) -> dict[IdentifierT, VersionSetSpecifier]:
        """The merged constraints induced by every bound version."""
        return self.merged_constraints()

    def merged_constraints(
        self, excluding: Optional[IdentifierT] = None
    ) -> dict[IdentifierT, VersionSetSpecifier]:
        """Merge the constraints of all bound versions, per target identifier.

        Args:
            excluding: Identifier whose own binding should not contribute,
                used when validating a replacement for that binding.

        Returns:
            Mapping of constrained identifier to the intersection of every
            requirement placed on it. Excluded containers contribute nothing.
        """
        result: dict[IdentifierT, VersionSetSpecifier] = {}
        with self._lock:
            for ident, (container, binding) in self._entries.items():
                if ident == excluding or not isinstance(binding, Bound):
                    continue
                for constraint in dependencies_at(container, binding.version):
                    target = constraint.identifier
                    if target in result:
                        result[target] = result[target].intersection(constraint.requirement)
                    else:
                        result[target] = constraint.requirement
        return result

    # -- Validity -------------------------------------------------------------

    def is_valid(
        self, binding: BoundVersion, container: PackageContainer[IdentifierT]
    ) -> bool:
        """Check whether *binding* for *container* is consistent with the others.

        The container's current binding, if any, is ignored, since a write
        replaces it.
        """
        ident = container.identifier
        with self._lock:
            induced = self.merged_constraints(excluding=ident)

            if isinstance(binding, Excluded):
                # Only containers nothing depends on may be excluded.
                return ident not in induced

            if not isinstance(binding, Bound):
                raise ContractViolation(f"not a binding: {binding!r}")
            version = binding.version
            if version not in container.versions:
                return False
            requirement = induced.get(ident)
            if requirement is not None and not requirement.contains(version):
                return False

            for constraint in dependencies_at(container, version):
                target = constraint.identifier
                if target == ident:
                    if not constraint.requirement.contains(version):
                        return False
                    continue
                entry = self._entries.get(target)
                if entry is None:
                    continue
                if isinstance(entry.binding, Excluded):
                    return False
                if not constraint.requirement.contains(entry.binding.version):
                    return False
            return True

    def is_consistent(self) -> bool:
        """Check that every stored binding is valid against the full state."""
        with self._lock:
            return all(
                self.is_valid(entry.binding, entry.container)
                for entry in self._entries.values()
            )

    # -- Writes ---------------------------------------------------------------

    def propose(
        self, container: PackageContainer[IdentifierT], binding: BoundVersion
    ) -> bool:
        """Validate and commit *binding* for *container* in one step.

        Returns:
            True if the binding was stored, False if it was rejected.
        """
        with self._lock:
            if not self.is_valid(binding, container):
                return False
            self._entries[container.identifier] = _Entry(container, binding)
            return True

    def __setitem__(
        self, container: PackageContainer[IdentifierT], binding: BoundVersion
    ) -> None:
        """Store *binding*; the caller guarantees it is valid.

        Raises:
            ContractViolation: If the binding is missing or invalid.
        """
        if binding is None:
            raise ContractViolation("bindings cannot be removed from an assignment")
        if not self.propose(container, binding):
            raise ContractViolation(
                f"invalid binding {binding} for {container.identifier!r}"
            )

    def __delitem__(self, container: PackageContainer[IdentifierT]) -> None:
        raise ContractViolation("bindings cannot be removed from an assignment")

    def __repr__(self) -> str:
        body = ", ".join(f"{ident!r}: {binding}" for ident, binding in self.items())
        return f"VersionAssignment({{{body}}})"
