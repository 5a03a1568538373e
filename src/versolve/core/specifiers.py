"""Version set algebra.

A ``VersionSetSpecifier`` describes a possibly infinite set of versions as
one of three variants:

- ``ANY``: the universal set.
- ``EMPTY``: no version is acceptable.
- ``RANGE``: a non-empty half-open interval ``[lower, upper)``. Either
  bound may be ``None``, meaning the interval is open on that side.

Sets compose by intersection, which is commutative and associative, has
``ANY`` as identity and ``EMPTY`` as absorbing element. A range whose
bounds cross is never constructed: the ``range`` factory and intersection
both normalize it to ``EMPTY``.

Requirement strings follow npm/pip-like syntax (``>=1.0.0,<2.0.0``,
``^1.2.0``, ``~1.2.0``, ``==1.2.3``, ``*``) and are parsed by
``VersionSetSpecifier.parse``.
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass
from typing import Callable, Optional

from versolve.core.versions import Version
from versolve.exceptions import ConstraintParseError, VersionParseError


class SetKind(enum.Enum):
    """The three variants of a version set."""

    ANY = "any"
    EMPTY = "empty"
    RANGE = "range"


@dataclass(frozen=True)
class VersionSetSpecifier:
    """An abstract, immutable set of versions.

    Use the ``any()``, ``empty()`` and ``range()`` factories rather than
    the constructor; they apply the normalization rules.

    Attributes:
        kind: Which variant this set is.
        lower: Inclusive lower bound (``RANGE`` only, ``None`` if open).
        upper: Exclusive upper bound (``RANGE`` only, ``None`` if open).
    """

    kind: SetKind
    lower: Optional[Version] = None
    upper: Optional[Version] = None

    def __post_init__(self) -> None:
        if self.kind is SetKind.RANGE:
            if self.lower is None and self.upper is None:
                raise ValueError("an unbounded range must be expressed as ANY")
            if self.lower is not None and self.upper is not None and not self.lower < self.upper:
                raise ValueError(f"empty range [{self.lower}, {self.upper}) must be expressed as EMPTY")
        elif self.lower is not None or self.upper is not None:
            raise ValueError(f"{self.kind.name} set cannot carry bounds")

    # -- Factories ----------------------------------------------------------

    @classmethod
    def any(cls) -> VersionSetSpecifier:
        return _ANY

    @classmethod
    def empty(cls) -> VersionSetSpecifier:
        return _EMPTY

    @classmethod
    def range(
        cls, lower: Optional[Version] = None, upper: Optional[Version] = None
    ) -> VersionSetSpecifier:
        """Build the half-open interval ``[lower, upper)``.

        Degenerate input normalizes: no bounds at all yields ``ANY``, and
        ``lower >= upper`` yields ``EMPTY``.
        """
        if lower is None and upper is None:
            return _ANY
        if lower is not None and upper is not None and not lower < upper:
            return _EMPTY
        return cls(SetKind.RANGE, lower, upper)

    @classmethod
    def exactly(cls, version: Version) -> VersionSetSpecifier:
        """The set containing only *version*."""
        return cls.range(version, version.successor())

    # -- Algebra ------------------------------------------------------------

    def intersection(self, other: VersionSetSpecifier) -> VersionSetSpecifier:
        """Compute the intersection of two version sets."""
        return _INTERSECTIONS[(self.kind, other.kind)](self, other)

    __and__ = intersection

    def contains(self, version: Version) -> bool:
        """Check whether *version* is a member of this set."""
        if self.kind is SetKind.ANY:
            return True
        if self.kind is SetKind.EMPTY:
            return False
        if self.lower is not None and version < self.lower:
            return False
        if self.upper is not None and not version < self.upper:
            return False
        return True

    __contains__ = contains

    @property
    def is_empty(self) -> bool:
        return self.kind is SetKind.EMPTY

    # -- Parsing and rendering ------------------------------------------------

    @classmethod
    def parse(cls, text: str) -> VersionSetSpecifier:
        """Parse a requirement string into a version set.

        Comma-separated atoms must all hold, so their sets are intersected.

        Args:
            text: Requirement string (e.g., ">=1.0.0,<2.0.0", "^1.2.0", "*").

        Returns:
            The corresponding ``VersionSetSpecifier``.

        Raises:
            ConstraintParseError: If an atom is malformed or uses an
                operator that cannot be expressed as one interval (``!=``).
        """
        stripped = text.strip()
        if not stripped:
            raise ConstraintParseError("Empty requirement")
        result = _ANY
        for atom in stripped.split(","):
            result = result.intersection(_parse_atom(atom))
        return result

    def __str__(self) -> str:
        if self.kind is SetKind.ANY:
            return "*"
        if self.kind is SetKind.EMPTY:
            return "none"
        if self.lower is not None and self.upper == self.lower.successor():
            return f"=={self.lower}"
        parts = []
        if self.lower is not None:
            parts.append(f">={self.lower}")
        if self.upper is not None:
            parts.append(f"<{self.upper}")
        return ",".join(parts)


_ANY = VersionSetSpecifier(SetKind.ANY)
_EMPTY = VersionSetSpecifier(SetKind.EMPTY)


def _intersect_ranges(
    lhs: VersionSetSpecifier, rhs: VersionSetSpecifier
) -> VersionSetSpecifier:
    lowers = [b for b in (lhs.lower, rhs.lower) if b is not None]
    uppers = [b for b in (lhs.upper, rhs.upper) if b is not None]
    return VersionSetSpecifier.range(
        max(lowers) if lowers else None,
        min(uppers) if uppers else None,
    )


def _keep_left(lhs: VersionSetSpecifier, rhs: VersionSetSpecifier) -> VersionSetSpecifier:
    return lhs


def _keep_right(lhs: VersionSetSpecifier, rhs: VersionSetSpecifier) -> VersionSetSpecifier:
    return rhs


# Every (kind, kind) pairing is listed; there is no fallback entry.
_INTERSECTIONS: dict[
    tuple[SetKind, SetKind],
    Callable[[VersionSetSpecifier, VersionSetSpecifier], VersionSetSpecifier],
] = {
    (SetKind.ANY, SetKind.ANY): _keep_left,
    (SetKind.ANY, SetKind.EMPTY): _keep_right,
    (SetKind.ANY, SetKind.RANGE): _keep_right,
    (SetKind.EMPTY, SetKind.ANY): _keep_left,
    (SetKind.EMPTY, SetKind.EMPTY): _keep_left,
    (SetKind.EMPTY, SetKind.RANGE): _keep_left,
    (SetKind.RANGE, SetKind.ANY): _keep_left,
    (SetKind.RANGE, SetKind.EMPTY): _keep_right,
    (SetKind.RANGE, SetKind.RANGE): _intersect_ranges,
}


# ---------------------------------------------------------------------------
# Requirement atoms
# ---------------------------------------------------------------------------

_ATOM_RE = re.compile(r"^\s*(?P<op>==|!=|>=|<=|>|<|\^|~|=)?\s*(?P<ver>\S+)\s*$")


def _parse_atom(atom: str) -> VersionSetSpecifier:
    stripped = atom.strip()
    if stripped == "*":
        return _ANY
    if stripped.lower() == "none":
        return _EMPTY

    m = _ATOM_RE.match(stripped)
    if not m:
        raise ConstraintParseError(f"Invalid requirement atom: {atom!r}")
    op = m.group("op") or "=="
    try:
        version = Version.parse(m.group("ver"))
    except VersionParseError as exc:
        raise ConstraintParseError(f"Invalid requirement atom: {atom!r}") from exc

    if op in ("==", "="):
        return VersionSetSpecifier.exactly(version)
    elif op == ">=":
        return VersionSetSpecifier.range(version, None)
    elif op == ">":
        return VersionSetSpecifier.range(version.successor(), None)
    elif op == "<":
        return VersionSetSpecifier.range(None, version)
    elif op == "<=":
        return VersionSetSpecifier.range(None, version.successor())
    elif op == "^":
        # Caret: same major, or same major.minor when major is 0.
        upper = version.next_minor() if version.major == 0 else version.next_major()
        return VersionSetSpecifier.range(version, upper)
    elif op == "~":
        return VersionSetSpecifier.range(version, version.next_minor())
    else:
        raise ConstraintParseError(
            f"Operator {op!r} in {atom!r} cannot be expressed as a single version range"
        )
