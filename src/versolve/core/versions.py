"""Semantic version values.

Resolution only needs versions to be totally ordered and comparable for
equality. This module provides the concrete ``Version`` type used by the
rest of the package, following SemVer 2.0.0 precedence rules.

References
----------
.. [SemVer] Preston-Werner, T. (2013). "Semantic Versioning 2.0.0."
   https://semver.org/
"""

from __future__ import annotations

import functools
import re
from dataclasses import dataclass, field

from versolve.exceptions import VersionParseError

# Numeric pre-release identifiers must not have leading zeros.
_PRE_IDENT = r"(?:0|[1-9]\d*|\d*[A-Za-z-][0-9A-Za-z-]*)"

_SEMVER_RE = re.compile(
    r"^(?P<major>0|[1-9]\d*)\.(?P<minor>0|[1-9]\d*)\.(?P<patch>0|[1-9]\d*)"
    rf"(?:-(?P<pre>{_PRE_IDENT}(?:\.{_PRE_IDENT})*))?"
    r"(?:\+(?P<build>[0-9A-Za-z\-]+(?:\.[0-9A-Za-z\-]+)*))?$"
)


def _prerelease_key(identifiers: tuple[str, ...]) -> tuple:
    """Sort key for pre-release identifiers (SemVer section 11.4).

    Numeric identifiers compare numerically and always sort before
    alphanumeric ones. A release (no identifiers) sorts after every
    pre-release of the same core version.
    """
    if not identifiers:
        return (1,)
    parts = []
    for ident in identifiers:
        if ident.isdigit():
            parts.append((0, int(ident), ""))
        else:
            parts.append((1, 0, ident))
    return (0, tuple(parts))


@functools.total_ordering
@dataclass(frozen=True)
class Version:
    """An immutable semantic version.

    Build metadata is kept for display but ignored for ordering and
    equality.

    Attributes:
        major: Major version number.
        minor: Minor version number.
        patch: Patch version number.
        prerelease: Dot-separated pre-release identifiers, e.g. ("beta", "2").
        build: Build metadata identifiers.
    """

    major: int
    minor: int
    patch: int
    prerelease: tuple[str, ...] = ()
    build: tuple[str, ...] = field(default=(), compare=False, hash=False)

    @classmethod
    def parse(cls, text: str) -> Version:
        """Parse a semantic version string.

        Args:
            text: Version string (e.g., "1.2.3", "0.1.0-alpha.1+sha.5114f85").

        Returns:
            The parsed ``Version``.

        Raises:
            VersionParseError: If the string is not a valid semantic version.
        """
        m = _SEMVER_RE.match(str(text).strip())
        if not m:
            raise VersionParseError(f"Invalid semantic version: {text!r}")
        pre = m.group("pre")
        build = m.group("build")
        return cls(
            int(m.group("major")),
            int(m.group("minor")),
            int(m.group("patch")),
            tuple(pre.split(".")) if pre else (),
            tuple(build.split(".")) if build else (),
        )

    @property
    def is_prerelease(self) -> bool:
        return bool(self.prerelease)

    def _key(self) -> tuple:
        return (self.major, self.minor, self.patch, _prerelease_key(self.prerelease))

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._key() < other._key()

    def next_major(self) -> Version:
        return Version(self.major + 1, 0, 0)

    def next_minor(self) -> Version:
        return Version(self.major, self.minor + 1, 0)

    def next_patch(self) -> Version:
        return Version(self.major, self.minor, self.patch + 1)

    def successor(self) -> Version:
        """Return the smallest version strictly greater than this one.

        ``1.2.3`` is followed by ``1.2.4-0`` (the lowest pre-release of the
        next patch), and ``1.2.3-rc`` by ``1.2.3-rc.0``. This turns an
        inclusive bound into an exclusive one without skipping versions.
        """
        if self.prerelease:
            return Version(self.major, self.minor, self.patch, self.prerelease + ("0",))
        return Version(self.major, self.minor, self.patch + 1, ("0",))

    def __str__(self) -> str:
        text = f"{self.major}.{self.minor}.{self.patch}"
        if self.prerelease:
            text += "-" + ".".join(self.prerelease)
        if self.build:
            text += "+" + ".".join(self.build)
        return text

    def __repr__(self) -> str:
        return f"Version({str(self)!r})"
