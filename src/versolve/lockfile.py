"""Lock documents --- a deterministic record of one resolution.

The lock document captures the input requirements and the resulting
assignment::

    {
      "excluded": ["legacy"],
      "lockfile_version": "1.0",
      "requirements": ["app>=1.0.0"],
      "resolved": {"app": "2.0.0", "http": "2.1.0"}
    }

Determinism guarantee: ``to_json()`` sorts every key and list, so the same
resolution always produces byte-identical output.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Sequence

from versolve.core.assignment import Bound, VersionAssignment
from versolve.core.containers import PackageContainerConstraint

LOCKFILE_VERSION = "1.0"


@dataclass
class Lock:
    """The outcome of a resolution, ready to be written to disk.

    Attributes:
        resolved: Mapping of container name to chosen version string.
        excluded: Names of containers that must not be installed.
        requirements: The input requirements, as strings.
    """

    resolved: dict[str, str] = field(default_factory=dict)
    excluded: list[str] = field(default_factory=list)
    requirements: list[str] = field(default_factory=list)

    @classmethod
    def from_assignment(
        cls,
        assignment: VersionAssignment,
        requirements: Sequence[PackageContainerConstraint] = (),
    ) -> Lock:
        lock = cls(requirements=[str(r) for r in requirements])
        for identifier, binding in assignment.items():
            if isinstance(binding, Bound):
                lock.resolved[str(identifier)] = str(binding.version)
            else:
                lock.excluded.append(str(identifier))
        return lock

    def to_dict(self) -> dict[str, Any]:
        return {
            "lockfile_version": LOCKFILE_VERSION,
            "requirements": sorted(self.requirements),
            "resolved": dict(sorted(self.resolved.items())),
            "excluded": sorted(self.excluded),
        }

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, sort_keys=True)

    def write(self, path: Path) -> None:
        """Write the lock document, creating parent directories as needed."""
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.to_json() + "\n", encoding="utf-8")
