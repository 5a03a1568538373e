"""Package index: in-memory and file-backed container providers.

These are collaborator implementations of the container protocols in
``versolve.core``. The CLI uses them to resolve against an index file, and
the tests use them as provider doubles.
"""

from versolve.index.loader import load_index, parse_index, parse_requirement
from versolve.index.models import IndexContainer, InMemoryProvider

__all__ = [
    "IndexContainer",
    "InMemoryProvider",
    "load_index",
    "parse_index",
    "parse_requirement",
]
