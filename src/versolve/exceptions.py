"""Versolve exception hierarchy.

Recoverable failures inherit from VersolveError, giving callers a single
base class to catch when they want to handle any resolution failure
without swallowing unrelated errors.

Contract violations are a separate, fatal class. ``ContractViolation``
derives from ``AssertionError`` and never from ``VersolveError``, so an
``except VersolveError`` handler cannot mistake a collaborator bug for a
retryable condition.
"""

from __future__ import annotations

from typing import Any


class VersolveError(Exception):
    """Base exception for all recoverable Versolve errors."""


class ContainerLoadError(VersolveError):
    """Raised by a container provider when a container cannot be loaded.

    Covers network failures, missing repositories, and unreadable
    on-disk state. The resolver propagates this error unchanged.

    Attributes:
        identifier: The container identifier that failed to load.
    """

    def __init__(self, identifier: Any, reason: str = "") -> None:
        self.identifier = identifier
        self.reason = reason
        message = f"Unable to load container {identifier!r}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class ResolutionError(VersolveError):
    """Raised when no acceptable version of a required container is found.

    The resolver prefers the latest version and falls back to lower ones,
    but never backtracks across containers; this error can therefore be
    raised for inputs that do have a solution.

    Attributes:
        identifier: The container that could not be bound.
        requirement: The merged version set it had to satisfy.
    """

    def __init__(self, identifier: Any, requirement: Any, reason: str = "") -> None:
        self.identifier = identifier
        self.requirement = requirement
        message = f"No version of {identifier!r} satisfies {requirement}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class IndexFormatError(VersolveError):
    """Raised when a package index document is malformed."""


class VersionParseError(ValueError):
    """Raised when a string is not a valid semantic version."""


class ConstraintParseError(ValueError):
    """Raised when a requirement string cannot be parsed."""


class ContractViolation(AssertionError):
    """Raised when a collaborator or caller breaks an interface contract.

    Examples: asking a container for the dependencies of a version it does
    not list, a provider returning a container with no versions or with
    unsorted versions, or writing a binding the assignment rejects.
    """
