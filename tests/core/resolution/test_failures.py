"""Tests for provider failures and contract violations.

Provider failures are recoverable and surface unchanged; contract
violations are fatal and never disguised as recoverable errors.
"""

from __future__ import annotations

import logging

import pytest

from versolve.core import (
    DependencyResolver,
    PackageContainerConstraint,
    RecordingDelegate,
    VersionSetSpecifier,
    check_versions,
    dependencies_at,
)
from versolve.exceptions import ContainerLoadError, ContractViolation, VersolveError
from versolve.index import IndexContainer
from tests.core.helpers import StaticProvider, UnsortedContainer, make_container, make_provider, v


def req(name: str, text: str = "*") -> PackageContainerConstraint:
    return PackageContainerConstraint(name, VersionSetSpecifier.parse(text))


class FailingProvider:
    """Provider that raises one specific error for one identifier."""

    def __init__(self, inner, failing: str, error: Exception) -> None:
        self._inner = inner
        self._failing = failing
        self.error = error
        self.calls = 0

    def get_container(self, identifier: str):
        self.calls += 1
        if identifier == self._failing:
            raise self.error
        return self._inner.get_container(identifier)


# ===========================================================================
# Provider failures
# ===========================================================================


class TestProviderFailures:
    """A fetch failure aborts the run and reaches the caller unchanged."""

    PACKAGES = {
        "A": {"1.0.0": {"B": "*"}},
        "B": {"1.0.0": {"X": "*"}},
        "X": {"1.0.0": {}},
    }

    def test_transitive_failure_propagates_same_error(self) -> None:
        error = ContainerLoadError("X", "connection reset")
        provider = FailingProvider(make_provider(self.PACKAGES), "X", error)
        with pytest.raises(ContainerLoadError) as exc_info:
            DependencyResolver([req("A")], provider).resolve()
        assert exc_info.value is error

    def test_unknown_container_fails(self) -> None:
        provider = make_provider({"A": {"1.0.0": {"missing": "*"}}})
        with pytest.raises(ContainerLoadError) as exc_info:
            DependencyResolver([req("A")], provider).resolve()
        assert exc_info.value.identifier == "missing"

    def test_unavailable_container_fails(self) -> None:
        provider = make_provider(self.PACKAGES, unavailable=["B"])
        with pytest.raises(ContainerLoadError):
            DependencyResolver([req("A")], provider).resolve()

    def test_no_retry(self) -> None:
        error = ContainerLoadError("A", "timeout")
        provider = FailingProvider(make_provider(self.PACKAGES), "A", error)
        with pytest.raises(ContainerLoadError):
            DependencyResolver([req("A")], provider).resolve()
        assert provider.calls == 1

    def test_failed_container_not_announced(self) -> None:
        delegate = RecordingDelegate()
        provider = make_provider(self.PACKAGES, unavailable=["X"])
        with pytest.raises(ContainerLoadError):
            DependencyResolver([req("A")], provider, delegate).resolve()
        assert delegate.identifiers == ["A", "B"]

    def test_failure_with_prefetch(self) -> None:
        error = ContainerLoadError("X", "offline")
        provider = FailingProvider(make_provider(self.PACKAGES), "X", error)
        with pytest.raises(ContainerLoadError) as exc_info:
            DependencyResolver([req("A")], provider, max_workers=3).resolve()
        assert exc_info.value is error
        assert provider.calls == 3

    def test_load_error_is_recoverable_class(self) -> None:
        assert issubclass(ContainerLoadError, VersolveError)


# ===========================================================================
# Contract violations
# ===========================================================================


class TestContractViolations:
    """Broken collaborator contracts stop resolution immediately."""

    def test_container_without_versions(self) -> None:
        provider = StaticProvider(IndexContainer("hollow", {}))
        with pytest.raises(ContractViolation, match="no versions"):
            DependencyResolver([req("hollow")], provider).resolve()

    def test_unsorted_versions(self) -> None:
        provider = StaticProvider(UnsortedContainer("messy", ["2.0.0", "1.0.0"]))
        with pytest.raises(ContractViolation, match="improperly ordered"):
            DependencyResolver([req("messy")], provider).resolve()

    def test_dependencies_for_unlisted_version(self) -> None:
        container = make_container("A", {"1.0.0": {}})
        with pytest.raises(ContractViolation):
            dependencies_at(container, v("3.0.0"))
        with pytest.raises(ContractViolation):
            container.get_dependencies(v("3.0.0"))

    def test_check_versions_accepts_sorted(self) -> None:
        container = make_container("A", {"2.0.0": {}, "1.0.0": {}})
        assert check_versions(container) == [v("1.0.0"), v("2.0.0")]

    def test_violation_not_caught_as_recoverable(self) -> None:
        provider = StaticProvider(IndexContainer("hollow", {}))
        with pytest.raises(ContractViolation):
            try:
                DependencyResolver([req("hollow")], provider).resolve()
            except VersolveError:
                pytest.fail("contract violation was treated as recoverable")

    def test_violation_logged_as_contract_error(self, caplog: pytest.LogCaptureFixture) -> None:
        provider = StaticProvider(UnsortedContainer("messy", ["2.0.0", "1.0.0"]))
        with caplog.at_level(logging.WARNING, logger="versolve.core.resolver"):
            with pytest.raises(ContractViolation):
                DependencyResolver([req("messy")], provider).resolve()
        messages = [r.getMessage() for r in caplog.records]
        assert not any("Failed to load container" in m for m in messages)
        assert any(
            r.levelno == logging.ERROR and "invalid container messy" in r.getMessage()
            for r in caplog.records
        )
