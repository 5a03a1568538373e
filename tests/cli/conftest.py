"""Shared fixtures for CLI tests.

Provides index files covering a resolvable graph, a graph the resolver
cannot satisfy, and one with a dependency missing from the index.
"""

from __future__ import annotations

from pathlib import Path

import pytest
from click.testing import CliRunner


@pytest.fixture
def runner() -> CliRunner:
    """Create a Click CliRunner for invoking commands."""
    return CliRunner()


@pytest.fixture
def index_file(tmp_path: Path) -> Path:
    """An index where ``app`` resolves to app 2.0.0, http 1.5.0, log 0.3.1."""
    path = tmp_path / "index.yaml"
    path.write_text(
        "packages:\n"
        "  app:\n"
        "    1.0.0:\n"
        "      http: '>=1.0.0'\n"
        "    2.0.0:\n"
        "      http: '<2.0.0'\n"
        "      log: '*'\n"
        "  http:\n"
        "    1.0.0:\n"
        "    1.5.0:\n"
        "    2.0.0:\n"
        "  log:\n"
        "    0.3.1:\n"
        "  legacy:\n"
        "    0.9.0:\n"
    )
    return path


@pytest.fixture
def conflicting_index_file(tmp_path: Path) -> Path:
    """An index where ``app``'s only release needs an http version that does not exist."""
    path = tmp_path / "conflict.yaml"
    path.write_text(
        "packages:\n"
        "  app:\n"
        "    1.0.0:\n"
        "      http: '>=3.0.0'\n"
        "  http:\n"
        "    1.0.0:\n"
    )
    return path


@pytest.fixture
def broken_index_file(tmp_path: Path) -> Path:
    """An index whose ``app`` depends on a package it does not list."""
    path = tmp_path / "broken.yaml"
    path.write_text(
        "packages:\n"
        "  app:\n"
        "    1.0.0:\n"
        "      ghost: '*'\n"
    )
    return path
