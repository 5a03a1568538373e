"""Shared fixtures for versolve tests."""

import pathlib

import pytest


@pytest.fixture
def index_path(tmp_path: pathlib.Path) -> pathlib.Path:
    """Create a minimal package index file."""
    path = tmp_path / "index.yaml"
    path.write_text("packages:\n  solo:\n    0.1.0:\n")
    return path
