"""Shared fixtures for branch filter tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from tests.unit.branchfilter.git_test_utils import build_aged_repo


@pytest.fixture
def aged_repo(tmp_path: Path) -> Path:
    return build_aged_repo(tmp_path / "repo")
