"""Shared test fixtures for thriftlint."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

if TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture()
def thrift_project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Create an empty project directory and make it the working directory.

    Include-graph paths are normalized relative to the working directory, so
    tests that build graphs from real files run from inside the project.
    """
    project = tmp_path / "proj"
    project.mkdir()
    monkeypatch.chdir(project)
    return project
