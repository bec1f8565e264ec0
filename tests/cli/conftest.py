"""Fixtures for CLI interface tests."""

from __future__ import annotations

from pathlib import Path

import pytest
from click.testing import CliRunner


@pytest.fixture
def cli_in_project(tmp_path: Path, cli_runner: CliRunner, monkeypatch: pytest.MonkeyPatch) -> tuple[CliRunner, Path]:
    """Create a .code-analyzer/ project in tmp_path, chdir into it, return (runner, project_root)."""
    (tmp_path / ".code-analyzer").mkdir()
    monkeypatch.chdir(tmp_path)
    return cli_runner, tmp_path
