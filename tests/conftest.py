"""Shared pytest fixtures for code_analyzer tests."""

from __future__ import annotations

from pathlib import Path

import pytest
from click.testing import CliRunner

from code_analyzer.analyzers import css, html, javascript, python
from tests._fakes import FakeEngine

_ADAPTER_MODULES = (javascript, html, css, python)


@pytest.fixture
def fake_engine(monkeypatch: pytest.MonkeyPatch) -> FakeEngine:
    """Patch every adapter's ``run_engine`` with one FakeEngine."""
    fake = FakeEngine()
    for module in _ADAPTER_MODULES:
        monkeypatch.setattr(module, "run_engine", fake)
    return fake


@pytest.fixture
def sources(tmp_path: Path) -> dict[str, Path]:
    """One small source file per supported language."""
    files = {
        "javascript": ("app.js", "const unused = 1;\n"),
        "typescript": ("app.ts", "const n: number = 1;\n"),
        "html": ("page.html", "<!DOCTYPE html>\n<html><head></head><body></body></html>\n"),
        "css": ("styles.css", "a { color: #ffz; }\n"),
        "python": ("mod.py", "x: int = 'a'\n"),
    }
    result: dict[str, Path] = {}
    for language, (name, content) in files.items():
        path = tmp_path / name
        path.write_text(content)
        result[language] = path
    return result


@pytest.fixture
def cli_runner() -> CliRunner:
    """Click CLI test runner."""
    return CliRunner()
