"""Fixtures for MCP server tests."""

from __future__ import annotations

from collections.abc import Generator

import pytest

from code_analyzer.engines import DEFAULT_ENGINES, EngineConfig


@pytest.fixture
def mcp_engines() -> Generator[dict[str, EngineConfig], None, None]:
    """Install a fresh engine table in the MCP module globals."""
    import code_analyzer.mcp_server as mcp_mod

    engines = dict(DEFAULT_ENGINES)
    original = mcp_mod._engines
    mcp_mod._engines = engines

    yield engines

    mcp_mod._engines = original
