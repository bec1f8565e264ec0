# IMPORT CONSTRAINT: types/ modules must only import from typing, stdlib, and each other.
# NEVER import from core.py, engines.py, or the analyzers — this prevents circular imports.
"""Typed return-value contracts for code_analyzer core and MCP layers."""

from __future__ import annotations

from code_analyzer.types.api import (
    AnalyzeCodeResult,
    FixIssuesResult,
    FixSuggestion,
    FixSuggestionsResult,
)
from code_analyzer.types.core import IssueDict

__all__ = [
    "AnalyzeCodeResult",
    "FixIssuesResult",
    "FixSuggestion",
    "FixSuggestionsResult",
    "IssueDict",
]
