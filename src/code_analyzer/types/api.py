# IMPORT CONSTRAINT: types/ modules must only import from typing, stdlib, and each other.
"""TypedDicts for the JSON payloads returned by MCP tools and the CLI."""

from __future__ import annotations

from typing import TypedDict

from code_analyzer.types.core import IssueDict


class AnalyzeCodeResult(TypedDict):
    filePath: str
    language: str
    issuesCount: int
    issues: list[IssueDict]


class FixIssuesResult(TypedDict):
    filePath: str
    fixedIssues: int
    issueIds: list[str]
    status: str


class FixSuggestion(TypedDict):
    id: str
    description: str
    code: str


class FixSuggestionsResult(TypedDict):
    filePath: str
    issueId: str
    suggestions: list[FixSuggestion]
