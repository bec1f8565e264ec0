# IMPORT CONSTRAINT: types/ modules must only import from typing, stdlib, and each other.
"""TypedDict contracts for MCP tool handler input arguments.

Each TypedDict mirrors the JSON Schema ``inputSchema`` on the corresponding
``mcp.types.Tool`` definition.  ``TOOL_ARGS_MAP`` maps tool names to their
TypedDict class so the sync test can verify structural agreement.

The MCP SDK validates arguments against the JSON Schema before a handler runs;
``cast()`` on these types narrows for static analysis only.
"""

# NOTE: Do NOT add ``from __future__ import annotations`` to this module.
# It breaks TypedDict.__required_keys__ / __optional_keys__ introspection
# on Python <3.14, which test_input_type_contracts.py depends on.

from typing import NotRequired, TypedDict


class AnalyzeCodeArgs(TypedDict):
    path: str
    language: NotRequired[str]
    fix: NotRequired[bool]


class FixIssuesArgs(TypedDict):
    path: str
    issueIds: list[str]


class GetFixSuggestionsArgs(TypedDict):
    path: str
    issueId: str


TOOL_ARGS_MAP: dict[str, type] = {
    "analyze_code": AnalyzeCodeArgs,
    "fix_issues": FixIssuesArgs,
    "get_fix_suggestions": GetFixSuggestionsArgs,
}
