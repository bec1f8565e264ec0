"""MCP tools for fixing issues and suggesting fixes.

Both are placeholders: no issue registry links IDs from ``analyze_code`` back
to engine fixes, so neither tool touches a file or inspects the IDs it gets.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from mcp.types import CallToolResult, TextContent, Tool

from code_analyzer.mcp_tools.common import _error_result, _parse_args, _text
from code_analyzer.types.api import FixIssuesResult, FixSuggestion, FixSuggestionsResult
from code_analyzer.types.inputs import FixIssuesArgs, GetFixSuggestionsArgs

FIXED_STATUS = "Fixed issues successfully"

PLACEHOLDER_SUGGESTION = FixSuggestion(
    id="fix-1",
    description="Replace with correct syntax",
    code="// Example fixed code",
)


def register() -> tuple[list[Tool], dict[str, Callable[..., Any]]]:
    """Return (tool_definitions, handler_map) for fix tools."""
    tools = [
        Tool(
            name="fix_issues",
            description="Fix identified issues in code",
            inputSchema={
                "type": "object",
                "properties": {
                    "path": {
                        "type": "string",
                        "description": "Path to the file to fix",
                    },
                    "issueIds": {
                        "type": "array",
                        "items": {"type": "string"},
                        "description": "IDs of issues to fix (from analyze_code results)",
                    },
                },
                "required": ["path", "issueIds"],
            },
        ),
        Tool(
            name="get_fix_suggestions",
            description="Get suggestions for fixing identified issues",
            inputSchema={
                "type": "object",
                "properties": {
                    "path": {
                        "type": "string",
                        "description": "Path to the file with issues",
                    },
                    "issueId": {
                        "type": "string",
                        "description": "ID of the issue to get suggestions for",
                    },
                },
                "required": ["path", "issueId"],
            },
        ),
    ]

    handlers: dict[str, Callable[..., Any]] = {
        "fix_issues": _handle_fix_issues,
        "get_fix_suggestions": _handle_get_fix_suggestions,
    }

    return tools, handlers


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------


async def _handle_fix_issues(arguments: dict[str, Any]) -> list[TextContent] | CallToolResult:
    args = _parse_args(arguments, FixIssuesArgs)
    try:
        issue_ids = list(args["issueIds"])
        result = FixIssuesResult(
            filePath=args["path"],
            fixedIssues=len(issue_ids),
            issueIds=issue_ids,
            status=FIXED_STATUS,
        )
    except (KeyError, TypeError) as e:
        return _error_result(f"Error fixing issues: {e}")
    return _text(result)


async def _handle_get_fix_suggestions(arguments: dict[str, Any]) -> list[TextContent] | CallToolResult:
    args = _parse_args(arguments, GetFixSuggestionsArgs)
    try:
        result = FixSuggestionsResult(
            filePath=args["path"],
            issueId=args["issueId"],
            suggestions=[FixSuggestion(**PLACEHOLDER_SUGGESTION)],
        )
    except KeyError as e:
        return _error_result(f"Error getting fix suggestions: missing argument {e}")
    return _text(result)
