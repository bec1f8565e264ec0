"""MCP tool for running an engine against a file."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

from mcp.shared.exceptions import McpError
from mcp.types import INVALID_PARAMS, CallToolResult, ErrorData, TextContent, Tool

from code_analyzer.analyzers import analyze_file
from code_analyzer.core import AUTO, LANGUAGES, UnsupportedLanguageError, resolve_language
from code_analyzer.mcp_tools.common import _error_result, _parse_args, _text
from code_analyzer.types.api import AnalyzeCodeResult
from code_analyzer.types.inputs import AnalyzeCodeArgs


def register() -> tuple[list[Tool], dict[str, Callable[..., Any]]]:
    """Return (tool_definitions, handler_map) for analysis tools."""
    tools = [
        Tool(
            name="analyze_code",
            description="Analyze code for bugs, errors, and functionality issues",
            inputSchema={
                "type": "object",
                "properties": {
                    "path": {
                        "type": "string",
                        "description": "Path to the file or directory to analyze",
                    },
                    "language": {
                        "type": "string",
                        "description": "Optional: Language of the code (auto-detected if not provided)",
                        "enum": [*LANGUAGES, AUTO],
                    },
                    "fix": {
                        "type": "boolean",
                        "description": "Whether to automatically fix issues when possible",
                        "default": False,
                    },
                },
                "required": ["path"],
            },
        ),
    ]

    handlers: dict[str, Callable[..., Any]] = {
        "analyze_code": _handle_analyze_code,
    }

    return tools, handlers


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------


async def _handle_analyze_code(arguments: dict[str, Any]) -> list[TextContent] | CallToolResult:
    from code_analyzer.mcp_server import _get_engines

    args = _parse_args(arguments, AnalyzeCodeArgs)
    file_path = args.get("path")
    if not isinstance(file_path, str) or not file_path.strip():
        return _error_result("Error analyzing code: path must be a non-empty string")
    fix = args.get("fix", False)
    if not isinstance(fix, bool):
        return _error_result("Error analyzing code: fix must be a boolean")

    try:
        Path(file_path).stat()
        language = resolve_language(file_path, args.get("language", AUTO))
        outcome = await analyze_file(file_path, language, fix=fix, engines=_get_engines())
    except UnsupportedLanguageError as e:
        raise McpError(ErrorData(code=INVALID_PARAMS, message=str(e))) from e
    except (OSError, ValueError) as e:
        return _error_result(f"Error analyzing code: {e}")

    issues = [issue.to_dict() for issue in outcome.to_issue_list()]
    return _text(
        AnalyzeCodeResult(
            filePath=file_path,
            language=language,
            issuesCount=len(issues),
            issues=issues,
        )
    )
