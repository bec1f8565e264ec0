"""Pure helpers shared across MCP tool modules.

This module has NO dependency on ``mcp_server`` module globals, so it can
be imported freely without triggering circular-import issues.
"""

from __future__ import annotations

import json
from typing import Any, TypeVar, cast

from mcp.types import CallToolResult, TextContent

_T = TypeVar("_T")


def _parse_args(arguments: dict[str, Any], cls: type[_T]) -> _T:
    """Cast MCP arguments to a typed dict for static analysis.

    The MCP SDK validates arguments against the JSON Schema before handler
    invocation. This cast() provides type narrowing only — no runtime validation.
    """
    return cast(_T, arguments)


def _text(content: object) -> list[TextContent]:
    if isinstance(content, str):
        return [TextContent(type="text", text=content)]
    return [TextContent(type="text", text=json.dumps(content, indent=2, default=str))]


def _error_result(message: str) -> CallToolResult:
    """An error-flagged tool result carrying a human-readable message."""
    return CallToolResult(content=_text(message), isError=True)

