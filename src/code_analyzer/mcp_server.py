"""MCP server for the code analyzer.

Exposes ESLint, HTMLHint, Stylelint and Pyright as MCP tools over stdio.
Every call is independent: no cache, no session, no issue registry.

Usage:
    code-analyzer-mcp                              # Auto-discover .code-analyzer/ from cwd
    code-analyzer-mcp --project /path/to/project   # Explicit project root
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
import time
from collections.abc import Callable
from contextvars import ContextVar
from pathlib import Path
from typing import Any

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.shared.exceptions import McpError
from mcp.types import METHOD_NOT_FOUND, CallToolRequest, CallToolResult, ErrorData, ServerResult, TextContent, Tool

from code_analyzer import __version__
from code_analyzer.core import PROJECT_DIR_NAME, find_project_dir, read_config
from code_analyzer.engines import DEFAULT_ENGINES, EngineConfig, load_engines
from code_analyzer.mcp_tools import analysis, fixes

SERVER_NAME = "code-analyzer-server"

server = Server(SERVER_NAME, version=__version__)
_engines: dict[str, EngineConfig] | None = None
_logger: logging.Logger | None = None


def _get_engines() -> dict[str, EngineConfig]:
    return _engines if _engines is not None else dict(DEFAULT_ENGINES)


# ---------------------------------------------------------------------------
# Tool registry
# ---------------------------------------------------------------------------

_TOOL_MODULES = (analysis, fixes)


def _collect_tools() -> tuple[list[Tool], dict[str, Callable[..., Any]]]:
    all_tools: list[Tool] = []
    all_handlers: dict[str, Callable[..., Any]] = {}
    for module in _TOOL_MODULES:
        tools, handlers = module.register()
        all_tools.extend(tools)
        all_handlers.update(handlers)
    return all_tools, all_handlers


_TOOLS, _HANDLERS = _collect_tools()


@server.list_tools()  # type: ignore[untyped-decorator,no-untyped-call]
async def list_tools() -> list[Tool]:
    return list(_TOOLS)


# ---------------------------------------------------------------------------
# Tool dispatch
# ---------------------------------------------------------------------------


# The SDK wraps every exception raised by call_tool into an isError result.
# Protocol errors are parked here and re-raised by the outer request handler
# so the session answers with a JSON-RPC error instead.
_protocol_error: ContextVar[McpError | None] = ContextVar("protocol_error", default=None)


@server.call_tool()  # type: ignore[untyped-decorator]
async def call_tool(name: str, arguments: dict[str, Any]) -> list[TextContent] | CallToolResult:
    logger = _logger or logging.getLogger(__name__)
    handler = _HANDLERS.get(name)
    if handler is None:
        logger.warning("unknown_tool", extra={"tool": name})
        error = McpError(ErrorData(code=METHOD_NOT_FOUND, message=f"Unknown tool: {name}"))
        _protocol_error.set(error)
        raise error

    t0 = time.monotonic()
    try:
        result = await handler(arguments or {})
    except McpError as e:
        logger.error("tool_error", extra={"tool": name, "args_data": arguments}, exc_info=True)
        _protocol_error.set(e)
        raise
    except Exception:
        logger.error("tool_error", extra={"tool": name, "args_data": arguments}, exc_info=True)
        raise
    duration_ms = round((time.monotonic() - t0) * 1000, 1)
    if isinstance(result, CallToolResult) and result.isError:
        error_text = result.content[0].text if result.content and isinstance(result.content[0], TextContent) else ""
        logger.warning(
            "tool_error_result",
            extra={"tool": name, "args_data": arguments, "duration_ms": duration_ms, "error": error_text},
        )
    else:
        logger.info("tool_call", extra={"tool": name, "args_data": arguments, "duration_ms": duration_ms})
    return result


_sdk_call_tool_handler = server.request_handlers[CallToolRequest]


async def _handle_call_tool_request(req: CallToolRequest) -> ServerResult:
    token = _protocol_error.set(None)
    try:
        response: ServerResult = await _sdk_call_tool_handler(req)
        error = _protocol_error.get()
    finally:
        _protocol_error.reset(token)
    if error is not None:
        raise error
    return response


server.request_handlers[CallToolRequest] = _handle_call_tool_request


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------


async def _run(project_path: Path | None) -> None:
    global _engines, _logger

    project_dir: Path | None
    if project_path:
        project_dir = project_path / PROJECT_DIR_NAME
        if not project_dir.is_dir():
            print(f"Error: {project_dir} not found.", file=sys.stderr)
            sys.exit(1)
    else:
        project_dir = find_project_dir()

    _engines = load_engines(read_config(project_dir) if project_dir else None)

    from code_analyzer.logging import setup_logging

    _logger = setup_logging(project_dir)
    _logger.info(
        "mcp_server_start",
        extra={"tool": "server", "args_data": {"project": str(project_dir.parent) if project_dir else None}},
    )

    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())


def main() -> None:
    parser = argparse.ArgumentParser(description="Code analyzer MCP server")
    parser.add_argument(
        "--project",
        type=Path,
        default=None,
        help=f"Project root holding {PROJECT_DIR_NAME}/ (auto-discovered if omitted)",
    )
    args = parser.parse_args()
    serve(args.project)


def serve(project_path: Path | None = None) -> None:
    """Serve on stdio until the client disconnects or an interrupt arrives."""
    try:
        asyncio.run(_run(project_path))
    except KeyboardInterrupt:
        # Interrupt closes the stdio session; exit cleanly.
        (_logger or logging.getLogger(__name__)).info("mcp_server_stop", extra={"tool": "server"})


if __name__ == "__main__":
    main()
