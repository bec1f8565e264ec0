"""code-analyzer — lint engines for JS/TS, HTML, CSS and Python exposed as MCP tools."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("code-analyzer-mcp")
except PackageNotFoundError:
    __version__ = "0.0.0-dev"

from code_analyzer.core import Issue, detect_language

__all__ = ["Issue", "__version__", "detect_language"]
