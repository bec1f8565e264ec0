"""Core types and language dispatch for the code analyzer.

Both the CLI and the MCP server import from this module. Nothing here talks to
an engine: it holds the normalized Issue record, the extension table, and the
convention-based project discovery.

Convention-based discovery: a project may carry a `.code-analyzer/` directory
holding `config.toml` (engine overrides) and `code-analyzer.log`.
"""

from __future__ import annotations

import logging
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from code_analyzer.types.core import IssueDict

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Convention-based discovery
# ---------------------------------------------------------------------------

PROJECT_DIR_NAME = ".code-analyzer"
CONFIG_FILENAME = "config.toml"
LOG_FILENAME = "code-analyzer.log"

# ---------------------------------------------------------------------------
# Languages
# ---------------------------------------------------------------------------

AUTO = "auto"
UNKNOWN = "unknown"

LANGUAGES: tuple[str, ...] = ("javascript", "typescript", "html", "css", "python")

EXTENSION_MAP: dict[str, str] = {
    ".js": "javascript",
    ".ts": "typescript",
    ".tsx": "typescript",
    ".html": "html",
    ".htm": "html",
    ".css": "css",
    ".py": "python",
}


class UnsupportedLanguageError(ValueError):
    """Raised when a file resolves to a language no adapter handles."""

    def __init__(self, language: str) -> None:
        self.language = language
        super().__init__(f"Unsupported language: {language}")


@dataclass
class Issue:
    """One normalized diagnostic.

    ``line``/``column``/``rule_id`` are ``None`` when the engine supplies no
    value (engine-fault issues never carry a position).
    """

    id: str
    severity: str
    message: str
    line: int | None = None
    column: int | None = None
    rule_id: str | None = None
    fixable: bool = False

    def to_dict(self) -> IssueDict:
        return IssueDict(
            id=self.id,
            line=self.line,
            column=self.column,
            severity=self.severity,
            message=self.message,
            ruleId=self.rule_id,
            fixable=self.fixable,
        )


def detect_language(file_path: str | Path) -> str:
    """Map a path's extension to a language tag, or ``unknown``."""
    return EXTENSION_MAP.get(Path(file_path).suffix.lower(), UNKNOWN)


def resolve_language(file_path: str | Path, hint: str | None = AUTO) -> str:
    """Detect the language when *hint* is ``auto`` or missing, else return *hint*.

    An explicit hint is passed through unchanged even when it is not one of
    LANGUAGES; dispatch reports it as unsupported.
    """
    if hint is None or hint == AUTO:
        return detect_language(file_path)
    return hint


def find_project_dir(start: Path | None = None) -> Path | None:
    """Walk up from start (default cwd) looking for a .code-analyzer/ directory.

    Returns the .code-analyzer/ directory path, or None when there is none.
    """
    current = (start or Path.cwd()).resolve()
    for parent in [current, *current.parents]:
        candidate = parent / PROJECT_DIR_NAME
        if candidate.is_dir():
            return candidate
    return None


def read_config(project_dir: Path) -> dict[str, Any]:
    """Read .code-analyzer/config.toml. Returns {} if missing or corrupt."""
    config_path = project_dir / CONFIG_FILENAME
    if not config_path.exists():
        return {}
    try:
        return tomllib.loads(config_path.read_text(encoding="utf-8"))
    except (tomllib.TOMLDecodeError, OSError, UnicodeDecodeError) as exc:
        logger.warning("Failed to read %s, using defaults: %s", config_path, exc)
        return {}
