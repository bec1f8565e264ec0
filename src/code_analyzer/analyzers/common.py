"""Pure helpers shared across the per-language adapters.

This module has NO dependency on the individual adapters or the MCP layer,
so it can be imported freely without circular imports.
"""

from __future__ import annotations

import errno
import json
import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from code_analyzer.core import Issue
from code_analyzer.engines import EngineError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EngineFault:
    """A single adapter-level failure standing in for the issue list."""

    tag: str
    label: str
    message: str

    def to_issue(self) -> Issue:
        return Issue(
            id=f"{self.tag}-error",
            severity="error",
            message=f"Error analyzing {self.label}: {self.message}",
        )


@dataclass
class AnalysisOutcome:
    """Either the issues an engine reported or the fault that prevented it."""

    issues: list[Issue] = field(default_factory=list)
    fault: EngineFault | None = None

    @property
    def ok(self) -> bool:
        return self.fault is None

    def to_issue_list(self) -> list[Issue]:
        """Normalize to the caller-facing list; a fault becomes one issue."""
        if self.fault is not None:
            return [self.fault.to_issue()]
        return list(self.issues)


def require_target(file_path: str | Path, *, allow_directory: bool = False) -> Path:
    """Return *file_path* as a Path if the adapter can analyze it.

    Raises FileNotFoundError when nothing is there, and IsADirectoryError for
    a directory unless *allow_directory* is set.
    """
    path = Path(file_path)
    if path.is_dir():
        if allow_directory:
            return path
        raise IsADirectoryError(errno.EISDIR, "Is a directory", str(file_path))
    if not path.is_file():
        msg = f"No such file: {file_path}"
        raise FileNotFoundError(msg)
    return path


def load_json_report(*streams: str) -> Any:
    """Parse the first stream that holds a JSON document.

    Engines differ on which stream carries the formatted report, so callers
    pass candidates in preference order. Raises EngineError if none parse.
    """
    for stream in streams:
        text = stream.strip()
        if not text:
            continue
        try:
            return json.loads(text)
        except json.JSONDecodeError:
            logger.debug("Stream is not a JSON report: %.200s", text)
    msg = "engine produced no JSON report"
    raise EngineError(msg)


def iter_dicts(value: Any) -> list[Mapping[str, Any]]:
    """Mapping items of *value* when it is a sequence, else an empty list."""
    if not isinstance(value, Sequence) or isinstance(value, (str, bytes, bytearray)):
        return []
    return [item for item in value if isinstance(item, Mapping)]


def optional_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value)
    return None


def optional_str(value: Any) -> str | None:
    if value is None:
        return None
    return value if isinstance(value, str) else str(value)
