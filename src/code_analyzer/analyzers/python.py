"""Pyright adapter: a best-effort scrape of Pyright's text output."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from pathlib import Path
from typing import Final

from code_analyzer.core import Issue
from code_analyzer.engines import EngineConfig, run_engine

logger = logging.getLogger(__name__)

TAG: Final[str] = "py"
LABEL: Final[str] = "Python"
ENGINE: Final[str] = "pyright"

_PYRIGHT_PATTERN = re.compile(r"(.+):(\d+):(\d+) - (\w+): (.+)")


def parse_pyright_text(lines: Iterable[str], file_path: str) -> list[Issue]:
    """Map ``path:line:col - severity: message`` lines to issues.

    Summary lines, blank lines and anything else that doesn't match are
    skipped. Pyright exposes no rule id in this mode.
    """
    issues: list[Issue] = []
    for raw in lines:
        match = _PYRIGHT_PATTERN.search(raw)
        if not match:
            continue
        _, line, column, severity, message = match.groups()
        issues.append(
            Issue(
                id=f"{TAG}-{file_path}-{len(issues)}",
                line=int(line),
                column=int(column),
                severity=severity.lower(),
                message=message,
                rule_id=None,
                fixable=False,
            )
        )
    return issues


async def analyze(file_path: Path, engine: EngineConfig, *, fix: bool = False) -> list[Issue]:
    """Type-check *file_path*. A non-zero exit just means diagnostics were found."""
    run = await run_engine(engine, file_path)
    if run.stderr.strip():
        logger.warning("Python analysis stderr: %s", run.stderr.strip())
    return parse_pyright_text(run.stdout.splitlines(), str(file_path))
