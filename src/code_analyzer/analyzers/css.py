"""Stylelint adapter.

Stylelint runs with its own configuration discovery; no rules are set here.
Fixability is never derived from the report, even when ``--fix`` applied.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Final

from code_analyzer.analyzers.common import iter_dicts, load_json_report, optional_int, optional_str
from code_analyzer.core import Issue
from code_analyzer.engines import EngineConfig, EngineError, run_engine, stderr_excerpt

TAG: Final[str] = "css"
LABEL: Final[str] = "CSS"
ENGINE: Final[str] = "stylelint"

# 1 = fatal error, 64 = invalid CLI usage, 78 = invalid configuration.
# 2 only means lint problems were found.
_STYLELINT_FATAL_EXITS: Final[frozenset[int]] = frozenset({1, 64, 78})


def parse_stylelint(payload: Any) -> list[Issue]:
    """Map a Stylelint JSON report (one entry per source) to issues."""
    issues: list[Issue] = []
    for result in iter_dicts(payload):
        source = optional_str(result.get("source")) or ""
        for index, warning in enumerate(iter_dicts(result.get("warnings"))):
            issues.append(
                Issue(
                    id=f"{TAG}-{source}-{index}",
                    line=optional_int(warning.get("line")),
                    column=optional_int(warning.get("column")),
                    severity=optional_str(warning.get("severity")) or "warning",
                    message=optional_str(warning.get("text")) or "",
                    rule_id=optional_str(warning.get("rule")),
                    fixable=False,
                )
            )
    return issues


async def analyze(file_path: Path, engine: EngineConfig, *, fix: bool = False) -> list[Issue]:
    """Lint *file_path* (a file or directory); with *fix*, Stylelint rewrites in place."""
    run = await run_engine(engine, file_path, extra_args=["--fix"] if fix else ())
    if run.returncode in _STYLELINT_FATAL_EXITS:
        raise EngineError(stderr_excerpt(run))
    # Stylelint 16 prints the formatted report to stderr unless --stdout is given.
    return parse_stylelint(load_json_report(run.stdout, run.stderr))
