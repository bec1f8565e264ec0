"""ESLint adapter for JavaScript and TypeScript."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Final

from code_analyzer.analyzers.common import iter_dicts, load_json_report, optional_int, optional_str
from code_analyzer.core import Issue
from code_analyzer.engines import EngineConfig, EngineError, bundled_config, run_engine, stderr_excerpt

TAG: Final[str] = "js"
LABEL: Final[str] = "JavaScript"
ENGINE: Final[str] = "eslint"
CONFIG_FILENAME: Final[str] = "eslintrc.json"

_ESLINT_ERROR_LEVEL: Final[int] = 2
# 0 = clean, 1 = lint errors found, 2 = configuration problem or internal error
_ESLINT_FATAL_EXIT: Final[int] = 2


def parse_eslint(payload: Any) -> list[Issue]:
    """Map ESLint ``--format json`` results to issues.

    Ordinals restart for each result entry; the ID embeds ESLint's own
    (absolute) ``filePath``.
    """
    issues: list[Issue] = []
    for result in iter_dicts(payload):
        file_path = optional_str(result.get("filePath")) or ""
        for index, message in enumerate(iter_dicts(result.get("messages"))):
            issues.append(
                Issue(
                    id=f"{TAG}-{file_path}-{index}",
                    line=optional_int(message.get("line")),
                    column=optional_int(message.get("column")),
                    severity="error" if message.get("severity") == _ESLINT_ERROR_LEVEL else "warning",
                    message=optional_str(message.get("message")) or "",
                    rule_id=optional_str(message.get("ruleId")),
                    fixable=message.get("fix") is not None,
                )
            )
    return issues


async def analyze(file_path: Path, engine: EngineConfig, *, fix: bool = False) -> list[Issue]:
    """Lint *file_path* (a file or directory); with *fix*, ESLint writes fixes in the same pass."""
    run = await run_engine(
        engine,
        file_path,
        config_path=bundled_config(CONFIG_FILENAME),
        extra_args=["--fix"] if fix else (),
    )
    if run.returncode >= _ESLINT_FATAL_EXIT:
        raise EngineError(stderr_excerpt(run))
    return parse_eslint(load_json_report(run.stdout))
