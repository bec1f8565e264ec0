"""HTMLHint adapter. HTMLHint has no autofix, so nothing is ever fixable."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Final

from code_analyzer.analyzers.common import iter_dicts, load_json_report, optional_int, optional_str
from code_analyzer.core import Issue
from code_analyzer.engines import EngineConfig, EngineError, bundled_config, run_engine, stderr_excerpt

TAG: Final[str] = "html"
LABEL: Final[str] = "HTML"
ENGINE: Final[str] = "htmlhint"
CONFIG_FILENAME: Final[str] = "htmlhintrc.json"


def parse_htmlhint(payload: Any, file_path: str) -> list[Issue]:
    """Map HTMLHint ``--format json`` output to issues for *file_path*.

    The report groups messages per file; messages of every entry are numbered
    in one sequence since only one file is checked.
    """
    messages = [message for entry in iter_dicts(payload) for message in iter_dicts(entry.get("messages"))]
    issues: list[Issue] = []
    for index, message in enumerate(messages):
        rule = message.get("rule")
        rule_id = optional_str(rule.get("id")) if isinstance(rule, dict) else None
        issues.append(
            Issue(
                id=f"{TAG}-{file_path}-{index}",
                line=optional_int(message.get("line")),
                column=optional_int(message.get("col")),
                severity="error" if message.get("type") == "error" else "warning",
                message=optional_str(message.get("message")) or "",
                rule_id=rule_id,
                fixable=False,
            )
        )
    return issues


async def analyze(file_path: Path, engine: EngineConfig, *, fix: bool = False) -> list[Issue]:
    """Check *file_path* against the bundled rule set. *fix* is ignored."""
    # Surface unreadable or non-UTF-8 files as a fault before HTMLHint sees them.
    file_path.read_text(encoding="utf-8")
    run = await run_engine(engine, file_path, config_path=bundled_config(CONFIG_FILENAME))
    try:
        payload = load_json_report(run.stdout)
    except EngineError:
        raise EngineError(stderr_excerpt(run)) from None
    return parse_htmlhint(payload, str(file_path))
