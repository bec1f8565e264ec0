"""Per-language adapters and the dispatch table that selects one.

Each adapter module exposes ``TAG``, ``LABEL``, ``ENGINE`` and an async
``analyze(file_path, engine, *, fix)`` that raises on any engine fault.
``analyze_file`` catches those faults at the adapter boundary and returns an
:class:`AnalysisOutcome` instead.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from pathlib import Path

from code_analyzer.analyzers import css, html, javascript, python
from code_analyzer.analyzers.common import AnalysisOutcome, EngineFault, require_target
from code_analyzer.core import Issue, UnsupportedLanguageError
from code_analyzer.engines import DEFAULT_ENGINES, EngineConfig, EngineError

logger = logging.getLogger(__name__)

AnalyzeFn = Callable[..., Awaitable[list[Issue]]]


@dataclass(frozen=True)
class Analyzer:
    tag: str
    label: str
    engine: str
    run: AnalyzeFn
    # The engine expands a directory itself. HTMLHint is fed one read file.
    accepts_directory: bool = True


_JAVASCRIPT = Analyzer(javascript.TAG, javascript.LABEL, javascript.ENGINE, javascript.analyze)

ANALYZERS: dict[str, Analyzer] = {
    "javascript": _JAVASCRIPT,
    "typescript": _JAVASCRIPT,
    "html": Analyzer(html.TAG, html.LABEL, html.ENGINE, html.analyze, accepts_directory=False),
    "css": Analyzer(css.TAG, css.LABEL, css.ENGINE, css.analyze),
    "python": Analyzer(python.TAG, python.LABEL, python.ENGINE, python.analyze),
}


def get_analyzer(language: str) -> Analyzer:
    """Return the adapter for *language*. Raises UnsupportedLanguageError."""
    try:
        return ANALYZERS[language]
    except KeyError:
        raise UnsupportedLanguageError(language) from None


async def analyze_file(
    file_path: str | Path,
    language: str,
    *,
    fix: bool = False,
    engines: Mapping[str, EngineConfig] | None = None,
) -> AnalysisOutcome:
    """Run the adapter for *language* on *file_path*.

    A directory is passed straight to engines that walk one (ESLint,
    Stylelint, Pyright); HTML analysis faults on it.

    Raises UnsupportedLanguageError for a language with no adapter. Every
    other failure becomes the outcome's ``fault``.
    """
    analyzer = get_analyzer(language)
    engine = (engines or DEFAULT_ENGINES)[analyzer.engine]
    try:
        path = require_target(file_path, allow_directory=analyzer.accepts_directory)
        issues = await analyzer.run(path, engine, fix=fix)
    except (EngineError, OSError, ValueError) as e:
        logger.error("%s analysis error: %s", analyzer.label, e, exc_info=True)
        return AnalysisOutcome(fault=EngineFault(analyzer.tag, analyzer.label, str(e)))
    return AnalysisOutcome(issues=issues)


__all__ = [
    "ANALYZERS",
    "AnalysisOutcome",
    "Analyzer",
    "EngineFault",
    "analyze_file",
    "get_analyzer",
]
