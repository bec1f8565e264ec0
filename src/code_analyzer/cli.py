"""CLI for the code analyzer.

Convention-based: discovers .code-analyzer/ by walking up from cwd for engine
overrides.

Usage:
    code-analyzer analyze src/app.js              # Lint one file
    code-analyzer analyze page.html --json        # Same payload as the MCP tool
    code-analyzer analyze styles.css --fix        # Let the engine fix in place
    code-analyzer engines                         # Show engines and availability
    code-analyzer mcp                             # Run the MCP server on stdio
"""

from __future__ import annotations

import asyncio
import json as json_mod
import sys
from pathlib import Path

import click

from code_analyzer import __version__
from code_analyzer.analyzers import analyze_file
from code_analyzer.core import AUTO, LANGUAGES, UnsupportedLanguageError, find_project_dir, read_config, resolve_language
from code_analyzer.engines import EngineConfig, check_engine, load_engines
from code_analyzer.types.api import AnalyzeCodeResult

EXIT_ISSUES = 1
EXIT_USAGE = 2


def _load_engines() -> dict[str, EngineConfig]:
    project_dir = find_project_dir()
    return load_engines(read_config(project_dir) if project_dir else None)


@click.group()
@click.version_option(version=__version__, prog_name="code-analyzer")
def cli() -> None:
    """Code analyzer — ESLint, HTMLHint, Stylelint and Pyright behind one interface."""


@cli.command()
@click.argument("path", type=click.Path(dir_okay=True, path_type=Path))
@click.option(
    "--language",
    type=click.Choice([*LANGUAGES, AUTO]),
    default=AUTO,
    show_default=True,
    help="Language of the file",
)
@click.option("--fix", is_flag=True, default=False, help="Let the engine fix issues in place")
@click.option("--json", "as_json", is_flag=True, default=False, help="Output as JSON")
def analyze(path: Path, language: str, fix: bool, as_json: bool) -> None:
    """Analyze PATH and print the issues found."""
    if not path.exists():
        click.echo(f"Error: no such file: {path}", err=True)
        sys.exit(EXIT_USAGE)

    resolved = resolve_language(path, language)
    try:
        outcome = asyncio.run(analyze_file(path, resolved, fix=fix, engines=_load_engines()))
    except UnsupportedLanguageError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(EXIT_USAGE)

    issues = outcome.to_issue_list()
    if as_json:
        dicts = [issue.to_dict() for issue in issues]
        payload = AnalyzeCodeResult(filePath=str(path), language=resolved, issuesCount=len(dicts), issues=dicts)
        click.echo(json_mod.dumps(payload, indent=2))
    elif not issues:
        click.echo(f"{path}: no issues")
    else:
        for issue in issues:
            location = f"{path}:{issue.line or 0}:{issue.column or 0}"
            rule = f" [{issue.rule_id}]" if issue.rule_id else ""
            click.echo(f"{location} {issue.severity} {issue.message}{rule}")
        click.echo(f"\n{len(issues)} issue(s)")

    if any(issue.severity == "error" for issue in issues):
        sys.exit(EXIT_ISSUES)


@cli.command()
@click.option("--json", "as_json", is_flag=True, default=False, help="Output as JSON")
def engines(as_json: bool) -> None:
    """List configured engines and whether each can be launched."""
    rows = []
    for engine in _load_engines().values():
        problem = check_engine(engine)
        rows.append({**engine.to_dict(), "available": problem is None, "problem": problem})

    if as_json:
        click.echo(json_mod.dumps(rows, indent=2))
        return
    for row in rows:
        mark = "ok" if row["available"] else "missing"
        click.echo(f"{row['name']:<10} {mark:<8} {row['command']}")
        if row["problem"]:
            click.echo(f"{'':<19} {row['problem']}")


@cli.command()
@click.option("--project", type=click.Path(file_okay=False, path_type=Path), default=None, help="Project root")
def mcp(project: Path | None) -> None:
    """Run the MCP server on stdio."""
    from code_analyzer.mcp_server import serve

    serve(project)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
