"""External lint engine registry and invocation.

Each engine is a command template run as a subprocess. Built-in defaults can
be overridden per project in .code-analyzer/config.toml::

    [engines.eslint]
    command = "eslint"
    timeout = 60

Template variables substituted at invocation:
    {file}    — target file path
    {config}  — bundled engine config file (eslintrc.json, htmlhintrc.json)
"""

from __future__ import annotations

import asyncio
import logging
import os
import re
import shlex
import shutil
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field, replace
from importlib.resources import files
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

_SAFE_NAME_RE = re.compile(r"^[\w-]+$")
_STDERR_TRUNCATE = 2000


class EngineError(RuntimeError):
    """An engine could not be launched, crashed, or produced unusable output."""


@dataclass(frozen=True)
class EngineRun:
    returncode: int
    stdout: str
    stderr: str


@dataclass(frozen=True)
class EngineConfig:
    """An engine definition: command template plus invocation settings."""

    name: str
    description: str
    command: str
    args: list[str] = field(default_factory=list)
    env: dict[str, str] = field(default_factory=dict)
    timeout: float | None = None

    def build_command(
        self,
        *,
        file_path: str,
        config_path: str = "",
        extra_args: Sequence[str] = (),
    ) -> list[str]:
        """Build the full command list with template variables substituted.

        *extra_args* (e.g. ``--fix``) go between the base command and the
        templated args, so the target file stays last.

        Raises ValueError if the command string is malformed (e.g. unmatched quotes).
        """
        subs = {
            "{file}": str(file_path),
            "{config}": str(config_path),
        }
        try:
            base = shlex.split(self.command)
        except (TypeError, ValueError) as e:
            msg = f"Malformed command string in engine {self.name!r}: {e}"
            raise ValueError(msg) from e
        expanded_args = []
        for raw_arg in self.args:
            arg = raw_arg
            for key, val in subs.items():
                arg = arg.replace(key, val)
            expanded_args.append(arg)
        return [*base, *extra_args, *expanded_args]

    def to_dict(self) -> dict[str, object]:
        return {
            "name": self.name,
            "description": self.description,
            "command": self.command,
            "args": self.args,
            "timeout": self.timeout,
        }


DEFAULT_ENGINES: dict[str, EngineConfig] = {
    "eslint": EngineConfig(
        name="eslint",
        description="ESLint with eslint:recommended (JavaScript, TypeScript)",
        command="npx --no-install eslint",
        args=["--no-eslintrc", "--config", "{config}", "--format", "json", "{file}"],
        env={"ESLINT_USE_FLAT_CONFIG": "false"},
    ),
    "htmlhint": EngineConfig(
        name="htmlhint",
        description="HTMLHint with the bundled rule set (HTML)",
        command="npx --no-install htmlhint",
        args=["--config", "{config}", "--format", "json", "{file}"],
    ),
    "stylelint": EngineConfig(
        name="stylelint",
        description="Stylelint with the project's own configuration (CSS)",
        command="npx --no-install stylelint",
        args=["--formatter", "json", "{file}"],
    ),
    "pyright": EngineConfig(
        name="pyright",
        description="Pyright type checker (Python)",
        command="pyright",
        args=["{file}"],
    ),
}


def bundled_config(filename: str) -> Path:
    """Path of an engine config file shipped in code_analyzer/data/."""
    return Path(str(files("code_analyzer") / "data" / filename))


def _parse_override(name: str, raw: Any, base: EngineConfig | None) -> EngineConfig | None:
    """Apply one ``[engines.<name>]`` table over *base*. Returns None on error."""
    if not _SAFE_NAME_RE.match(name):
        logger.warning("Invalid engine name in config (unsafe characters): %r", name)
        return None
    if not isinstance(raw, dict):
        logger.warning("Invalid engine config ([engines.%s] must be a table)", name)
        return None
    if base is None:
        logger.warning("Unknown engine in config, ignoring: %r", name)
        return None

    command = raw.get("command", base.command)
    description = raw.get("description", base.description)
    args = raw.get("args", base.args)
    env = raw.get("env", base.env)
    timeout = raw.get("timeout", base.timeout)

    if not isinstance(command, str) or not command.strip():
        logger.warning("Invalid engine config ([engines.%s] command must be a non-empty string)", name)
        return None
    if not isinstance(description, str):
        logger.warning("Invalid engine config ([engines.%s] description must be a string)", name)
        return None
    if not isinstance(args, list) or not all(isinstance(arg, str) for arg in args):
        logger.warning("Invalid engine config ([engines.%s] args must be list[str])", name)
        return None
    if not isinstance(env, dict) or not all(isinstance(k, str) and isinstance(v, str) for k, v in env.items()):
        logger.warning("Invalid engine config ([engines.%s] env must be a table of strings)", name)
        return None
    if timeout is not None and (isinstance(timeout, bool) or not isinstance(timeout, int | float) or timeout <= 0):
        logger.warning("Invalid engine config ([engines.%s] timeout must be a positive number)", name)
        return None

    return replace(
        base,
        command=command,
        description=description,
        args=list(args),
        env=dict(env),
        timeout=float(timeout) if timeout is not None else None,
    )


def load_engines(config: Mapping[str, Any] | None = None) -> dict[str, EngineConfig]:
    """Return the engine table: built-in defaults with config overrides applied.

    Malformed overrides are logged and skipped; the default stays in force.
    """
    engines = dict(DEFAULT_ENGINES)
    section = (config or {}).get("engines", {})
    if not isinstance(section, dict):
        logger.warning("Invalid config ([engines] must be a table), using defaults")
        return engines
    for name, raw in section.items():
        cfg = _parse_override(name, raw, engines.get(name))
        if cfg is not None:
            engines[name] = cfg
    return engines


def check_engine(engine: EngineConfig) -> str | None:
    """Check that the first token of the engine command is available on PATH.

    Returns None if valid, or an error message string if not found.
    """
    try:
        tokens = shlex.split(engine.command)
    except ValueError:
        return f"Malformed command string: {engine.command!r}"
    if not tokens:
        return "Empty command"
    binary = tokens[0]
    if ("/" in binary or "\\" in binary) and Path(binary).is_file() and os.access(binary, os.X_OK):
        return None
    if shutil.which(binary) is None:
        return f"Command {binary!r} not found on PATH"
    return None


async def run_engine(
    engine: EngineConfig,
    file_path: str | Path,
    *,
    config_path: str | Path = "",
    extra_args: Sequence[str] = (),
) -> EngineRun:
    """Run *engine* against *file_path* and capture its output.

    A non-zero exit is returned to the caller, not raised: each engine uses
    exit codes differently. Raises EngineError when the process cannot be
    launched or exceeds the configured timeout.
    """
    try:
        cmd = engine.build_command(
            file_path=str(file_path),
            config_path=str(config_path),
            extra_args=extra_args,
        )
    except ValueError as e:
        raise EngineError(str(e)) from e

    logger.debug("Running engine %s: %s", engine.name, shlex.join(cmd))
    try:
        proc = await asyncio.create_subprocess_exec(
            *cmd,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            env={**os.environ, **engine.env} if engine.env else None,
        )
    except OSError as e:
        msg = f"Failed to launch {engine.name} ({cmd[0]}): {e}"
        raise EngineError(msg) from e

    try:
        stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=engine.timeout)
    except TimeoutError:
        proc.kill()
        await proc.wait()
        raise EngineError(f"{engine.name} timed out after {engine.timeout}s") from None
    finally:
        if proc.returncode is None:
            proc.terminate()
            await proc.wait()

    return EngineRun(
        returncode=proc.returncode if proc.returncode is not None else -1,
        stdout=stdout.decode("utf-8", errors="replace"),
        stderr=stderr.decode("utf-8", errors="replace"),
    )


def stderr_excerpt(run: EngineRun) -> str:
    """Trimmed stderr (or stdout when stderr is empty) for error messages."""
    text = (run.stderr.strip() or run.stdout.strip())[:_STDERR_TRUNCATE]
    return text or f"exit code {run.returncode}"
