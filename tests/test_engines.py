"""Tests for the engine registry and subprocess runner."""

from __future__ import annotations

import shlex
import sys
from pathlib import Path

import pytest

from code_analyzer.engines import (
    DEFAULT_ENGINES,
    EngineConfig,
    EngineError,
    EngineRun,
    bundled_config,
    check_engine,
    load_engines,
    run_engine,
    stderr_excerpt,
)

_PYTHON = shlex.quote(sys.executable)


def _script_engine(script: str, **kwargs: object) -> EngineConfig:
    return EngineConfig(
        name="fake",
        description="test engine",
        command=f"{_PYTHON} -c {shlex.quote(script)}",
        args=["{file}"],
        **kwargs,  # type: ignore[arg-type]
    )


# ── build_command ────────────────────────────────────────────────────


class TestBuildCommand:
    def test_substitutes_file_and_config(self) -> None:
        cfg = EngineConfig(
            name="eslint",
            description="",
            command="npx --no-install eslint",
            args=["--config", "{config}", "{file}"],
        )
        cmd = cfg.build_command(file_path="/src/a.js", config_path="/cfg/eslintrc.json")
        assert cmd == ["npx", "--no-install", "eslint", "--config", "/cfg/eslintrc.json", "/src/a.js"]

    def test_extra_args_go_before_templated_args(self) -> None:
        cfg = EngineConfig(name="stylelint", description="", command="stylelint", args=["--formatter", "json", "{file}"])
        cmd = cfg.build_command(file_path="s.css", extra_args=["--fix"])
        assert cmd == ["stylelint", "--fix", "--formatter", "json", "s.css"]
        assert cmd[-1] == "s.css"

    def test_malformed_command_raises(self) -> None:
        cfg = EngineConfig(name="bad", description="", command="eslint 'unterminated")
        with pytest.raises(ValueError, match="Malformed command"):
            cfg.build_command(file_path="a.js")

    def test_to_dict(self) -> None:
        data = DEFAULT_ENGINES["pyright"].to_dict()
        assert data["name"] == "pyright"
        assert data["command"] == "pyright"
        assert data["timeout"] is None


class TestDefaults:
    def test_one_engine_per_adapter(self) -> None:
        assert set(DEFAULT_ENGINES) == {"eslint", "htmlhint", "stylelint", "pyright"}

    def test_no_default_timeout(self) -> None:
        assert all(cfg.timeout is None for cfg in DEFAULT_ENGINES.values())

    def test_eslint_runs_in_eslintrc_mode(self) -> None:
        cfg = DEFAULT_ENGINES["eslint"]
        assert cfg.env == {"ESLINT_USE_FLAT_CONFIG": "false"}
        assert "--no-eslintrc" in cfg.args

    @pytest.mark.parametrize("filename", ["eslintrc.json", "htmlhintrc.json"])
    def test_bundled_configs_exist(self, filename: str) -> None:
        assert bundled_config(filename).is_file()

    def test_htmlhint_rules(self) -> None:
        import json

        rules = json.loads(bundled_config("htmlhintrc.json").read_text())
        assert rules["title-require"] is True
        assert rules["doctype-first"] is True
        assert len(rules) == 10


# ── load_engines ─────────────────────────────────────────────────────


class TestLoadEngines:
    def test_no_config_gives_defaults(self) -> None:
        assert load_engines(None) == DEFAULT_ENGINES
        assert load_engines({}) == DEFAULT_ENGINES

    def test_override_merges_with_default(self) -> None:
        engines = load_engines({"engines": {"eslint": {"command": "eslint", "timeout": 30}}})
        eslint = engines["eslint"]
        assert eslint.command == "eslint"
        assert eslint.timeout == 30.0
        assert eslint.args == DEFAULT_ENGINES["eslint"].args
        assert engines["pyright"] == DEFAULT_ENGINES["pyright"]

    def test_override_args_and_env(self) -> None:
        engines = load_engines(
            {"engines": {"stylelint": {"args": ["--config", "x.json", "{file}"], "env": {"NODE_ENV": "ci"}}}}
        )
        assert engines["stylelint"].args == ["--config", "x.json", "{file}"]
        assert engines["stylelint"].env == {"NODE_ENV": "ci"}

    def test_unknown_engine_ignored(self, caplog: pytest.LogCaptureFixture) -> None:
        engines = load_engines({"engines": {"rubocop": {"command": "rubocop"}}})
        assert "rubocop" not in engines
        assert "Unknown engine" in caplog.text

    @pytest.mark.parametrize(
        "override",
        [
            {"command": ""},
            {"command": 42},
            {"args": "not-a-list"},
            {"args": [1, 2]},
            {"env": {"A": 1}},
            {"timeout": -5},
            {"timeout": True},
            {"description": ["x"]},
        ],
    )
    def test_invalid_override_keeps_default(self, override: dict[str, object]) -> None:
        engines = load_engines({"engines": {"eslint": override}})
        assert engines["eslint"] == DEFAULT_ENGINES["eslint"]

    def test_non_table_section_keeps_defaults(self) -> None:
        assert load_engines({"engines": "eslint"}) == DEFAULT_ENGINES

    def test_unsafe_name_ignored(self) -> None:
        engines = load_engines({"engines": {"../eslint": {"command": "x"}}})
        assert engines == DEFAULT_ENGINES


# ── check_engine ─────────────────────────────────────────────────────


class TestCheckEngine:
    def test_available_command(self) -> None:
        cfg = EngineConfig(name="py", description="", command=f"{_PYTHON} -V")
        assert check_engine(cfg) is None

    def test_missing_command(self) -> None:
        cfg = EngineConfig(name="nope", description="", command="definitely-not-a-real-binary-xyz --flag")
        result = check_engine(cfg)
        assert result is not None
        assert "not found on PATH" in result

    def test_malformed_command(self) -> None:
        cfg = EngineConfig(name="bad", description="", command="'unterminated")
        assert check_engine(cfg) == "Malformed command string: \"'unterminated\""


# ── run_engine ───────────────────────────────────────────────────────


class TestRunEngine:
    async def test_captures_output_and_exit_code(self, tmp_path: Path) -> None:
        target = tmp_path / "a.js"
        target.write_text("x")
        cfg = _script_engine("import sys; print(sys.argv[1]); sys.stderr.write('warn'); sys.exit(1)")
        run = await run_engine(cfg, target)
        assert run.returncode == 1
        assert run.stdout.strip() == str(target)
        assert run.stderr == "warn"

    async def test_extra_args_passed(self, tmp_path: Path) -> None:
        cfg = _script_engine("import sys, json; print(json.dumps(sys.argv[1:]))")
        run = await run_engine(cfg, tmp_path / "a.css", extra_args=["--fix"])
        assert run.stdout.strip() == f'["--fix", "{tmp_path / "a.css"}"]'

    async def test_env_overlay(self, tmp_path: Path) -> None:
        cfg = _script_engine("import os; print(os.environ['CODE_ANALYZER_TEST'])", env={"CODE_ANALYZER_TEST": "on"})
        run = await run_engine(cfg, tmp_path / "a.py")
        assert run.stdout.strip() == "on"

    async def test_launch_failure_raises_engine_error(self, tmp_path: Path) -> None:
        cfg = EngineConfig(name="ghost", description="", command="definitely-not-a-real-binary-xyz", args=["{file}"])
        with pytest.raises(EngineError, match="Failed to launch ghost"):
            await run_engine(cfg, tmp_path / "a.py")

    async def test_malformed_command_raises_engine_error(self, tmp_path: Path) -> None:
        cfg = EngineConfig(name="bad", description="", command="'unterminated")
        with pytest.raises(EngineError, match="Malformed command"):
            await run_engine(cfg, tmp_path / "a.py")

    async def test_timeout_kills_process(self, tmp_path: Path) -> None:
        cfg = _script_engine("import time; time.sleep(30)", timeout=0.2)
        with pytest.raises(EngineError, match="timed out"):
            await run_engine(cfg, tmp_path / "a.py")


class TestStderrExcerpt:
    def test_prefers_stderr(self) -> None:
        assert stderr_excerpt(EngineRun(2, "out", " err \n")) == "err"

    def test_falls_back_to_stdout(self) -> None:
        assert stderr_excerpt(EngineRun(2, "out", "")) == "out"

    def test_falls_back_to_exit_code(self) -> None:
        assert stderr_excerpt(EngineRun(78, "", "")) == "exit code 78"
