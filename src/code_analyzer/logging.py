"""Structured JSON logging for code_analyzer.

Writes JSONL to .code-analyzer/code-analyzer.log with rotation (5MB, 3 backups)
when a project directory exists, otherwise to stderr. Never stdout: the MCP
stdio transport owns it.
"""

from __future__ import annotations

import json
import logging
import os
import sys
import threading
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

from code_analyzer.core import LOG_FILENAME

_setup_lock = threading.Lock()
_MAX_BYTES = 5 * 1024 * 1024  # 5MB
_BACKUP_COUNT = 3


class _JsonFormatter(logging.Formatter):
    """Format log records as single-line JSON."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "ts": self.formatTime(record, datefmt="%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if hasattr(record, "tool"):
            entry["tool"] = record.tool
        if hasattr(record, "args_data"):
            entry["args"] = record.args_data
        if hasattr(record, "duration_ms"):
            entry["duration_ms"] = record.duration_ms
        if hasattr(record, "error"):
            entry["error"] = record.error
        if record.exc_info and record.exc_info[1]:
            entry["exception"] = str(record.exc_info[1])
        return json.dumps(entry, default=str)


def _is_stderr_handler(handler: logging.Handler) -> bool:
    return type(handler) is logging.StreamHandler and getattr(handler, "stream", None) is sys.stderr


def setup_logging(project_dir: Path | None = None, *, level: int = logging.INFO) -> logging.Logger:
    """Set up structured JSON logging for the ``code_analyzer`` logger.

    With *project_dir*, logs go to ``<project_dir>/code-analyzer.log``;
    otherwise to stderr. Repeated calls with the same target are no-ops.
    """
    logger = logging.getLogger("code_analyzer")

    with _setup_lock:
        if project_dir is None:
            if not any(_is_stderr_handler(h) for h in logger.handlers):
                handler: logging.Handler = logging.StreamHandler(sys.stderr)
                handler.setFormatter(_JsonFormatter())
                logger.addHandler(handler)
            logger.setLevel(level)
            return logger

        log_path = project_dir / LOG_FILENAME
        target_filename = os.path.abspath(str(log_path))
        for h in logger.handlers[:]:
            if not isinstance(h, RotatingFileHandler):
                continue
            if h.baseFilename == target_filename:
                logger.setLevel(level)
                return logger
            # Different path — remove stale handler to avoid leaks / duplicates.
            logger.removeHandler(h)
            h.close()

        handler = RotatingFileHandler(
            str(log_path),
            maxBytes=_MAX_BYTES,
            backupCount=_BACKUP_COUNT,
        )
        handler.setFormatter(_JsonFormatter())
        logger.addHandler(handler)
        logger.setLevel(level)
    return logger
