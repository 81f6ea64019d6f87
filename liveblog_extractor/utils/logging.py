"""Logging setup for pipeline runs.

A run logs to the console through rich and, optionally, to a file inside the
output directory. The file is JSON Lines by default so that `event` fields
and other structured extras can be read back by tools.
"""

from __future__ import annotations

from datetime import datetime, timezone
import json
import logging
from pathlib import Path
from typing import Any

from rich.logging import RichHandler

from ..config import LoggingConfig

LOGGER_NAME = "liveblog_extractor"
PLAIN_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"

# Attributes every LogRecord carries; anything else came in through `extra`.
_STANDARD_ATTRS = frozenset(vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None))) | {
    "message",
    "asctime",
}


def setup_logging(cfg: LoggingConfig, run_output_dir: Path | None) -> logging.Logger:
    """Configure the package logger for one run.

    Handlers left over from a previous run are detached and closed first.

    Args:
        cfg: Logging section of the application config
        run_output_dir: Directory for the log file; no file is written if None

    Returns:
        The configured package logger
    """
    level = _level_from_string(cfg.level)
    logger = logging.getLogger(LOGGER_NAME)
    close_logging(logger)
    logger.setLevel(level)
    logger.propagate = False

    if cfg.console:
        logger.addHandler(_console_handler(level))
    if cfg.file and run_output_dir is not None:
        logger.addHandler(_file_handler(run_output_dir / cfg.filename, cfg.format, level))
    return logger


def close_logging(logger: logging.Logger) -> None:
    """Detach and close every handler on `logger`."""
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


def log_event(logger: logging.Logger | None, message: str, **fields: Any) -> None:
    """Log `message` at INFO with `fields` attached as record attributes."""
    if logger is not None:
        logger.info(message, extra=fields)


def truncate_text(text: str, max_chars: int = 2000) -> str:
    if len(text) <= max_chars:
        return text
    return text[:max_chars] + "...(truncated)"


class JsonlFormatter(logging.Formatter):
    """One JSON object per record, with `extra` fields merged in."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update(
            (key, value) for key, value in vars(record).items() if key not in _STANDARD_ATTRS
        )
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=True, default=str)


def _console_handler(level: int) -> logging.Handler:
    handler = RichHandler(rich_tracebacks=True, show_time=False, show_level=True)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("%(message)s"))
    return handler


def _file_handler(path: Path, fmt: str, level: int) -> logging.Handler:
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(JsonlFormatter() if fmt == "jsonl" else logging.Formatter(PLAIN_FILE_FORMAT))
    return handler


def _level_from_string(level: str) -> int:
    value = logging.getLevelName(level.upper())
    return value if isinstance(value, int) else logging.INFO
