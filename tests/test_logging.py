"""Tests for logging helpers."""

from __future__ import annotations

import json
import logging
import sys

from liveblog_extractor.config import LoggingConfig
from liveblog_extractor.utils.logging import (
    JsonlFormatter,
    close_logging,
    log_event,
    setup_logging,
    truncate_text,
)


def test_jsonl_formatter_includes_extra_fields():
    """JSONL lines should include fields passed through extra"""
    record = logging.LogRecord("liveblog_extractor", logging.INFO, __file__, 1, "Fetched page %s", (2,), None)
    record.event = "page_fetched"
    record.page = 2

    payload = json.loads(JsonlFormatter().format(record))

    assert payload["message"] == "Fetched page 2"
    assert payload["level"] == "INFO"
    assert payload["event"] == "page_fetched"
    assert payload["page"] == 2


def test_setup_logging_file_only(tmp_path):
    """A file-only setup should write plain lines to the named file"""
    cfg = LoggingConfig(console=False, file=True, format="plain", filename="run.log")

    logger = setup_logging(cfg, tmp_path)
    log_event(logger, "hello", event="test")
    for handler in logger.handlers:
        handler.flush()

    assert len(logger.handlers) == 1
    assert "INFO liveblog_extractor hello" in (tmp_path / "run.log").read_text(encoding="utf-8")


def test_log_event_ignores_missing_logger():
    log_event(None, "nothing happens", event="noop")


def test_truncate_text():
    assert truncate_text("short", max_chars=10) == "short"
    assert truncate_text("x" * 20, max_chars=10) == "x" * 10 + "...(truncated)"


def test_setup_logging_closes_previous_file_handler(tmp_path):
    """Re-running setup should close the log file opened by the last run"""
    cfg = LoggingConfig(console=False, file=True)
    first = setup_logging(cfg, tmp_path / "first")
    old_handler = first.handlers[0]
    old_stream = old_handler.stream

    second = setup_logging(cfg, tmp_path / "second")

    assert old_stream.closed
    assert old_handler not in second.handlers
    close_logging(second)
    assert second.handlers == []


def test_jsonl_formatter_records_exception():
    """JSONL lines should carry the formatted traceback"""
    try:
        raise RuntimeError("boom")
    except RuntimeError:
        record = logging.LogRecord(
            "liveblog_extractor", logging.ERROR, __file__, 1, "failed", (), sys.exc_info()
        )

    payload = json.loads(JsonlFormatter().format(record))

    assert "RuntimeError: boom" in payload["exception"]
