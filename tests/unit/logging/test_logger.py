# tests/unit/logging/test_logger.py — v2
"""Tests for logging/logger.py — logger factory and formatters."""

from __future__ import annotations

import json
import logging

from nutriguard.logging.context import clear_context, set_request_context, set_stage_context
from nutriguard.logging.logger import JsonFormatter, TextFormatter, get_logger, setup_logging


def _record(msg: str = "Hello", **extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="test", level=logging.INFO, pathname="", lineno=0,
        msg=msg, args=(), exc_info=None,
    )
    for k, v in extra.items():
        setattr(record, k, v)
    return record


class TestJsonFormatter:
    def setup_method(self):
        clear_context()

    def teardown_method(self):
        clear_context()

    def test_format_basic(self):
        parsed = json.loads(JsonFormatter().format(_record()))
        assert parsed["level"] == "INFO"
        assert parsed["message"] == "Hello"
        assert "timestamp" in parsed
        assert "context" not in parsed

    def test_format_with_context(self):
        set_request_context("req-9", "u1")
        set_stage_context("food_extraction")
        parsed = json.loads(JsonFormatter().format(_record()))
        assert parsed["context"] == {
            "request_id": "req-9", "user_id": "u1", "stage": "food_extraction",
        }

    def test_extra_data(self):
        parsed = json.loads(JsonFormatter().format(_record(data={"attempt": 2})))
        assert parsed["data"] == {"attempt": 2}


class TestTextFormatter:
    def teardown_method(self):
        clear_context()

    def test_format_basic(self):
        output = TextFormatter().format(_record("Hello text"))
        assert "Hello text" in output
        assert "INFO" in output

    def test_includes_request_and_stage(self):
        set_request_context("req-9")
        set_stage_context("health_suitability")
        output = TextFormatter().format(_record())
        assert "[req-9]" in output
        assert "(health_suitability)" in output


class TestGetLogger:
    def test_returns_logger(self):
        assert get_logger("cache").name == "nutriguard.cache"


class TestSetupLogging:
    def teardown_method(self):
        root = logging.getLogger("nutriguard")
        for h in root.handlers:
            h.close()
        root.handlers.clear()

    def test_console_only(self):
        setup_logging(level="DEBUG", log_format="text")
        root = logging.getLogger("nutriguard")
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, TextFormatter)

    def test_with_file(self, tmp_path):
        setup_logging(log_file=tmp_path / "logs" / "app.log")
        root = logging.getLogger("nutriguard")
        assert len(root.handlers) == 2
        assert isinstance(root.handlers[1].formatter, JsonFormatter)

    def test_reinit_no_duplicates(self):
        setup_logging()
        setup_logging()
        assert len(logging.getLogger("nutriguard").handlers) == 1
