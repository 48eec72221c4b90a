"""Tests for structured logging."""

from __future__ import annotations

import json
import logging

from swingdesk.core.logging import (
    SensitiveDataFilter,
    StructuredFormatter,
    TextFormatter,
    get_logger,
    request_id_var,
    setup_logging,
)


def _record(msg: str, **extra) -> logging.LogRecord:
    record = logging.LogRecord("swingdesk.test", logging.INFO, __file__, 1, msg, (), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestStructuredFormatter:
    def test_json_with_extras_and_request_id(self):
        token = request_id_var.set("req-1")
        try:
            line = StructuredFormatter().format(_record("hello", symbol="TCS"))
        finally:
            request_id_var.reset(token)

        data = json.loads(line)
        assert data["message"] == "hello"
        assert data["level"] == "INFO"
        assert data["request_id"] == "req-1"
        assert data["symbol"] == "TCS"
        assert "lineno" not in data


class TestSensitiveDataFilter:
    def test_redacts_token(self):
        record = _record("login token=abc123 ok")
        SensitiveDataFilter().filter(record)
        assert "abc123" not in record.getMessage()
        assert "[REDACTED]" in record.getMessage()


def test_get_logger_prefix():
    assert get_logger("services.analysis").name == "swingdesk.services.analysis"


class TestTextFormatter:
    def test_appends_extras(self):
        line = TextFormatter().format(_record("scan done", picks=3))
        assert "swingdesk.test: scan done" in line
        assert line.endswith("picks=3")


class TestSetupLogging:
    def test_installs_single_handler(self):
        root = logging.getLogger()
        saved = root.handlers[:], root.level
        try:
            setup_logging(level="debug", fmt="text")
            setup_logging(level="debug", fmt="text")
            assert len(root.handlers) == 1
            assert isinstance(root.handlers[0].formatter, TextFormatter)
            assert root.level == logging.DEBUG
            assert logging.getLogger("yfinance").level == logging.WARNING
        finally:
            root.handlers[:] = saved[0]
            root.setLevel(saved[1])
