"""Tests for structured logging setup."""

from __future__ import annotations

import io
import json
import logging
import sys

import structlog

from indicator_engine.utils.logging import (
    get_request_id,
    set_request_id,
    setup_logging,
)

log = structlog.get_logger("test_logging")


def _capture(log_format: str, emit: object) -> str:
    """Run setup_logging against a StringIO stderr and return the output."""
    captured = io.StringIO()
    old_stderr = sys.stderr
    sys.stderr = captured
    try:
        setup_logging(level="INFO", log_format=log_format)
        emit()  # type: ignore[operator]
    finally:
        sys.stderr = old_stderr
    return captured.getvalue().strip()


class TestSetupLogging:
    def test_setup_logging_returns_none(self) -> None:
        assert setup_logging(level="INFO", log_format="json") is None

    def test_root_level_applied(self) -> None:
        setup_logging(level="WARNING", log_format="json")
        assert logging.getLogger().level == logging.WARNING

    def test_httpx_quieted(self) -> None:
        setup_logging(level="DEBUG", log_format="json")
        assert logging.getLogger("httpx").level == logging.WARNING


class TestJsonFormat:
    def test_json_output_is_valid(self) -> None:
        output = _capture("json", lambda: log.info("candles_loaded", candle_count=3))
        parsed = json.loads(output)
        assert parsed["event"] == "candles_loaded"
        assert parsed["candle_count"] == 3
        assert parsed["level"] == "info"
        assert "timestamp" in parsed

    def test_debug_filtered_at_info(self) -> None:
        output = _capture("json", lambda: log.debug("hidden"))
        assert output == ""


class TestConsoleFormat:
    def test_console_output_is_not_json(self) -> None:
        output = _capture("console", lambda: log.info("hello"))
        assert "hello" in output
        try:
            json.loads(output)
            is_json = True
        except (json.JSONDecodeError, ValueError):
            is_json = False
        assert not is_json


class TestRequestId:
    def test_set_and_get(self) -> None:
        set_request_id("req-123")
        assert get_request_id() == "req-123"
        set_request_id("")

    def test_request_id_in_json_output(self) -> None:
        set_request_id("req-abc")
        try:
            output = _capture("json", lambda: log.info("indicators_computed"))
        finally:
            set_request_id("")
        assert json.loads(output)["request_id"] == "req-abc"

    def test_no_request_id_when_unset(self) -> None:
        set_request_id("")
        output = _capture("json", lambda: log.info("event"))
        assert "request_id" not in json.loads(output)
