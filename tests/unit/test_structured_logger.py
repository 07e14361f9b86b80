"""Unit tests for structured logging configuration."""

import json

import structlog

from shared.logging.structured_logger import (
    add_app_context,
    bind_context,
    clear_context,
    configure_logging,
)


class TestStructuredLogging:
    """Test structlog setup used by the Lambda handler."""

    def test_app_context_added(self):
        configure_logging(log_level="INFO", json_logs=True,
                          service_name="kuso-search", environment="test")

        event_dict = add_app_context(None, "info", {"event": "records_fetched"})

        assert event_dict["app"] == "kuso-search"
        assert event_dict["environment"] == "test"

    def test_json_output_keeps_request_context(self, capsys):
        configure_logging(log_level="INFO", json_logs=True,
                          service_name="kuso-search", environment="test")
        clear_context()
        bind_context(request_id="req-1", params="低身長")

        structlog.get_logger("tests").info("records_fetched", count=3)
        clear_context()

        line = capsys.readouterr().out.strip().splitlines()[-1]
        entry = json.loads(line)
        assert entry["event"] == "records_fetched"
        assert entry["count"] == 3
        assert entry["request_id"] == "req-1"
        assert entry["params"] == "低身長"
        assert entry["level"] == "info"
        assert "timestamp" in entry
        # Non-ASCII is written as-is
        assert "低身長" in line

    def test_clear_context(self):
        bind_context(request_id="req-2")
        clear_context()

        assert structlog.contextvars.get_contextvars() == {}
