"""
Tests for setup_logging() and the logger factories.

setup_logging() configures structlog globally, so every test resets both
structlog and the root logger around itself.
"""

import json
import logging
from io import StringIO

import pytest
import structlog

from bigcommerce_client.config import BigCommerceConfig
from bigcommerce_client.observability import (
    get_transport_logger,
    redact_sensitive,
    setup_logging,
    setup_logging_from_config,
)


@pytest.fixture
def clean_logging():
    """Reset logging and structlog global state between tests."""
    original_handlers = logging.root.handlers[:]

    logging.root.handlers = []
    logging.root.setLevel(logging.WARNING)
    structlog.reset_defaults()

    yield

    logging.root.handlers = []
    logging.root.setLevel(logging.WARNING)
    structlog.reset_defaults()

    logging.root.handlers = original_handlers


@pytest.fixture
def captured(clean_logging):
    """Attach a StringIO handler to the root logger."""
    output = StringIO()
    handler = logging.StreamHandler(output)
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter("%(message)s"))

    def _attach():
        logging.root.addHandler(handler)
        return output

    yield _attach

    logging.root.removeHandler(handler)


def _json_lines(output: StringIO) -> list[dict]:
    lines = []
    for line in output.getvalue().splitlines():
        line = line.strip()
        if not line:
            continue
        try:
            lines.append(json.loads(line))
        except json.JSONDecodeError:
            continue
    return lines


class TestSetupLogging:
    def test_json_mode(self, captured):
        setup_logging(level="INFO", json_logs=True, include_timestamp=True)
        assert structlog.is_configured()
        logging.root.setLevel(logging.INFO)
        output = captured()

        structlog.get_logger("test_json").info("json_test_event", value=123)

        events = _json_lines(output)
        assert events, "No valid JSON found"
        assert events[0]["event"] == "json_test_event"
        assert events[0]["value"] == 123
        assert events[0]["app"] == "bigcommerce-client"
        assert events[0]["severity"] == "INFO"
        assert "timestamp" in events[0]

    def test_text_mode(self, captured):
        setup_logging(level="INFO", json_logs=False)
        logging.root.setLevel(logging.INFO)
        output = captured()

        structlog.get_logger("test_text").info("text_test_event", value=456)

        assert "text_test_event" in output.getvalue()

    @pytest.mark.parametrize("level", ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"])
    def test_levels(self, clean_logging, level):
        setup_logging(level=level, json_logs=True)
        assert logging.root.level == getattr(logging, level)

    def test_level_from_config(self, clean_logging):
        setup_logging_from_config(BigCommerceConfig(log_level="debug"))
        assert logging.root.level == logging.DEBUG

    def test_without_timestamp(self, captured):
        setup_logging(level="INFO", json_logs=True, include_timestamp=False)
        logging.root.setLevel(logging.INFO)
        output = captured()

        logger = structlog.get_logger("test_no_ts")
        logger.debug("debug_should_not_appear")
        logger.info("no_timestamp_test")

        events = _json_lines(output)
        assert [e["event"] for e in events] == ["no_timestamp_test"]
        assert "timestamp" not in events[0]

    def test_secrets_are_redacted(self, captured):
        setup_logging(level="INFO", json_logs=True)
        logging.root.setLevel(logging.INFO)
        output = captured()

        structlog.get_logger("test_redact").info(
            "call", headers={"X-Auth-Token": "secret-token", "Accept": "application/json"}
        )

        event = _json_lines(output)[0]
        assert event["headers"]["X-Auth-Token"] == "***"
        assert event["headers"]["Accept"] == "application/json"
        assert "secret-token" not in output.getvalue()


class TestLoggerFactories:
    def test_transport_logger_binds_context(self, captured):
        setup_logging(level="INFO", json_logs=True)
        logging.root.setLevel(logging.INFO)
        output = captured()

        log = get_transport_logger("request-executor", host="api.bigcommerce.com")
        log.info("request_completed", status_code=200)

        event = _json_lines(output)[0]
        assert event["layer"] == "transport"
        assert event["component"] == "request-executor"
        assert event["host"] == "api.bigcommerce.com"
        assert event["status_code"] == 200


def test_redact_sensitive_nested():
    data = {"body": {"client_secret": "s", "code": "c"}, "items": [{"access_token": "t"}]}
    assert redact_sensitive(data) == {
        "body": {"client_secret": "***", "code": "c"},
        "items": [{"access_token": "***"}],
    }
