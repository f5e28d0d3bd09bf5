"""
Tests for logging configuration.
"""

import json
import logging
import sys
from datetime import datetime, timezone

from banking_ledger.logging_config import (
    APP_LOGGER_NAME,
    JSONFormatter,
    get_logger,
    setup_logging,
)


def make_record(msg="transaction committed", **extra):
    record = logging.LogRecord(
        name="banking_ledger.ledger",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg=msg,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJSONFormatter:

    def test_basic_fields(self):
        entry = json.loads(JSONFormatter().format(make_record()))

        assert entry["level"] == "INFO"
        assert entry["logger"] == "banking_ledger.ledger"
        assert entry["message"] == "transaction committed"
        assert "timestamp" in entry

    def test_timestamp_is_the_event_time(self):
        record = make_record()
        record.created = datetime(2026, 1, 2, 3, 4, 5, tzinfo=timezone.utc).timestamp()

        entry = json.loads(JSONFormatter().format(record))

        assert entry["timestamp"] == "2026-01-02T03:04:05+00:00"

    def test_extra_fields_are_merged(self):
        record = make_record(reference="ref-1", amount=500)

        entry = json.loads(JSONFormatter().format(record))

        assert entry["reference"] == "ref-1"
        assert entry["amount"] == 500
        assert "lineno" not in entry

    def test_exception_is_included(self):
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            record = make_record()
            record.exc_info = sys.exc_info()

        entry = json.loads(JSONFormatter().format(record))

        assert "RuntimeError: boom" in entry["exception"]


class TestSetupLogging:

    def test_local_is_text_at_debug(self):
        logger = setup_logging("local", "WARNING", logger_name="tests.local")

        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1
        assert not isinstance(logger.handlers[0].formatter, JSONFormatter)
        assert logger.propagate is False

    def test_production_is_json_at_configured_level(self):
        logger = setup_logging("production", "warning", logger_name="tests.prod")

        assert logger.level == logging.WARNING
        assert isinstance(logger.handlers[0].formatter, JSONFormatter)

    def test_reconfiguring_does_not_duplicate_handlers(self):
        setup_logging("production", "INFO", logger_name="tests.again")
        logger = setup_logging("production", "INFO", logger_name="tests.again")

        assert len(logger.handlers) == 1

    def test_root_logger_untouched(self):
        root = logging.getLogger()
        handlers = list(root.handlers)
        level = root.level

        setup_logging("production", "INFO", logger_name="tests.root")

        assert root.handlers == handlers
        assert root.level == level


def test_get_logger_is_child_of_app_logger():
    logger = get_logger("ledger")

    assert logger.name == f"{APP_LOGGER_NAME}.ledger"
    assert logger.parent is logging.getLogger(APP_LOGGER_NAME)
