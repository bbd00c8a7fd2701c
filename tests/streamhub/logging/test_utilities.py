"""Tests for logging utility functions."""

import logging

from streamhub.errors.exceptions import EventHubsError
from streamhub.logging.utilities import log_exception, log_with_context
from streamhub.types import FailureReason

LOGGER_NAME = "test.utilities"


class TestLogWithContext:
    def test_adds_extra_fields(self, caplog):
        logger = logging.getLogger(LOGGER_NAME)
        with caplog.at_level(logging.INFO, logger=LOGGER_NAME):
            log_with_context(logger, logging.INFO, "Batch sent", resource_name="hub1", batch_size=5)

        record = caplog.records[-1]
        assert record.message == "Batch sent"
        assert record.resource_name == "hub1"
        assert record.batch_size == 5

    def test_filters_reserved_keys(self, caplog):
        logger = logging.getLogger(LOGGER_NAME)
        with caplog.at_level(logging.INFO, logger=LOGGER_NAME):
            log_with_context(logger, logging.INFO, "hello", name="clash", module="clash")

        record = caplog.records[-1]
        assert record.name == LOGGER_NAME

    def test_exc_info_passed_through(self, caplog):
        logger = logging.getLogger(LOGGER_NAME)
        with caplog.at_level(logging.INFO, logger=LOGGER_NAME):
            try:
                raise RuntimeError("boom")
            except RuntimeError:
                log_with_context(logger, logging.ERROR, "failed", exc_info=True)

        assert caplog.records[-1].exc_info[0] is RuntimeError


class TestLogException:
    def test_extracts_classified_fields(self, caplog):
        logger = logging.getLogger(LOGGER_NAME)
        exc = EventHubsError("busy", FailureReason.SERVICE_BUSY, "hub1")
        with caplog.at_level(logging.ERROR, logger=LOGGER_NAME):
            log_exception(logger, exc, "Send failed")

        record = caplog.records[-1]
        assert record.error_reason == "service_busy"
        assert record.resource_name == "hub1"
        assert record.is_transient is True
        assert record.error_type == "EventHubsError"
        assert record.exc_info[1] is exc

    def test_explicit_fields_win(self, caplog):
        logger = logging.getLogger(LOGGER_NAME)
        exc = EventHubsError("busy", FailureReason.SERVICE_BUSY, "hub1")
        with caplog.at_level(logging.ERROR, logger=LOGGER_NAME):
            log_exception(logger, exc, "Send failed", resource_name="other")

        assert caplog.records[-1].resource_name == "other"

    def test_plain_exception(self, caplog):
        logger = logging.getLogger(LOGGER_NAME)
        with caplog.at_level(logging.ERROR, logger=LOGGER_NAME):
            log_exception(logger, ValueError("bad"), "Parse failed", include_traceback=False)

        record = caplog.records[-1]
        assert record.error_type == "ValueError"
        assert record.error_message == "bad"
        assert not hasattr(record, "error_reason")
        assert record.exc_info is None

    def test_truncates_long_messages(self, caplog):
        logger = logging.getLogger(LOGGER_NAME)
        with caplog.at_level(logging.ERROR, logger=LOGGER_NAME):
            log_exception(logger, ValueError("x" * 1000), "Parse failed")

        message = caplog.records[-1].error_message
        assert len(message) == 503
        assert message.endswith("...")
