"""Tests for logging context and context managers."""

import logging

import pytest

from streamhub.errors.amqp import SERVER_BUSY_ERROR, AmqpError, AmqpException
from streamhub.logging.context import clear_log_context, get_log_context, set_log_context
from streamhub.logging.context_managers import LogContext, OperationContext

LOGGER_NAME = "test.context"


@pytest.fixture(autouse=True)
def clear_context():
    clear_log_context()
    yield
    clear_log_context()


class TestLogContextVariables:
    def test_set_and_get(self):
        set_log_context(resource_name="hub1", operation="send", client_id="c1", trace_id="t1")
        assert get_log_context() == {
            "resource_name": "hub1",
            "operation": "send",
            "client_id": "c1",
            "trace_id": "t1",
        }

    def test_none_leaves_value(self):
        set_log_context(resource_name="hub1")
        set_log_context(operation="send")
        assert get_log_context()["resource_name"] == "hub1"

    def test_clear(self):
        set_log_context(resource_name="hub1")
        clear_log_context()
        assert get_log_context()["resource_name"] == ""


class TestLogContext:
    def test_sets_and_restores(self):
        set_log_context(resource_name="outer")
        with LogContext(resource_name="inner", operation="receive"):
            ctx = get_log_context()
            assert ctx["resource_name"] == "inner"
            assert ctx["operation"] == "receive"

        ctx = get_log_context()
        assert ctx["resource_name"] == "outer"
        assert ctx["operation"] == ""

    def test_restores_on_exception(self):
        with pytest.raises(RuntimeError):
            with LogContext(resource_name="inner"):
                raise RuntimeError("boom")
        assert get_log_context()["resource_name"] == ""


class TestOperationContext:
    def test_logs_completion(self, caplog):
        logger = logging.getLogger(LOGGER_NAME)
        with caplog.at_level(logging.DEBUG, logger=LOGGER_NAME):
            with OperationContext(logger, "send", resource_name="hub1", batch_size=3):
                assert get_log_context()["operation"] == "send"

        record = caplog.records[-1]
        assert record.message == "Completed send"
        assert record.batch_size == 3
        assert record.duration_ms >= 0
        assert get_log_context()["operation"] == ""

    def test_logs_translated_failure_and_reraises_original(self, caplog):
        logger = logging.getLogger(LOGGER_NAME)
        busy = AmqpException(AmqpError(SERVER_BUSY_ERROR, "throttled"))

        with caplog.at_level(logging.DEBUG, logger=LOGGER_NAME):
            with pytest.raises(AmqpException) as exc_info:
                with OperationContext(logger, "send", resource_name="hub1"):
                    raise busy

        assert exc_info.value is busy
        record = caplog.records[-1]
        assert record.levelno == logging.ERROR
        assert record.message == "Failed send"
        assert record.error_reason == "service_busy"
        assert record.resource_name == "hub1"
