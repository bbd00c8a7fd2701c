"""
Tests for service exception translation.
"""

import asyncio
import logging

import pytest

from streamhub.errors.amqp import (
    ARGUMENT_ERROR,
    NOT_FOUND_ERROR,
    SERVER_BUSY_ERROR,
    TIMEOUT_ERROR,
    UNAUTHORIZED_ERROR,
    AmqpError,
    AmqpException,
    OperationCanceledError,
)
from streamhub.errors.exceptions import EventHubsError
from streamhub.errors.translation import (
    ServiceExceptionTranslator,
    translate_service_exception,
)
from streamhub.types import FailureReason

EVENT_HUB = "someHub"


def _amqp_exception(condition, description=None):
    return AmqpException(AmqpError(condition=condition, description=description))


def _general_exceptions():
    return [
        ValueError("blah"),
        EventHubsError("thing", FailureReason.GENERAL_ERROR, is_transient=False),
        TimeoutError(),
        asyncio.CancelledError(),
        Exception(),
    ]


# ---------------------------------------------------------------------------
# translate_service_exception
# ---------------------------------------------------------------------------


class TestTranslateServiceException:
    def test_validates_the_instance(self):
        with pytest.raises(ValueError):
            translate_service_exception(None, "dummy")

    def test_translates_amqp_exceptions(self):
        exception = _amqp_exception(SERVER_BUSY_ERROR)
        translated = translate_service_exception(exception, EVENT_HUB)

        assert isinstance(translated, EventHubsError)
        assert translated.reason == FailureReason.SERVICE_BUSY
        assert translated.resource_name == EVENT_HUB

    def test_busy_translation_wraps_original(self):
        exception = _amqp_exception(SERVER_BUSY_ERROR, "The request was throttled.")
        translated = translate_service_exception(exception, EVENT_HUB)

        assert translated.cause is exception
        assert translated.__cause__ is exception
        assert translated.message == "The request was throttled."
        assert translated.is_transient is True

    def test_translates_operation_canceled_without_embedded_exceptions(self):
        exception = OperationCanceledError()
        translated = translate_service_exception(exception, EVENT_HUB)

        assert isinstance(translated, EventHubsError)
        assert translated.reason == FailureReason.SERVICE_TIMEOUT
        assert translated.resource_name == EVENT_HUB
        assert translated.cause is None

    def test_translates_operation_canceled_with_embedded_amqp_exception(self):
        exception = OperationCanceledError("oops", cause=_amqp_exception(SERVER_BUSY_ERROR))
        translated = translate_service_exception(exception, EVENT_HUB)

        assert isinstance(translated, EventHubsError)
        assert translated.reason == FailureReason.SERVICE_BUSY
        assert translated.resource_name == EVENT_HUB

    def test_translates_operation_canceled_raised_from_amqp_exception(self):
        busy = _amqp_exception(SERVER_BUSY_ERROR)
        try:
            try:
                raise busy
            except AmqpException as exc:
                raise OperationCanceledError("oops") from exc
        except OperationCanceledError as canceled:
            translated = translate_service_exception(canceled, EVENT_HUB)

        assert isinstance(translated, EventHubsError)
        assert translated.reason == FailureReason.SERVICE_BUSY
        assert translated.cause is busy

    def test_translates_operation_canceled_with_embedded_general_exception(self):
        embedded = ValueError()
        exception = OperationCanceledError("oops", cause=embedded)
        translated = translate_service_exception(exception, EVENT_HUB)

        assert translated is embedded

    def test_implicit_context_is_not_an_embedded_cause(self):
        try:
            try:
                raise ValueError("unrelated")
            except ValueError:
                raise OperationCanceledError()
        except OperationCanceledError as canceled:
            translated = translate_service_exception(canceled, EVENT_HUB)

        assert isinstance(translated, EventHubsError)
        assert translated.reason == FailureReason.SERVICE_TIMEOUT

    def test_nested_cancellation_is_unwrapped_one_level(self):
        inner = OperationCanceledError("inner", cause=_amqp_exception(SERVER_BUSY_ERROR))
        outer = OperationCanceledError("outer", cause=inner)

        assert translate_service_exception(outer, EVENT_HUB) is inner

    @pytest.mark.parametrize("general_exception", _general_exceptions())
    def test_does_not_translate_general_exceptions(self, general_exception):
        translated = translate_service_exception(general_exception, EVENT_HUB)

        assert translated is general_exception

    def test_unknown_amqp_condition_passes_through(self):
        exception = _amqp_exception("com.contoso:something-odd")

        assert translate_service_exception(exception, EVENT_HUB) is exception

    def test_cancellation_embedding_unknown_amqp_condition_returns_embedded(self):
        embedded = _amqp_exception("com.contoso:something-odd")
        exception = OperationCanceledError(cause=embedded)

        assert translate_service_exception(exception, EVENT_HUB) is embedded

    def test_resource_name_is_not_validated(self):
        translated = translate_service_exception(_amqp_exception(SERVER_BUSY_ERROR), None)

        assert translated.resource_name is None

    def test_does_not_mutate_input(self):
        exception = _amqp_exception(SERVER_BUSY_ERROR)
        translate_service_exception(exception, EVENT_HUB)

        assert exception.__cause__ is None
        assert exception.error.condition == SERVER_BUSY_ERROR

    def test_returns_fresh_instance_per_call(self):
        exception = _amqp_exception(SERVER_BUSY_ERROR)
        first = translate_service_exception(exception, EVENT_HUB)
        second = translate_service_exception(exception, EVENT_HUB)

        assert first is not second


class TestTranslateOtherConditions:
    @pytest.mark.parametrize(
        "condition,reason",
        [
            (TIMEOUT_ERROR, FailureReason.SERVICE_TIMEOUT),
            (NOT_FOUND_ERROR, FailureReason.RESOURCE_NOT_FOUND),
            ("amqp:link:stolen", FailureReason.CONSUMER_DISCONNECTED),
            ("amqp:link:message-size-exceeded", FailureReason.MESSAGE_SIZE_EXCEEDED),
            ("amqp:resource-limit-exceeded", FailureReason.QUOTA_EXCEEDED),
        ],
    )
    def test_service_conditions(self, condition, reason):
        translated = translate_service_exception(_amqp_exception(condition), EVENT_HUB)

        assert isinstance(translated, EventHubsError)
        assert translated.reason == reason
        assert translated.resource_name == EVENT_HUB

    def test_unauthorized_becomes_permission_error(self):
        exception = _amqp_exception(UNAUTHORIZED_ERROR, "Unauthorized access.")
        translated = translate_service_exception(exception, EVENT_HUB)

        assert isinstance(translated, PermissionError)
        assert str(translated) == "Unauthorized access."
        assert translated.__cause__ is exception

    def test_argument_error_becomes_value_error(self):
        translated = translate_service_exception(_amqp_exception(ARGUMENT_ERROR), EVENT_HUB)

        assert isinstance(translated, ValueError)


# ---------------------------------------------------------------------------
# ServiceExceptionTranslator
# ---------------------------------------------------------------------------


class TestServiceExceptionTranslator:
    def test_default_table_matches_module_function(self):
        translator = ServiceExceptionTranslator()
        translated = translator.translate(_amqp_exception(SERVER_BUSY_ERROR), EVENT_HUB)

        assert translated.reason == FailureReason.SERVICE_BUSY

    def test_custom_condition_is_translated(self):
        translator = ServiceExceptionTranslator(
            {"com.contoso:throttled": FailureReason.SERVICE_BUSY}
        )
        translated = translator.translate(_amqp_exception("com.contoso:throttled"), EVENT_HUB)

        assert isinstance(translated, EventHubsError)
        assert translated.reason == FailureReason.SERVICE_BUSY

    def test_custom_condition_inside_cancellation(self):
        translator = ServiceExceptionTranslator(
            {"com.contoso:throttled": FailureReason.SERVICE_BUSY}
        )
        exception = OperationCanceledError(cause=_amqp_exception("com.contoso:throttled"))

        assert translator.translate(exception, EVENT_HUB).reason == FailureReason.SERVICE_BUSY

    def test_custom_table_overrides_defaults(self):
        translator = ServiceExceptionTranslator({TIMEOUT_ERROR: FailureReason.SERVICE_BUSY})
        translated = translator.translate(_amqp_exception(TIMEOUT_ERROR), EVENT_HUB)

        assert translated.reason == FailureReason.SERVICE_BUSY

    def test_custom_table_does_not_leak_into_default(self):
        ServiceExceptionTranslator({"com.contoso:throttled": FailureReason.SERVICE_BUSY})
        exception = _amqp_exception("com.contoso:throttled")

        assert translate_service_exception(exception, EVENT_HUB) is exception

    def test_condition_reasons_returns_copy(self):
        translator = ServiceExceptionTranslator()
        translator.condition_reasons["com.contoso:throttled"] = FailureReason.SERVICE_BUSY

        assert "com.contoso:throttled" not in translator.condition_reasons

    def test_validates_the_instance(self):
        with pytest.raises(ValueError):
            ServiceExceptionTranslator().translate(None, EVENT_HUB)

    def test_logs_translation(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="streamhub.errors.translation"):
            translate_service_exception(_amqp_exception(SERVER_BUSY_ERROR), EVENT_HUB)

        record = caplog.records[-1]
        assert record.resource_name == EVENT_HUB
        assert record.error_reason == "service_busy"
        assert record.amqp_condition == SERVER_BUSY_ERROR

    def test_pass_through_does_not_log(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="streamhub.errors.translation"):
            translate_service_exception(ValueError(), EVENT_HUB)

        assert caplog.records == []
