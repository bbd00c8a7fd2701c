"""
Service exception translation for event hub operations.

Maps faults raised by the AMQP transport onto the EventHubsError taxonomy
so callers can branch on a small set of failure reasons. Exceptions that
are not recognized pass through as the same instance so the original fault
can still be inspected or re-raised.
"""

import logging
from typing import Dict, Mapping, Optional

from streamhub.errors.amqp import (
    CONDITION_REASONS,
    DEFAULT_CANCELED_MESSAGE,
    AmqpException,
    OperationCanceledError,
    create_exception_for_error,
    is_known_condition,
)
from streamhub.errors.exceptions import EventHubsError
from streamhub.types import FailureReason

logger = logging.getLogger(__name__)


class ServiceExceptionTranslator:
    """
    Translates exceptions raised during service operations.

    Rules, first match wins:
        1. AmqpException with a known condition -> exception for that condition
        2. OperationCanceledError without a cause -> EventHubsError(SERVICE_TIMEOUT)
        3. OperationCanceledError with a cause -> the translated AmqpException
           cause, or the cause itself (one level of unwrapping)
        4. Anything else -> the same instance, unchanged

    Args:
        condition_reasons: Extra AMQP condition -> FailureReason mappings,
            merged over the default CONDITION_REASONS table
    """

    def __init__(self, condition_reasons: Optional[Mapping[str, FailureReason]] = None):
        self._condition_reasons: Dict[str, FailureReason] = dict(CONDITION_REASONS)
        if condition_reasons:
            self._condition_reasons.update(condition_reasons)

    @property
    def condition_reasons(self) -> Dict[str, FailureReason]:
        return dict(self._condition_reasons)

    def translate(self, error: BaseException, resource_name: Optional[str]) -> BaseException:
        """
        Translate an exception into its public, classified form.

        Args:
            error: Exception raised during the operation
            resource_name: Event hub the operation targeted

        Returns:
            Translated exception, or ``error`` itself when no rule applies

        Raises:
            ValueError: If error is None
        """
        if error is None:
            raise ValueError("error must not be None")

        if isinstance(error, AmqpException):
            return self._translate_amqp(error, resource_name)

        if isinstance(error, OperationCanceledError):
            inner = error.__cause__
            if inner is None:
                translated = EventHubsError(
                    str(error) or DEFAULT_CANCELED_MESSAGE,
                    FailureReason.SERVICE_TIMEOUT,
                    resource_name,
                )
                self._log_translation(error, translated, resource_name)
                return translated

            if isinstance(inner, AmqpException):
                return self._translate_amqp(inner, resource_name)

            return inner

        return error

    def _translate_amqp(self, error: AmqpException, resource_name: Optional[str]) -> BaseException:
        if not is_known_condition(error.condition, self._condition_reasons):
            return error

        translated = create_exception_for_error(
            error.error, resource_name, self._condition_reasons, cause=error
        )
        self._log_translation(error, translated, resource_name)
        return translated

    @staticmethod
    def _log_translation(
        error: BaseException,
        translated: BaseException,
        resource_name: Optional[str],
    ) -> None:
        reason = translated.reason.value if isinstance(translated, EventHubsError) else None
        logger.debug(
            "Translated service exception",
            extra={
                "resource_name": resource_name,
                "error_type": type(error).__name__,
                "error_reason": reason,
                "amqp_condition": getattr(error, "condition", None),
            },
        )


_default_translator = ServiceExceptionTranslator()


def translate_service_exception(
    error: BaseException,
    resource_name: Optional[str],
) -> BaseException:
    """
    Translate an exception using the default AMQP condition table.

    Args:
        error: Exception raised during the operation
        resource_name: Event hub the operation targeted

    Returns:
        Translated exception, or ``error`` itself when no rule applies

    Raises:
        ValueError: If error is None
    """
    return _default_translator.translate(error, resource_name)
