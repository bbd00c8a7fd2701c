"""
AMQP transport error model.

Represents faults raised by the AMQP link layer and maps AMQP error
conditions onto the public exception taxonomy. Condition symbols follow the
AMQP 1.0 specification plus the vendor extensions used by the service.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Type

from streamhub.errors.exceptions import EventHubsError
from streamhub.types import FailureReason

DEFAULT_ERROR_MESSAGE = "The service encountered an error while processing the request."
DEFAULT_CANCELED_MESSAGE = "The operation was canceled."

# AMQP 1.0 standard conditions
NOT_FOUND_ERROR = "amqp:not-found"
UNAUTHORIZED_ERROR = "amqp:unauthorized-access"
RESOURCE_LIMIT_EXCEEDED_ERROR = "amqp:resource-limit-exceeded"
NOT_IMPLEMENTED_ERROR = "amqp:not-implemented"
CONNECTION_FORCED_ERROR = "amqp:connection:forced"
LINK_DETACH_FORCED_ERROR = "amqp:link:detach-forced"
LINK_STOLEN_ERROR = "amqp:link:stolen"
MESSAGE_SIZE_EXCEEDED_ERROR = "amqp:link:message-size-exceeded"

# Vendor conditions
SERVER_BUSY_ERROR = "com.microsoft:server-busy"
TIMEOUT_ERROR = "com.microsoft:timeout"
ARGUMENT_ERROR = "com.microsoft:argument-error"
ARGUMENT_OUT_OF_RANGE_ERROR = "com.microsoft:argument-out-of-range"
PRODUCER_STOLEN_ERROR = "com.microsoft:producer-epoch-stolen"
SEQUENCE_OUT_OF_ORDER_ERROR = "com.microsoft:out-of-order-sequence"

# Conditions surfaced as EventHubsError with a specific reason
CONDITION_REASONS: Dict[str, FailureReason] = {
    SERVER_BUSY_ERROR: FailureReason.SERVICE_BUSY,
    TIMEOUT_ERROR: FailureReason.SERVICE_TIMEOUT,
    NOT_FOUND_ERROR: FailureReason.RESOURCE_NOT_FOUND,
    RESOURCE_LIMIT_EXCEEDED_ERROR: FailureReason.QUOTA_EXCEEDED,
    MESSAGE_SIZE_EXCEEDED_ERROR: FailureReason.MESSAGE_SIZE_EXCEEDED,
    LINK_STOLEN_ERROR: FailureReason.CONSUMER_DISCONNECTED,
    PRODUCER_STOLEN_ERROR: FailureReason.PRODUCER_DISCONNECTED,
    SEQUENCE_OUT_OF_ORDER_ERROR: FailureReason.INVALID_CLIENT_STATE,
    CONNECTION_FORCED_ERROR: FailureReason.SERVICE_COMMUNICATION_PROBLEM,
    LINK_DETACH_FORCED_ERROR: FailureReason.SERVICE_COMMUNICATION_PROBLEM,
}

# Conditions surfaced as built-in exception types (caller errors, not service failures)
CONDITION_EXCEPTIONS: Dict[str, Type[Exception]] = {
    UNAUTHORIZED_ERROR: PermissionError,
    ARGUMENT_ERROR: ValueError,
    ARGUMENT_OUT_OF_RANGE_ERROR: ValueError,
    NOT_IMPLEMENTED_ERROR: NotImplementedError,
}


@dataclass(frozen=True)
class AmqpError:
    """Error performative received from the service on a link, session or connection."""

    condition: str
    description: Optional[str] = None
    info: Mapping[str, Any] = field(default_factory=dict, hash=False, compare=False)


class AmqpException(Exception):
    """Fault raised by the AMQP transport, carrying the error sent by the service."""

    def __init__(self, error: AmqpError, message: Optional[str] = None):
        self.error = error
        super().__init__(message or error.description or error.condition)

    @property
    def condition(self) -> str:
        return self.error.condition


class OperationCanceledError(Exception):
    """
    Cooperative cancellation of a transport operation.

    The transport reports several distinct failures, throttling included,
    by canceling the pending operation; the underlying fault, when known, is
    the ``__cause__`` of the cancellation.
    """

    def __init__(self, message: str = DEFAULT_CANCELED_MESSAGE, cause: Optional[BaseException] = None):
        super().__init__(message)
        if cause is not None:
            self.__cause__ = cause

    @property
    def inner_exception(self) -> Optional[BaseException]:
        return self.__cause__


def is_known_condition(
    condition: Optional[str],
    condition_reasons: Optional[Mapping[str, FailureReason]] = None,
) -> bool:
    """Check whether an AMQP condition has a translation."""
    if not condition:
        return False
    reasons = CONDITION_REASONS if condition_reasons is None else condition_reasons
    return condition in reasons or condition in CONDITION_EXCEPTIONS


def create_exception_for_error(
    error: Optional[AmqpError],
    resource_name: Optional[str],
    condition_reasons: Optional[Mapping[str, FailureReason]] = None,
    cause: Optional[BaseException] = None,
) -> Exception:
    """
    Create the exception that corresponds to an AMQP error condition.

    Args:
        error: Error received from the service (None when the service sent none)
        resource_name: Event hub the failed operation targeted
        condition_reasons: Condition table to use (default: CONDITION_REASONS)
        cause: Transport exception to chain as the cause of the result

    Returns:
        EventHubsError for service conditions, a built-in exception for
        caller errors, or EventHubsError(GENERAL_ERROR) for unknown conditions
    """
    reasons = CONDITION_REASONS if condition_reasons is None else condition_reasons

    if error is None or not error.condition:
        return EventHubsError(
            DEFAULT_ERROR_MESSAGE, FailureReason.GENERAL_ERROR, resource_name, cause=cause
        )

    description = error.description or DEFAULT_ERROR_MESSAGE
    condition = error.condition

    # Configured reasons win over the built-in exception mapping
    if condition in reasons:
        return EventHubsError(description, reasons[condition], resource_name, cause=cause)

    exc_type = CONDITION_EXCEPTIONS.get(condition)
    if exc_type is not None:
        exc = exc_type(description)
        if cause is not None:
            exc.__cause__ = cause
        return exc

    return EventHubsError(description, FailureReason.GENERAL_ERROR, resource_name, cause=cause)
