"""
Error classification and exception hierarchy.

Provides:
- EventHubsError, the classified exception surfaced to callers
- AMQP transport error model and condition mapping
- Service exception translation for transport faults
"""

from streamhub.errors.amqp import (
    # Constants
    CONDITION_REASONS,
    SERVER_BUSY_ERROR,
    TIMEOUT_ERROR,
    # Transport errors
    AmqpError,
    AmqpException,
    OperationCanceledError,
    # Functions
    create_exception_for_error,
    is_known_condition,
)
from streamhub.errors.exceptions import (
    EventHubsError,
    get_failure_reason,
    is_transient_error,
)
from streamhub.errors.translation import (
    ServiceExceptionTranslator,
    translate_service_exception,
)

__all__ = [
    # Exceptions
    "EventHubsError",
    # Transport errors
    "AmqpError",
    "AmqpException",
    "OperationCanceledError",
    # Condition mapping
    "CONDITION_REASONS",
    "SERVER_BUSY_ERROR",
    "TIMEOUT_ERROR",
    "create_exception_for_error",
    "is_known_condition",
    # Translation
    "ServiceExceptionTranslator",
    "translate_service_exception",
    # Utilities
    "get_failure_reason",
    "is_transient_error",
]
