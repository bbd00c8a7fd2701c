"""
Core types and protocols used across modules.

This module provides the failure vocabulary exposed to callers and the
protocol implemented by exception translators.
"""

from enum import Enum
from typing import Optional, Protocol


class FailureReason(Enum):
    """
    Classification of service failures for handling decisions.

    Callers branch on the reason to decide whether an operation should be
    retried or surfaced to the user.

    Reasons:
        GENERAL_ERROR: Failure with no more specific classification
        CLIENT_CLOSED: Operation attempted on a closed client
        CONSUMER_DISCONNECTED: Consumer lost ownership of its partition link
        RESOURCE_NOT_FOUND: Event hub, consumer group or partition missing
        MESSAGE_SIZE_EXCEEDED: Event or batch larger than the service allows
        QUOTA_EXCEEDED: Namespace or entity quota reached
        SERVICE_BUSY: Service is throttling requests
        SERVICE_TIMEOUT: Service did not respond in time
        SERVICE_COMMUNICATION_PROBLEM: Network-level failure talking to the service
        PRODUCER_DISCONNECTED: Idempotent producer was fenced by another instance
        INVALID_CLIENT_STATE: Client state inconsistent with the service
    """

    GENERAL_ERROR = "general_error"
    CLIENT_CLOSED = "client_closed"
    CONSUMER_DISCONNECTED = "consumer_disconnected"
    RESOURCE_NOT_FOUND = "resource_not_found"
    MESSAGE_SIZE_EXCEEDED = "message_size_exceeded"
    QUOTA_EXCEEDED = "quota_exceeded"
    SERVICE_BUSY = "service_busy"
    SERVICE_TIMEOUT = "service_timeout"
    SERVICE_COMMUNICATION_PROBLEM = "service_communication_problem"
    PRODUCER_DISCONNECTED = "producer_disconnected"
    INVALID_CLIENT_STATE = "invalid_client_state"

    @classmethod
    def parse(cls, value: "str | FailureReason") -> "FailureReason":
        """
        Resolve a reason from its value or member name, case-insensitively.

        Raises:
            ValueError: If the name does not match any reason
        """
        if isinstance(value, cls):
            return value

        normalized = str(value).strip().lower().replace("-", "_")
        for member in cls:
            if member.value == normalized:
                return member

        valid = ", ".join(member.value for member in cls)
        raise ValueError(f"Unknown failure reason: {value!r}. Must be one of: {valid}")


# Reasons that may succeed when the operation is retried
TRANSIENT_REASONS = frozenset(
    {
        FailureReason.GENERAL_ERROR,
        FailureReason.SERVICE_BUSY,
        FailureReason.SERVICE_TIMEOUT,
        FailureReason.SERVICE_COMMUNICATION_PROBLEM,
    }
)


class ErrorTranslator(Protocol):
    """
    Protocol for exception translation implementations.

    Translators turn low-level transport faults into the public exception
    taxonomy and leave unrecognized exceptions untouched.
    """

    def translate(self, error: BaseException, resource_name: Optional[str]) -> BaseException:
        """
        Translate an exception raised during a service operation.

        Args:
            error: Exception to translate
            resource_name: Name of the event hub (or other entity) involved

        Returns:
            A classified exception, or ``error`` itself when no rule applies
        """
        ...


__all__ = [
    "FailureReason",
    "TRANSIENT_REASONS",
    "ErrorTranslator",
]
