"""
Public exception type for event hub operations.

EventHubsError is the normalized, classified failure surfaced to callers.
It carries a stable reason for programmatic branching while keeping the
original transport fault reachable through ``cause``.
"""

from typing import Optional

from streamhub.types import TRANSIENT_REASONS, FailureReason

_FROZEN_ATTRIBUTES = frozenset({"message", "reason", "resource_name", "cause", "is_transient"})


class EventHubsError(Exception):
    """
    Classified failure of an event hub operation.

    Attributes:
        message: Human-readable error description
        reason: Failure classification for retry decisions
        resource_name: Event hub (or other entity) the operation targeted
        cause: Original exception if wrapping
        is_transient: Whether retrying the operation may succeed

    Instances are immutable once constructed.
    """

    def __init__(
        self,
        message: str,
        reason: FailureReason = FailureReason.GENERAL_ERROR,
        resource_name: Optional[str] = None,
        cause: Optional[BaseException] = None,
        is_transient: Optional[bool] = None,
    ):
        super().__init__(message)
        if is_transient is None:
            is_transient = reason in TRANSIENT_REASONS

        object.__setattr__(self, "message", message)
        object.__setattr__(self, "reason", reason)
        object.__setattr__(self, "resource_name", resource_name)
        object.__setattr__(self, "cause", cause)
        object.__setattr__(self, "is_transient", is_transient)

        if cause is not None:
            self.__cause__ = cause

    def __setattr__(self, name, value):
        if name in _FROZEN_ATTRIBUTES:
            raise AttributeError(f"{type(self).__name__}.{name} is read-only")
        super().__setattr__(name, value)

    def __delattr__(self, name):
        if name in _FROZEN_ATTRIBUTES:
            raise AttributeError(f"{type(self).__name__}.{name} is read-only")
        super().__delattr__(name)

    def __reduce__(self):
        return (
            type(self),
            (self.message, self.reason, self.resource_name, self.cause, self.is_transient),
        )

    def __str__(self) -> str:
        parts = [self.message]
        if self.resource_name:
            parts.append(f"Event Hub: {self.resource_name}")
        parts.append(f"Reason: {self.reason.value}")
        return " | ".join(parts)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(message={self.message!r}, reason={self.reason}, "
            f"resource_name={self.resource_name!r}, is_transient={self.is_transient})"
        )


def is_transient_error(exc: BaseException) -> bool:
    """
    Check if exception is transient (retriable).

    Only classified errors carry a transient flag; anything else is treated
    as non-transient so it surfaces to the caller.
    """
    if isinstance(exc, EventHubsError):
        return exc.is_transient
    return False


def get_failure_reason(exc: BaseException) -> Optional[FailureReason]:
    """Return the failure reason of a classified error, or None."""
    if isinstance(exc, EventHubsError):
        return exc.reason
    return None
