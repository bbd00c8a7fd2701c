"""Context managers for structured logging."""

import logging
import time
from typing import Any, Dict, Optional

from streamhub.errors.translation import translate_service_exception
from streamhub.logging.context import get_log_context, set_log_context
from streamhub.logging.utilities import log_exception, log_with_context


class LogContext:
    """
    Context manager for temporary log context.

    Usage:
        with LogContext(resource_name="telemetry", operation="send"):
            # All logs in this block will have resource_name and operation
            do_work()
    """

    def __init__(
        self,
        resource_name: Optional[str] = None,
        operation: Optional[str] = None,
        client_id: Optional[str] = None,
        trace_id: Optional[str] = None,
    ):
        self.new_context = {
            "resource_name": resource_name,
            "operation": operation,
            "client_id": client_id,
            "trace_id": trace_id,
        }
        self.old_context: Dict[str, str] = {}

    def __enter__(self) -> "LogContext":
        self.old_context = get_log_context()
        for key, value in self.new_context.items():
            if value is not None:
                set_log_context(**{key: value})
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        set_log_context(**self.old_context)
        return False


class OperationContext(LogContext):
    """
    Context manager for a single service operation with timing.

    Logs completion with duration. When the operation raises, the fault is
    logged in its translated form and then propagates unchanged.

    Usage:
        with OperationContext(logger, "send", resource_name="telemetry"):
            producer.send(batch)
    """

    def __init__(
        self,
        logger: logging.Logger,
        operation: str,
        resource_name: Optional[str] = None,
        level: int = logging.DEBUG,
        **context: Any,
    ):
        super().__init__(resource_name=resource_name, operation=operation)
        self.logger = logger
        self.operation = operation
        self.resource_name = resource_name
        self.level = level
        self.context = context
        self.start_time = 0.0

    def __enter__(self) -> "OperationContext":
        super().__enter__()
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        duration_ms = round((time.perf_counter() - self.start_time) * 1000, 2)
        try:
            if exc_val is None:
                log_with_context(
                    self.logger,
                    self.level,
                    f"Completed {self.operation}",
                    duration_ms=duration_ms,
                    **self.context,
                )
            elif isinstance(exc_val, Exception):
                translated = translate_service_exception(exc_val, self.resource_name)
                log_exception(
                    self.logger,
                    translated,
                    f"Failed {self.operation}",
                    duration_ms=duration_ms,
                    **self.context,
                )
        finally:
            super().__exit__(exc_type, exc_val, exc_tb)
        return False
