"""Logging utility functions."""

import logging
from typing import Any

# Reserved LogRecord attribute names that cannot be used in extra dict
_RESERVED_LOG_KEYS = frozenset(
    {
        "name",
        "msg",
        "args",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "lineno",
        "funcName",
        "created",
        "asctime",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "message",
        "exc_info",
        "exc_text",
        "stack_info",
    }
)

MAX_ERROR_MESSAGE_LENGTH = 500


def log_with_context(
    logger: logging.Logger,
    level: int,
    msg: str,
    **kwargs: Any,
) -> None:
    """
    Log with structured context fields.

    Args:
        logger: Logger instance
        level: Log level (logging.INFO, etc.)
        msg: Log message
        **kwargs: Additional context fields (resource_name, duration_ms, etc.)
                  Note: exc_info=True is supported and handled specially.

    Example:
        log_with_context(
            logger, logging.INFO, "Batch sent",
            resource_name="telemetry",
            batch_size=len(batch),
        )
    """
    exc_info = kwargs.pop("exc_info", None)

    extra = {k: v for k, v in kwargs.items() if k not in _RESERVED_LOG_KEYS}

    logger.log(level, msg, exc_info=exc_info, extra=extra)


def log_exception(
    logger: logging.Logger,
    exc: BaseException,
    msg: str,
    level: int = logging.ERROR,
    include_traceback: bool = True,
    **kwargs: Any,
) -> None:
    """
    Log exception with context and optional traceback.

    Automatically extracts error_reason, resource_name and is_transient
    from EventHubsError instances. Long error messages are truncated.

    Example:
        try:
            producer.send(batch)
        except Exception as e:
            log_exception(logger, e, "Send failed", resource_name=hub)
    """
    reason = getattr(exc, "reason", None)
    if kwargs.get("error_reason") is None and reason is not None:
        kwargs["error_reason"] = reason.value if hasattr(reason, "value") else str(reason)

    resource_name = getattr(exc, "resource_name", None)
    if kwargs.get("resource_name") is None and resource_name:
        kwargs["resource_name"] = resource_name

    if hasattr(exc, "is_transient"):
        kwargs.setdefault("is_transient", exc.is_transient)

    kwargs.setdefault("error_type", type(exc).__name__)

    error_msg = str(exc)
    if len(error_msg) > MAX_ERROR_MESSAGE_LENGTH:
        error_msg = error_msg[:MAX_ERROR_MESSAGE_LENGTH] + "..."
    kwargs["error_message"] = error_msg

    extra = {k: v for k, v in kwargs.items() if k not in _RESERVED_LOG_KEYS}

    if include_traceback:
        logger.log(level, msg, exc_info=exc, extra=extra)
    else:
        logger.log(level, msg, extra=extra)
