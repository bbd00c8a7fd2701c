"""
Structured logging module.

Provides JSON logging with context propagation.
"""

from streamhub.logging.context import (
    clear_log_context,
    get_log_context,
    set_log_context,
)
from streamhub.logging.context_managers import LogContext, OperationContext
from streamhub.logging.formatters import ConsoleFormatter, JSONFormatter
from streamhub.logging.setup import get_logger, setup_logging
from streamhub.logging.utilities import log_exception, log_with_context

__all__ = [
    # Setup
    "setup_logging",
    "get_logger",
    # Formatters
    "JSONFormatter",
    "ConsoleFormatter",
    # Context
    "set_log_context",
    "get_log_context",
    "clear_log_context",
    # Context Managers
    "LogContext",
    "OperationContext",
    # Utilities
    "log_with_context",
    "log_exception",
]
