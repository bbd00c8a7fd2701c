"""
streamhub: client-side error handling for an AMQP event streaming service.

Modules:
    errors   - EventHubsError, AMQP transport errors, exception translation
    logging  - Structured JSON logging with context propagation
    config   - YAML configuration with environment variable expansion
"""

from .types import ErrorTranslator, FailureReason

__version__ = "0.1.0"

__all__ = [
    "ErrorTranslator",
    "FailureReason",
]
