"""Log formatters for JSON and console output."""

import json
import logging
import re
import sys
from datetime import UTC, datetime
from typing import Any

from streamhub.logging.context import get_log_context
from streamhub.utils.json_serializers import json_serializer


class JSONFormatter(logging.Formatter):
    """
    JSON log formatter with context injection.

    Produces one JSON object per line for easy parsing with jq/grep.
    Redacts credentials embedded in connection strings before logging.
    """

    # Fields to extract from LogRecord extras
    EXTRA_FIELDS = [
        # Correlation and tracing
        "trace_id",
        "duration_ms",
        # Errors
        "error_reason",
        "error_message",
        "error_type",
        "amqp_condition",
        "is_transient",
        # Service entities
        "resource_name",
        "consumer_group",
        "partition_id",
        "endpoint",
        "connection_string",
        # Operation tracking
        "operation",
        "batch_size",
        "event_count",
        "attempt",
        "sequence_number",
        "offset",
    ]

    # Type mapping for numeric fields so they never serialize as strings
    NUMERIC_FIELDS = {
        "duration_ms": float,
        "batch_size": int,
        "event_count": int,
        "attempt": int,
        "sequence_number": int,
    }

    # Fields that may carry credentials and should be sanitized
    SECRET_FIELDS = ["endpoint", "connection_string"]

    # Pattern to match shared access keys and signatures
    SENSITIVE_PARAMS_PATTERN = re.compile(
        r"(SharedAccessKey|SharedAccessSignature|sig|token|secret|password)=[^;&]*",
        re.IGNORECASE,
    )

    def _sanitize_secret(self, value: str) -> str:
        return self.SENSITIVE_PARAMS_PATTERN.sub(r"\1=[REDACTED]", value)

    def _sanitize_value(self, key: str, value: Any) -> Any:
        if key in self.SECRET_FIELDS and isinstance(value, str):
            return self._sanitize_secret(value)
        return value

    def _ensure_type(self, field: str, value: Any) -> Any:
        """Convert numeric fields to their expected type, or None if conversion fails."""
        if field not in self.NUMERIC_FIELDS or value is None:
            return value

        expected_type = self.NUMERIC_FIELDS[field]
        try:
            return expected_type(value)
        except (ValueError, TypeError):
            return None

    @staticmethod
    def _base_log_entry(record: logging.LogRecord) -> dict[str, Any]:
        return {
            "ts": datetime.now(UTC).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z",
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

    @staticmethod
    def _inject_context(log_entry: dict[str, Any], log_context: dict[str, Any]) -> None:
        for field in ("resource_name", "operation", "client_id", "trace_id"):
            if log_context.get(field):
                log_entry[field] = log_context[field]

    @staticmethod
    def _should_include_source_location(record: logging.LogRecord) -> bool:
        return record.levelno in (logging.DEBUG, logging.ERROR, logging.CRITICAL)

    def _inject_extra_fields(self, log_entry: dict[str, Any], record: logging.LogRecord) -> None:
        for field in self.EXTRA_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                typed_value = self._ensure_type(field, value)
                log_entry[field] = self._sanitize_value(field, typed_value)

    def _inject_exception(self, log_entry: dict[str, Any], record: logging.LogRecord) -> None:
        if not record.exc_info:
            return

        exc_type, exc_value, _ = record.exc_info
        log_entry["exception"] = {
            "type": exc_type.__name__ if exc_type else None,
            "message": str(exc_value) if exc_value else None,
            "stacktrace": self.formatException(record.exc_info),
        }

        reason = getattr(exc_value, "reason", None)
        if reason is not None and "error_reason" not in log_entry:
            log_entry["error_reason"] = json_serializer(reason)

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as a single JSON line."""
        log_entry = self._base_log_entry(record)

        # Context variables first; explicit extras override them
        self._inject_context(log_entry, get_log_context())

        if self._should_include_source_location(record):
            log_entry["file"] = f"{record.filename}:{record.lineno}"

        self._inject_extra_fields(log_entry, record)
        self._inject_exception(log_entry, record)

        return json.dumps(log_entry, default=json_serializer, ensure_ascii=False)


class ConsoleFormatter(logging.Formatter):
    """
    Human-readable console formatter with color-coded log levels.

    Colors are auto-disabled when output is not a TTY (pipes, files).
    """

    # ANSI color codes
    COLORS = {
        logging.DEBUG: "\033[36m",  # Cyan
        logging.INFO: "\033[32m",  # Green
        logging.WARNING: "\033[33m",  # Yellow
        logging.ERROR: "\033[31m",  # Red
        logging.CRITICAL: "\033[35m",  # Magenta
    }
    RESET = "\033[0m"

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._use_colors = sys.stdout.isatty()

    def _format_level_name(self, record: logging.LogRecord) -> str:
        level_name = record.levelname
        if not self._use_colors:
            return level_name

        color = self.COLORS.get(record.levelno, "")
        if not color:
            return level_name

        return f"{color}{level_name}{self.RESET}"

    @staticmethod
    def _build_prefix(level_name: str, log_context: dict[str, Any]) -> str:
        parts = [
            datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
            level_name,
        ]

        if log_context["resource_name"]:
            parts.append(f"[{log_context['resource_name']}]")
        if log_context["operation"]:
            parts.append(f"[{log_context['operation']}]")

        return " - ".join(parts)

    @staticmethod
    def _build_tags(record: logging.LogRecord, log_context: dict[str, Any]) -> list[str]:
        trace_id = getattr(record, "trace_id", None) or log_context.get("trace_id")
        reason = getattr(record, "error_reason", None)
        partition_id = getattr(record, "partition_id", None)

        tags = []
        if trace_id:
            tags.append(f"[{trace_id[:8]}]")
        if partition_id is not None:
            tags.append(f"[p:{partition_id}]")
        if reason:
            tags.append(f"[{reason}]")
        return tags

    def format(self, record: logging.LogRecord) -> str:
        """Format log record for console output with optional color coding."""
        log_context = get_log_context()

        level_name = self._format_level_name(record)
        prefix = self._build_prefix(level_name, log_context)
        tags = self._build_tags(record, log_context)

        message = record.getMessage()
        if tags:
            message = f"{' '.join(tags)} {message}"

        line = f"{prefix} - {message}"
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line
