"""Context variables for structured logging."""

from contextvars import ContextVar
from typing import Dict, Optional

_resource_name: ContextVar[str] = ContextVar("resource_name", default="")
_operation: ContextVar[str] = ContextVar("operation", default="")
_client_id: ContextVar[str] = ContextVar("client_id", default="")
_trace_id: ContextVar[str] = ContextVar("trace_id", default="")


def set_log_context(
    resource_name: Optional[str] = None,
    operation: Optional[str] = None,
    client_id: Optional[str] = None,
    trace_id: Optional[str] = None,
) -> None:
    if resource_name is not None:
        _resource_name.set(resource_name)
    if operation is not None:
        _operation.set(operation)
    if client_id is not None:
        _client_id.set(client_id)
    if trace_id is not None:
        _trace_id.set(trace_id)


def get_log_context() -> Dict[str, str]:
    return {
        "resource_name": _resource_name.get(),
        "operation": _operation.get(),
        "client_id": _client_id.get(),
        "trace_id": _trace_id.get(),
    }


def clear_log_context() -> None:
    _resource_name.set("")
    _operation.set("")
    _client_id.set("")
    _trace_id.set("")
