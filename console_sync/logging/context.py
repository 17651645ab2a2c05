"""Thread-local context management for operation tracking."""

import threading
import uuid

# Thread-local storage for operation context
_operation_context = threading.local()


def set_operation_id(operation_id: str) -> None:
    """Store the operation ID in thread-local storage.

    Args:
        operation_id: The identifier of the running batch, poll tick or fetch.
    """
    _operation_context.operation_id = operation_id


def get_operation_id() -> str | None:
    """Retrieve the operation ID from thread-local storage.

    Returns:
        The current operation ID, or None if not set.
    """
    return getattr(_operation_context, "operation_id", None)


def clear_operation_id() -> None:
    """Clear the operation ID from thread-local storage.

    Call this once the operation is complete so later log lines on the
    same thread are not attributed to it.
    """
    if hasattr(_operation_context, "operation_id"):
        delattr(_operation_context, "operation_id")


def new_operation_id(prefix: str) -> str:
    """Generate an operation ID such as ``batch-3f2a9c1d``."""
    return f"{prefix}-{uuid.uuid4().hex[:8]}"
