"""Logging utilities for the synchronization core."""

from console_sync.logging.config import cleanup_old_logs, setup_logging
from console_sync.logging.context import (
    clear_operation_id,
    get_operation_id,
    new_operation_id,
    set_operation_id,
)
from console_sync.logging.filters import OperationIDFilter

__all__ = [
    "OperationIDFilter",
    "cleanup_old_logs",
    "clear_operation_id",
    "get_operation_id",
    "new_operation_id",
    "set_operation_id",
    "setup_logging",
]
