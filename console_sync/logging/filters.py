"""Logging filters for enriching log records with operation context."""

import logging

from console_sync.logging.context import get_operation_id


class OperationIDFilter(logging.Filter):
    """Add operation ID to log records.

    This filter injects the current operation ID from thread-local storage
    into every log record, so all lines of one batch or poll tick can be
    correlated.

    If no operation ID is set, it uses 'N/A' as a placeholder.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        """Add operation_id attribute to the log record.

        Args:
            record: The log record to enrich.

        Returns:
            True to indicate the record should be logged.
        """
        record.operation_id = get_operation_id() or "N/A"
        return True
