"""Structlog configuration: JSON lines to a rotating file, colored console.

Every event carries the batch or poll operation it belongs to, so one
batch run or one poll tick can be followed across modules and threads.
"""

import logging
import logging.handlers
import os
import time
from pathlib import Path

import colorama
import structlog
from structlog.typing import Processor

from console_sync.constants import DEFAULT_LOG_FILE_PATH
from console_sync.logging.filters import OperationIDFilter
from console_sync.logging.processors import (
    add_operation_context,
    add_process_info,
    add_service_context,
    console_renderer,
)

LOG_FILE_MAX_BYTES = 10 * 1024 * 1024  # 10MB
LOG_FILE_BACKUP_COUNT = 20

_timestamper = structlog.processors.TimeStamper(fmt="iso", utc=True)


def _context_processors() -> list[Processor]:
    """Processors shared by structlog events and plain stdlib records."""
    return [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        _timestamper,
        add_operation_context,
        add_service_context,
        add_process_info,
    ]


def _build_handler(
    handler: logging.Handler, renderer: Processor, level: int
) -> logging.Handler:
    handler.setLevel(level)
    handler.addFilter(OperationIDFilter())
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=renderer,
            # urllib3 and other stdlib loggers get the same context
            foreign_pre_chain=_context_processors(),
        )
    )
    return handler


def setup_logging(log_file_path: str | None = None, log_level: str | None = None) -> None:
    """Configure structlog for the synchronization core.

    File output is one JSON object per line with every context field
    (operation_id, service_name, environment, process and thread). It
    rotates at 10MB, keeping 20 backups.

    Console output is one colored line per event:
    ``[LEVEL] time | operation | module | message key=value...``

    Environment variables (used when the arguments are omitted):
    - LOG_FILE_PATH: Path to log file (default: ./logs/admin-console-sync.log)
    - LOG_LEVEL: Logging level (default: INFO)
    - SERVICE_NAME / ENVIRONMENT: metadata added to every event

    Args:
        log_file_path: Overrides LOG_FILE_PATH
        log_level: Overrides LOG_LEVEL
    """
    log_file_path = log_file_path or os.getenv("LOG_FILE_PATH", DEFAULT_LOG_FILE_PATH)
    log_level = (log_level or os.getenv("LOG_LEVEL", "INFO")).upper()
    level = getattr(logging, log_level, logging.INFO)

    Path(log_file_path).parent.mkdir(parents=True, exist_ok=True)
    colorama.just_fix_windows_console()

    structlog.configure(
        processors=[
            *_context_processors(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    file_handler = _build_handler(
        logging.handlers.RotatingFileHandler(
            filename=log_file_path,
            maxBytes=LOG_FILE_MAX_BYTES,
            backupCount=LOG_FILE_BACKUP_COUNT,
            encoding="utf-8",
        ),
        structlog.processors.JSONRenderer(),
        level,
    )
    console_handler = _build_handler(logging.StreamHandler(), console_renderer, level)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(level)
    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)

    structlog.get_logger(__name__).info(
        "Logging configured",
        log_file=log_file_path,
        log_level=log_level,
        max_file_size_mb=LOG_FILE_MAX_BYTES // (1024 * 1024),
        backup_count=LOG_FILE_BACKUP_COUNT,
    )


def cleanup_old_logs(
    log_file_path: str | None = None, retention_days: int = 10
) -> int:
    """Remove rotated log files older than the retention period.

    The active log file is never removed.

    Args:
        log_file_path: Path to the main log file. If None, uses LOG_FILE_PATH env var.
        retention_days: Number of days to retain logs (default: 10).

    Returns:
        Number of files deleted
    """
    if log_file_path is None:
        log_file_path = os.getenv("LOG_FILE_PATH", DEFAULT_LOG_FILE_PATH)

    log_dir = Path(log_file_path).parent
    log_name = Path(log_file_path).name
    logger = structlog.get_logger(__name__)

    current_time = time.time()
    retention_seconds = retention_days * 24 * 60 * 60

    deleted_count = 0
    for log_file in log_dir.glob(f"{log_name}*"):
        if log_file.name == log_name:
            continue

        if current_time - log_file.stat().st_mtime <= retention_seconds:
            continue

        try:
            log_file.unlink()
            deleted_count += 1
        except OSError as e:
            logger.warning(
                "Failed to delete old log file",
                file=str(log_file),
                error=str(e),
            )

    if deleted_count > 0:
        logger.info(
            "Cleaned up old log files",
            deleted_count=deleted_count,
            retention_days=retention_days,
        )

    return deleted_count
