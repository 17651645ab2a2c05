"""Custom structlog processors for operation context and service metadata."""

import os
import threading

from colorama import Fore, Style
from structlog.typing import EventDict, WrappedLogger

from console_sync.constants import DEFAULT_SERVICE_NAME
from console_sync.logging.context import get_operation_id

PACKAGE_PREFIX = "console_sync."

LEVEL_COLORS = {
    "DEBUG": Fore.CYAN,
    "INFO": Fore.GREEN,
    "WARNING": Fore.YELLOW,
    "ERROR": Fore.RED,
    "CRITICAL": Fore.RED + Style.BRIGHT,
}

# Operation prefixes (see new_operation_id) -> console color
OPERATION_COLORS = {
    "batch": Fore.MAGENTA,
    "poll": Fore.CYAN,
}

# Shown in the header or only useful in the JSON file
CONSOLE_HIDDEN_FIELDS = frozenset(
    {
        "level",
        "timestamp",
        "operation_id",
        "logger",
        "event",
        "process_id",
        "thread_id",
        "thread_name",
        "service_name",
        "environment",
    }
)

# Extras rendered in red so failed items stand out in a batch run
ERROR_FIELDS = frozenset({"error", "error_type", "exception"})


def add_operation_context(
    _logger: WrappedLogger, _method_name: str, event_dict: EventDict
) -> EventDict:
    """Add the running batch or poll operation ID to log events.

    Args:
        _logger: The wrapped logger instance (unused).
        _method_name: The name of the method called on the logger (unused).
        event_dict: The event dictionary to be logged.

    Returns:
        The event dictionary with operation_id added if one is set.
    """
    operation_id = get_operation_id()
    if operation_id:
        event_dict["operation_id"] = operation_id
    return event_dict


def add_service_context(
    _logger: WrappedLogger, _method_name: str, event_dict: EventDict
) -> EventDict:
    """Add service_name and environment to log events."""
    event_dict["service_name"] = os.getenv("SERVICE_NAME", DEFAULT_SERVICE_NAME)
    event_dict["environment"] = os.getenv("ENVIRONMENT", "development")
    return event_dict


def add_process_info(
    _logger: WrappedLogger, _method_name: str, event_dict: EventDict
) -> EventDict:
    """Add process and thread information to log events.

    Thread names matter here: poll ticks run on the ``AggregatePoller``
    thread, everything else on the caller's thread.
    """
    event_dict["process_id"] = os.getpid()
    event_dict["thread_id"] = threading.get_ident()
    event_dict["thread_name"] = threading.current_thread().name
    return event_dict


def _operation_label(event_dict: EventDict) -> str:
    """Operation ID, or the emitting thread's name outside any operation."""
    operation_id = event_dict.get("operation_id")
    if operation_id:
        prefix = operation_id.split("-", 1)[0]
        color = OPERATION_COLORS.get(prefix, Fore.MAGENTA)
        return f"{color}{operation_id}{Style.RESET_ALL}"
    thread_name = event_dict.get("thread_name") or threading.current_thread().name
    return f"{Style.DIM}{thread_name}{Style.RESET_ALL}"


def _short_logger_name(name: str) -> str:
    return name[len(PACKAGE_PREFIX) :] if name.startswith(PACKAGE_PREFIX) else name


def console_renderer(
    _logger: WrappedLogger, _method_name: str, event_dict: EventDict
) -> str:
    """Render a log event as one colored console line.

    Format: [LEVEL] time | operation | module | message key=value...

    The operation column shows the batch or poll operation ID, colored by
    operation kind, or the thread name when the event belongs to no
    operation. Module names are shown relative to the package. Error
    details are colored red, other context yellow.
    """
    level = event_dict.get("level", "info").upper()
    timestamp = str(event_dict.get("timestamp", ""))
    # ISO timestamps: the console only needs the time of day
    time_of_day = timestamp.partition("T")[2][:12] or timestamp
    logger_name = _short_logger_name(event_dict.get("logger", "root"))
    message = event_dict.get("event", "")

    formatted = (
        f"{LEVEL_COLORS.get(level, Fore.WHITE)}[{level:<8}]{Style.RESET_ALL} "
        f"{time_of_day} | "
        f"{_operation_label(event_dict)} | "
        f"{Fore.BLUE}{logger_name}{Style.RESET_ALL} | "
        f"{message}"
    )

    context = []
    for key, value in event_dict.items():
        if key in CONSOLE_HIDDEN_FIELDS:
            continue
        color = Fore.RED if key in ERROR_FIELDS else Fore.YELLOW
        context.append(f"{color}{key}={value}{Style.RESET_ALL}")
    if context:
        formatted += " " + " ".join(context)

    return formatted
