"""Custom structlog processors for request context and service metadata."""

import os
import threading

from colorama import Fore, Style, init
from structlog.typing import EventDict, WrappedLogger

from engine.logging.context import get_request_id

LEVEL_COLORS = {
    "DEBUG": Fore.CYAN,
    "INFO": Fore.GREEN,
    "WARNING": Fore.YELLOW,
    "ERROR": Fore.RED,
    "CRITICAL": Fore.RED + Style.BRIGHT,
}

# Fields shown in the console prefix or too noisy for interactive output
CONSOLE_HIDDEN_FIELDS = frozenset(
    {
        "level",
        "timestamp",
        "request_id",
        "logger",
        "event",
        "process_id",
        "thread_id",
        "service_name",
        "environment",
    }
)

# Decision-path fields rendered first so a notification's route is readable
CONSOLE_LEADING_FIELDS = ("user_id", "notification_type", "stage", "reason")


def add_request_context(
    _logger: WrappedLogger, _method_name: str, event_dict: EventDict
) -> EventDict:
    """Add the request ID set by RequestIDMiddleware, if any."""
    request_id = get_request_id()
    if request_id:
        event_dict["request_id"] = request_id
    return event_dict


def add_service_context(
    _logger: WrappedLogger, _method_name: str, event_dict: EventDict
) -> EventDict:
    """Add service name and deployment environment."""
    event_dict["service_name"] = os.getenv(
        "SERVICE_NAME", "smart-notification-service"
    )
    event_dict["environment"] = os.getenv("ENVIRONMENT", "development")
    return event_dict


def add_process_info(
    _logger: WrappedLogger, _method_name: str, event_dict: EventDict
) -> EventDict:
    """Add process and thread identifiers.

    Sweeps and request handling share a process, so these distinguish the
    scheduler task's thread pool hops from request threads.
    """
    event_dict["process_id"] = os.getpid()
    event_dict["thread_id"] = threading.get_ident()
    return event_dict


def console_renderer(
    _logger: WrappedLogger, _method_name: str, event_dict: EventDict
) -> str:
    """Render an event as one colored console line.

    Format: [LEVEL] timestamp | request_id | logger_name | event key=value...

    Args:
        _logger: The wrapped logger instance (unused).
        _method_name: The name of the method called on the logger (unused).
        event_dict: The event dictionary to be logged.

    Returns:
        A formatted, colored string for console output.
    """
    init(autoreset=True)

    level = str(event_dict.get("level", "INFO")).upper()
    level_color = LEVEL_COLORS.get(level, Fore.WHITE)

    line = (
        f"{level_color}[{level:<8}]{Style.RESET_ALL} "
        f"{Fore.WHITE}{event_dict.get('timestamp', '')}{Style.RESET_ALL} | "
        f"{Fore.MAGENTA}{event_dict.get('request_id', '-')}{Style.RESET_ALL} | "
        f"{Fore.BLUE}{event_dict.get('logger', 'root')}{Style.RESET_ALL} | "
        f"{event_dict.get('event', '')}"
    )

    leading = [key for key in CONSOLE_LEADING_FIELDS if key in event_dict]
    trailing = [
        key
        for key in event_dict
        if key not in CONSOLE_HIDDEN_FIELDS and key not in CONSOLE_LEADING_FIELDS
    ]
    pairs = [f"{key}={event_dict[key]}" for key in leading + trailing]
    if pairs:
        line += f" {Fore.YELLOW}{' '.join(pairs)}{Style.RESET_ALL}"

    return line
