"""Structlog configuration for dual output: JSON files and colored console."""

import logging
import logging.handlers
import os
from pathlib import Path

import structlog

from engine.logging.processors import (
    add_process_info,
    add_request_context,
    add_service_context,
    console_renderer,
)

DEFAULT_LOG_FILE = "./logs/smart-notification-service.log"
MAX_LOG_FILE_BYTES = 50 * 1024 * 1024
LOG_BACKUP_COUNT = 20


def _shared_processors() -> list:
    return [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        add_request_context,
        add_service_context,
        add_process_info,
    ]


def setup_logging(
    log_level: str | None = None,
    log_file_path: str | None = None,
) -> None:
    """Configure structlog with JSON file logs and colored console logs.

    The file handler receives every field as JSON so engine decisions
    (priority factors, delivery reason, rate-limit outcome) can be replayed.
    The console handler prints a compact colored line.

    Args:
        log_level: Level name; defaults to the LOG_LEVEL env var, then INFO.
        log_file_path: Log file; defaults to the LOG_FILE_PATH env var.
    """
    level_name = (log_level or os.getenv("LOG_LEVEL", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)
    log_file_path = log_file_path or os.getenv("LOG_FILE_PATH", DEFAULT_LOG_FILE)

    Path(log_file_path).parent.mkdir(parents=True, exist_ok=True)

    file_handler = logging.handlers.RotatingFileHandler(
        filename=log_file_path,
        maxBytes=MAX_LOG_FILE_BYTES,
        backupCount=LOG_BACKUP_COUNT,
        encoding="utf-8",
    )
    file_handler.setLevel(level)
    file_handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=structlog.processors.JSONRenderer(default=str),
            foreign_pre_chain=_shared_processors(),
        )
    )

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=console_renderer,
            foreign_pre_chain=_shared_processors(),
        )
    )

    structlog.configure(
        processors=[
            *_shared_processors(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(level)
    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)

    structlog.get_logger(__name__).info(
        "logging_configured",
        log_file=log_file_path,
        log_level=level_name,
    )
