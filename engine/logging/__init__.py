"""Logging utilities for the smart notification service."""

from engine.logging.config import setup_logging
from engine.logging.context import clear_request_id, get_request_id, set_request_id

__all__ = [
    "clear_request_id",
    "get_request_id",
    "set_request_id",
    "setup_logging",
]
