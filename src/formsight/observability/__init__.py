"""Observability module for formsight."""

from formsight.observability.logging import close_file_logging, configure_logging, get_logger

__all__ = [
    "close_file_logging",
    "configure_logging",
    "get_logger",
]
