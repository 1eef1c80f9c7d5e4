"""Logging utilities for the podcast_qna project."""

from .logging_decorator import (
    DEFAULT_LOG_FILE,
    ROOT_LOGGER_NAME,
    get_logger,
    log_function,
    setup_logging,
)

__all__ = [
    "DEFAULT_LOG_FILE",
    "ROOT_LOGGER_NAME",
    "get_logger",
    "log_function",
    "setup_logging",
]
