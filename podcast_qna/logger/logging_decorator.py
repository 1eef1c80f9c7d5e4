"""
Logging setup and function decorators for podcast_qna.

Every module logs under the ``podcast_qna`` namespace. The CLI configures the
namespace root once at startup; child loggers propagate to it. The log file
always receives records; ``--verbose`` adds a rich handler on stderr so
debug output does not interleave with the answers printed on stdout.

Usage:
    from podcast_qna.logger import get_logger, log_function, setup_logging

    setup_logging(log_file="logs/podcast_qna.log", verbose=True)
    logger = get_logger("feed")

    @log_function(logger_name="podcast_qna.chunker", log_args=True)
    def split_lines(text, max_length):
        ...
"""

import functools
import logging
import time
from pathlib import Path
from typing import Any, Callable, Optional

from rich.console import Console
from rich.logging import RichHandler


ROOT_LOGGER_NAME = "podcast_qna"
DEFAULT_LOG_FILE = "logs/podcast_qna.log"
FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Keyword arguments never written to the logs
_SECRET_MARKERS = ("key", "token", "secret", "password")


def setup_logging(
    logger_name: str = ROOT_LOGGER_NAME,
    log_file: str = DEFAULT_LOG_FILE,
    verbose: bool = False,
    level: int = logging.INFO,
) -> logging.Logger:
    """
    Configure a logger with a file handler and, in verbose mode, a console handler.

    Calling it again for an already configured logger is a no-op.

    Args:
        logger_name: Logger to configure (default: "podcast_qna")
        log_file: Log file path; parent directories are created
        verbose: Log DEBUG records, and echo them to stderr
        level: Level when not verbose (default: logging.INFO)

    Returns:
        The configured logger
    """
    logger = logging.getLogger(logger_name)
    if logger.handlers:
        return logger

    effective_level = logging.DEBUG if verbose else level
    logger.setLevel(effective_level)

    log_path = Path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)
    file_handler = logging.FileHandler(log_path, encoding="utf-8")
    file_handler.setLevel(effective_level)
    file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
    logger.addHandler(file_handler)

    if verbose:
        console_handler = RichHandler(
            console=Console(stderr=True), show_path=False, rich_tracebacks=True
        )
        console_handler.setLevel(logging.DEBUG)
        logger.addHandler(console_handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Return a logger nested under the podcast_qna namespace."""
    if name == ROOT_LOGGER_NAME or name.startswith(f"{ROOT_LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def _describe_call(func_name: str, args: tuple, kwargs: dict) -> str:
    parts = [repr(a) for a in args]
    for name, value in kwargs.items():
        if any(marker in name.lower() for marker in _SECRET_MARKERS):
            parts.append(f"{name}=***")
        else:
            parts.append(f"{name}={value!r}")
    return f"Calling {func_name} with args: {', '.join(parts)}"


def log_function(
    logger_name: Optional[str] = None,
    level: int = logging.INFO,
    log_args: bool = False,
    log_result: bool = False,
    log_execution_time: bool = True,
) -> Callable:
    """
    Decorator logging a call's start, completion, duration and failure.

    Failures are logged with their traceback and re-raised unchanged.
    Keyword arguments whose name looks like a credential are masked.

    Args:
        logger_name: Logger name (default: the decorated function's module)
        level: Level of the start and completion records
        log_args: Include the call arguments in the start record
        log_result: Include the return value in the completion record
        log_execution_time: Include the duration in the completion record

    Example:
        @log_function(logger_name="podcast_qna.feed", log_execution_time=True)
        def fetch_catalog(feed_url=None):
            ...
    """

    def decorator(func: Callable) -> Callable:
        logger = get_logger(logger_name or func.__module__)
        func_name = func.__name__

        @functools.wraps(func)
        def wrapper(*args, **kwargs) -> Any:
            if log_args and (args or kwargs):
                logger.log(level, _describe_call(func_name, args, kwargs))
            else:
                logger.log(level, f"Calling {func_name}")

            started = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                logger.error(
                    f"Exception in {func_name} after {time.perf_counter() - started:.2f}s: "
                    f"{type(e).__name__}: {e}",
                    exc_info=True,
                )
                raise

            message = f"Completed {func_name}"
            if log_execution_time:
                message += f" in {time.perf_counter() - started:.2f}s"
            if log_result:
                message += f" with result: {result!r}"
            logger.log(level, message)
            return result

        return wrapper

    return decorator
