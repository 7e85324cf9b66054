"""Logging utilities."""

import asyncio
import logging
import os
import sys
import time
from collections.abc import Iterator
from contextlib import contextmanager
from functools import wraps
from typing import Any, Callable, TypeVar

PACKAGE_LOGGER = "pdf2deck_core"

# Level for package loggers, overridable through the environment
_LOG_LEVEL = os.environ.get("PDF2DECK_LOG_LEVEL", "INFO").upper()
_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

F = TypeVar("F", bound=Callable[..., Any])


def _resolve_level(level: int | str) -> int:
    if isinstance(level, int):
        return level
    return getattr(logging, str(level).upper(), logging.INFO)


def get_logger(name: str, level: int | str | None = None) -> logging.Logger:
    """Get a logger writing to stdout with the package format.

    Args:
        name: Logger name (typically __name__)
        level: Optional log level override (name or number)

    Returns:
        Configured logger
    """
    logger = logging.getLogger(name)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(_LOG_FORMAT))
        logger.addHandler(handler)

    if level is not None:
        logger.setLevel(_resolve_level(level))
    elif logger.level == logging.NOTSET:
        logger.setLevel(_resolve_level(_LOG_LEVEL))

    return logger


def set_log_level(level: int | str) -> None:
    """Apply a log level to every logger already created for the package."""
    resolved = _resolve_level(level)
    for name, logger in logging.Logger.manager.loggerDict.items():
        if isinstance(logger, logging.Logger) and (
            name == PACKAGE_LOGGER or name.startswith(f"{PACKAGE_LOGGER}.")
        ):
            logger.setLevel(resolved)


@contextmanager
def log_stage(logger: logging.Logger, stage: str) -> Iterator[None]:
    """Log the start, duration and failure of a pipeline stage."""
    logger.info(f"Stage '{stage}' started")
    started = time.perf_counter()
    try:
        yield
    except Exception as e:
        elapsed = time.perf_counter() - started
        logger.error(f"Stage '{stage}' failed after {elapsed:.2f}s: {e}")
        raise
    elapsed = time.perf_counter() - started
    logger.info(f"Stage '{stage}' finished in {elapsed:.2f}s")


def log_exceptions(logger: logging.Logger) -> Callable[[F], F]:
    """Decorator that logs an exception with traceback before re-raising it.

    Works for both plain and coroutine functions.
    """

    def decorator(func: F) -> F:
        if asyncio.iscoroutinefunction(func):

            @wraps(func)
            async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
                try:
                    return await func(*args, **kwargs)
                except Exception as e:
                    logger.exception(f"Exception in {func.__name__}: {e}")
                    raise

            return async_wrapper  # type: ignore

        @wraps(func)
        def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                return func(*args, **kwargs)
            except Exception as e:
                logger.exception(f"Exception in {func.__name__}: {e}")
                raise

        return sync_wrapper  # type: ignore

    return decorator
