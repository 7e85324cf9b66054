"""Guarded execution of model API calls.

Every call to the model service goes through :func:`with_retry`, which applies
a per-event-loop concurrency limit, an optional timeout and consistent error
logging. Model calls are expensive, so the default is a single attempt; a
caller may opt in to retrying transient transport errors.
"""

import asyncio
from collections.abc import Callable
from typing import Any

from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from pdf2deck_core.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_MAX_ATTEMPTS = 1
DEFAULT_MIN_WAIT = 1  # seconds
DEFAULT_MAX_WAIT = 30  # seconds
DEFAULT_MAX_CONCURRENT_CALLS = 4

# Semaphores are bound to the loop that created them
_loop_semaphores: dict[int, asyncio.Semaphore] = {}


def get_api_semaphore(
    max_concurrent: int = DEFAULT_MAX_CONCURRENT_CALLS,
) -> asyncio.Semaphore:
    """Get or create the API semaphore for the running event loop."""
    loop_id = id(asyncio.get_running_loop())
    if loop_id not in _loop_semaphores:
        _loop_semaphores[loop_id] = asyncio.Semaphore(max_concurrent)
        logger.debug(
            f"Initialized API limiter for loop {loop_id}: max {max_concurrent} concurrent calls"
        )
    return _loop_semaphores[loop_id]


class RateLimitError(Exception):
    """Raised when API rate limit is exceeded."""

    def __init__(
        self, message: str = "Rate limit exceeded", retry_after: float | None = None
    ):
        super().__init__(message)
        self.retry_after = retry_after


# Exceptions worth another attempt when retries are enabled
RETRYABLE_EXCEPTIONS = (
    ConnectionError,
    TimeoutError,
    asyncio.TimeoutError,
    RateLimitError,
)


def get_async_retry(
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    min_wait: float = DEFAULT_MIN_WAIT,
    max_wait: float = DEFAULT_MAX_WAIT,
) -> AsyncRetrying:
    """Create the tenacity controller used by :func:`with_retry`."""
    return AsyncRetrying(
        stop=stop_after_attempt(max(1, max_attempts)),
        wait=wait_exponential(multiplier=1, min=min_wait, max=max_wait),
        retry=retry_if_exception_type(RETRYABLE_EXCEPTIONS),
        reraise=True,
    )


def format_exception(e: BaseException) -> str:
    """Render an exception for logs and user-facing messages."""
    msg = str(e).strip() or type(e).__name__

    cause = e.__cause__
    if cause is not None:
        cause_msg = str(cause).strip()
        if cause_msg and cause_msg not in msg:
            msg = f"{msg} (caused by: {cause_msg})"

    status_code = getattr(e, "status_code", None) or getattr(e, "code", None)
    if isinstance(status_code, int):
        msg = f"HTTP {status_code}: {msg}"

    return msg


async def with_retry(
    func: Callable[..., Any],
    *args: Any,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    timeout: float | None = None,
    operation_name: str = "operation",
    use_rate_limit: bool = True,
    **kwargs: Any,
) -> Any:
    """Execute an async function under the limiter, timeout and retry policy.

    Args:
        func: Async function to execute
        *args: Positional arguments for the function
        max_attempts: Total attempts; 1 disables retrying
        timeout: Per-attempt timeout in seconds
        operation_name: Name for logging purposes
        use_rate_limit: Whether to hold the per-loop API semaphore
        **kwargs: Keyword arguments for the function

    Returns:
        Result of the function

    Raises:
        The last exception raised by ``func``
    """
    semaphore = get_api_semaphore() if use_rate_limit else None
    attempt = 0

    async def _execute() -> Any:
        call = func(*args, **kwargs)
        if timeout is not None:
            call = asyncio.wait_for(call, timeout=timeout)
        if semaphore:
            async with semaphore:
                return await call
        return await call

    async for attempt_ctx in get_async_retry(max_attempts=max_attempts):
        with attempt_ctx:
            attempt += 1
            if attempt > 1:
                logger.info(
                    f"Retrying {operation_name} (attempt {attempt}/{max_attempts})"
                )
            try:
                return await _execute()
            except RETRYABLE_EXCEPTIONS as e:
                logger.warning(
                    f"{operation_name} failed (attempt {attempt}/{max_attempts}): "
                    f"{format_exception(e)}"
                )
                raise
            except Exception as e:
                logger.error(
                    f"{operation_name} failed with non-retryable error: {format_exception(e)}"
                )
                raise

    raise RuntimeError(f"{operation_name} failed after {max_attempts} attempts")
