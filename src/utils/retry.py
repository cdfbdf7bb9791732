"""
Retry utilities for handling rate limits and transient errors.
"""

import asyncio
import logging
import re
from collections.abc import Awaitable, Callable
from typing import Any

logger = logging.getLogger(__name__)


_TRANSIENT_MARKERS: tuple[str, ...] = (
    "rate limit",
    "rate_limit",
    "overloaded",
    "timeout",
    "timed out",
    "connection reset",
    "connection error",
    "temporarily unavailable",
    "service unavailable",
)


def is_transient_error(exception: BaseException) -> bool:
    """Check if an exception looks transient and is worth retrying.

    Timeouts and connection errors are always transient. Anything else is
    matched against known provider error messages (rate limits, overload).
    """
    if isinstance(exception, (TimeoutError, asyncio.TimeoutError, ConnectionError)):
        return True
    error_str = str(exception).lower()
    return any(marker in error_str for marker in _TRANSIENT_MARKERS)


async def run_with_retry(
    func: Callable[[], Awaitable[Any]],
    max_retries: int = 3,
    initial_delay: float = 5.0,
    backoff_factor: float = 2.0,
    retry_if: Callable[[BaseException], bool] = is_transient_error,
    max_delay: float | None = None,
    label: str = "",
) -> Any:
    """
    Execute an async function with bounded retry logic for transient errors.

    Args:
        func: Async function to execute (no parameters)
        max_retries: Maximum number of attempts, including the first one
        initial_delay: Initial delay in seconds before first retry
        backoff_factor: Multiplier for delay between retries
        retry_if: Predicate deciding whether an exception is retryable
        max_delay: Upper bound on any single wait, including server hints
        label: Name used in log messages

    Returns:
        Result from the function

    Raises:
        Exception: If max retries exceeded or non-retryable error occurs
    """
    last_exception: BaseException | None = None

    for attempt in range(max_retries):
        try:
            return await func()
        except Exception as e:
            last_exception = e

            if retry_if(e) and attempt < max_retries - 1:
                wait_time_match = re.search(r"(\d+)\s{0,10}seconds?", str(e), re.IGNORECASE)
                if wait_time_match:
                    wait_time = float(wait_time_match.group(1))
                else:
                    wait_time = initial_delay * (backoff_factor**attempt)
                if max_delay is not None:
                    wait_time = min(wait_time, max_delay)

                logger.warning(
                    "%sTransient error detected (%s). Attempt %s/%s. Waiting %.1f seconds before retry...",
                    f"[{label}] " if label else "",
                    e or type(e).__name__,
                    attempt + 1,
                    max_retries,
                    wait_time,
                )
                await asyncio.sleep(wait_time)
                continue

            raise

    if last_exception:
        raise last_exception
    raise RuntimeError("run_with_retry called with max_retries < 1")
