"""
RETRY UTILITY
=============

Calls a function and, if it raises a retryable error, retries a few times with
exponential backoff. Used by the inference client so a model that is still
loading (or a slow request) doesn't immediately fail the chat message.

Example:
  reply = with_retry(lambda: service.make_request(text), max_retries=5, initial_delay=1.0)
"""

import logging
import time
from typing import Callable, Optional, TypeVar


logger = logging.getLogger("chat-relay")

# Type variable: with_retry returns whatever the callable returns.
T = TypeVar("T")


class RetriesExhausted(Exception):
    """Every attempt failed with a retryable error. last_exception is the final one."""

    def __init__(self, attempts: int, last_exception: Exception):
        super().__init__(f"{attempts} attempts failed; last error: {last_exception}")
        self.attempts = attempts
        self.last_exception = last_exception


def _always(exc: Exception) -> bool:
    return True


def with_retry(
    fn: Callable[[], T],
    max_retries: int = 3,
    initial_delay: float = 1.0,
    is_retryable: Optional[Callable[[Exception], bool]] = None,
) -> T:
    """
    Execute fn(). If it raises a retryable exception, wait initial_delay seconds and
    try again; delay doubles each retry (attempt N waits initial_delay * 2**N).

    A non-retryable exception is re-raised immediately. If all max_retries attempts
    fail with retryable exceptions, raise RetriesExhausted. No wait happens after
    the last attempt.
    """
    is_retryable = is_retryable or _always
    last_exception = None

    for attempt in range(max_retries):
        try:
            return fn()
        except Exception as e:
            last_exception = e
            logger.warning("Attempt %s/%s failed: %s", attempt + 1, max_retries, e)
            if not is_retryable(e):
                raise
            if attempt == max_retries - 1:
                break
            delay = initial_delay * (2 ** attempt)  # 1s, 2s, 4s, 8s, ...
            logger.info("Waiting %.1fs before next attempt...", delay)
            time.sleep(delay)

    raise RetriesExhausted(max_retries, last_exception)
