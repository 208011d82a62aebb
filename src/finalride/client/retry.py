"""Retry logic with exponential backoff for gateway calls.

This module provides:
- retry_with_backoff: Exponential backoff retry around a callable
- is_transient: Which gateway failures are worth retrying
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import Any

import httpx

from finalride.client.api import APIError, NotFoundError

logger = logging.getLogger(__name__)

# Default retry configuration
DEFAULT_MAX_RETRIES = 3
DEFAULT_INITIAL_BACKOFF = 1.0  # seconds
DEFAULT_MAX_BACKOFF = 30.0  # seconds
DEFAULT_BACKOFF_MULTIPLIER = 2.0

# Failures that may succeed on a second attempt
RETRYABLE_EXCEPTIONS: tuple[type[Exception], ...] = (
    httpx.TransportError,
    APIError,
)


def is_transient(error: Exception) -> bool:
    """Return True for network errors and 5xx/unknown gateway errors."""
    if isinstance(error, NotFoundError):
        return False
    if isinstance(error, APIError):
        return error.status_code is None or error.status_code >= 500
    return isinstance(error, httpx.TransportError)


def retry_with_backoff(
    func: Callable[[], Any],
    max_retries: int = DEFAULT_MAX_RETRIES,
    initial_backoff: float = DEFAULT_INITIAL_BACKOFF,
    max_backoff: float = DEFAULT_MAX_BACKOFF,
    backoff_multiplier: float = DEFAULT_BACKOFF_MULTIPLIER,
    retryable_exceptions: tuple[type[Exception], ...] = RETRYABLE_EXCEPTIONS,
    should_retry: Callable[[Exception], bool] = is_transient,
    description: str = "operation",
) -> Any:
    """Execute a function with exponential backoff retry.

    Args:
        func: Function to execute.
        max_retries: Maximum number of retry attempts.
        initial_backoff: Initial backoff time in seconds.
        max_backoff: Maximum backoff time in seconds.
        backoff_multiplier: Multiplier for each retry.
        retryable_exceptions: Tuple of exception types to retry on.
        should_retry: Further filter on caught exceptions.
        description: What is being attempted, for log messages.

    Returns:
        Result of the function.

    Raises:
        The last exception if all retries fail, or the first non-retryable one.
    """
    backoff = initial_backoff

    for attempt in range(max_retries + 1):
        try:
            return func()
        except retryable_exceptions as e:
            if not should_retry(e):
                raise
            if attempt == max_retries:
                logger.error(f"{description}: all {max_retries} retries failed: {e}")
                raise

            logger.warning(
                f"{description}: attempt {attempt + 1}/{max_retries + 1} failed: {e}. "
                f"Retrying in {backoff:.1f}s..."
            )
            time.sleep(backoff)
            backoff = min(backoff * backoff_multiplier, max_backoff)

    raise RuntimeError("Unexpected retry loop exit")
