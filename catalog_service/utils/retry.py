"""Retry and backoff utilities for resilient calls to external stores.

Async-only: every caller in this service awaits network I/O (Redis).
"""

from __future__ import annotations

import asyncio
import logging
import random
from collections.abc import Awaitable, Callable
from functools import wraps
from typing import Any, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


def calculate_delay(
    attempt: int,
    *,
    initial_delay: float,
    max_delay: float,
    exponential_base: float,
    jitter: bool,
) -> float:
    """Calculate the backoff delay for a 0-indexed attempt number."""
    delay = min(initial_delay * (exponential_base**attempt), max_delay)
    if jitter:
        # Random between 50-150% of delay
        delay = delay * (0.5 + random.random())
    return delay


def retry(
    max_attempts: int = 3,
    initial_delay: float = 1.0,
    max_delay: float = 60.0,
    exponential_base: float = 2.0,
    jitter: bool = True,
    exceptions: tuple[type[Exception], ...] = (Exception,),
) -> Callable[[Callable[..., Awaitable[T]]], Callable[..., Awaitable[T]]]:
    """Decorator for retrying async functions with exponential backoff.

    Once attempts are exhausted the last exception is re-raised unchanged,
    so callers handle the same error types with or without retries.

    Args:
        max_attempts: Maximum number of attempts (including the first call).
        initial_delay: Initial delay in seconds before first retry.
        max_delay: Maximum delay in seconds between retries.
        exponential_base: Base for exponential backoff calculation.
        jitter: Whether to add random jitter to delays.
        exceptions: Tuple of exception types to retry on.

    Example:
        ```python
        @retry(max_attempts=3, exceptions=(ConnectionError,))
        async def get(self, key: str) -> Any:
            return await self._client.get(key)
        ```
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be >= 1")

    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        @wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> T:
            for attempt in range(max_attempts):
                try:
                    return await func(*args, **kwargs)
                except exceptions as e:
                    if attempt >= max_attempts - 1:
                        logger.error(
                            f"All retry attempts exhausted for {func.__name__}",
                            extra={
                                "function": func.__name__,
                                "attempts": max_attempts,
                                "last_exception": str(e),
                            },
                        )
                        raise

                    delay = calculate_delay(
                        attempt,
                        initial_delay=initial_delay,
                        max_delay=max_delay,
                        exponential_base=exponential_base,
                        jitter=jitter,
                    )
                    logger.warning(
                        f"Retrying {func.__name__} after {delay:.2f}s "
                        f"(attempt {attempt + 1}/{max_attempts})",
                        extra={
                            "function": func.__name__,
                            "attempt": attempt + 1,
                            "max_attempts": max_attempts,
                            "delay": delay,
                            "exception": str(e),
                        },
                    )

                    await asyncio.sleep(delay)

            raise RuntimeError("Retry logic error: no attempt was made")

        return wrapper

    return decorator
