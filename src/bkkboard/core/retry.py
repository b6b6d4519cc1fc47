"""Async retry decorator with jittered exponential backoff.

Used around transit API calls; the poller's own cadence covers anything
that still fails after the last attempt.
"""

import asyncio
import functools
import logging
import random
from dataclasses import dataclass, field
from typing import Awaitable, Callable, ParamSpec, TypeVar

from .errors import NetworkError, RateLimitError

P = ParamSpec("P")
R = TypeVar("R")

logger = logging.getLogger(__name__)


@dataclass
class RetryConfig:
    """Configuration for retry behavior.

    Attributes:
        max_attempts: Maximum number of attempts (including the first)
        base_delay: Delay in seconds before the first retry
        max_delay: Upper bound for any single delay
        exponential_base: Growth factor between attempts
        jitter: Scale each delay by a random factor in [0.5, 1.0)
        retryable_exceptions: Exception types that trigger a retry
    """

    max_attempts: int = 3
    base_delay: float = 1.0
    max_delay: float = 30.0
    exponential_base: float = 2.0
    jitter: bool = True
    retryable_exceptions: tuple[type[Exception], ...] = field(
        default_factory=lambda: (NetworkError, ConnectionError, TimeoutError)
    )

    def calculate_delay(self, attempt: int) -> float:
        """Delay before retrying after the 0-indexed ``attempt``."""
        delay = min(self.base_delay * (self.exponential_base**attempt), self.max_delay)
        if self.jitter:
            delay *= 0.5 + random.random() * 0.5
        return delay


def _delay_for(config: RetryConfig, attempt: int, error: Exception) -> float:
    if isinstance(error, RateLimitError) and error.retry_after:
        return float(error.retry_after)
    return config.calculate_delay(attempt)


def async_retry(
    config: RetryConfig | None = None,
) -> Callable[[Callable[P, Awaitable[R]]], Callable[P, Awaitable[R]]]:
    """Decorator for async retry with exponential backoff.

    Usage:
        @async_retry()
        async def fetch():
            ...
    """
    config = config or RetryConfig()
    retry_on = (RateLimitError, *config.retryable_exceptions)

    def decorator(func: Callable[P, Awaitable[R]]) -> Callable[P, Awaitable[R]]:
        @functools.wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            for attempt in range(config.max_attempts):
                try:
                    return await func(*args, **kwargs)
                except retry_on as e:
                    if attempt == config.max_attempts - 1:
                        logger.error(
                            "All %d async attempts failed for %s: %s",
                            config.max_attempts,
                            func.__name__,
                            e,
                        )
                        raise
                    delay = _delay_for(config, attempt, e)
                    logger.warning(
                        "Async retry %d/%d for %s after %.1fs: %s",
                        attempt + 1,
                        config.max_attempts,
                        func.__name__,
                        delay,
                        e,
                        extra={"error_type": type(e).__name__},
                    )
                    await asyncio.sleep(delay)
            raise RuntimeError("async_retry() configured with max_attempts < 1")

        return wrapper

    return decorator
