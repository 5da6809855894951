"""
Retry policy for upstream calls.

A fixed retry budget and a pure exponential schedule with no jitter and
no ceiling: the delay before retry ``k`` (1-based) is always
``base_delay * exponential_base ** k``.
"""

import asyncio
from typing import Awaitable, Callable, Iterator


Sleep = Callable[[float], Awaitable[None]]


class RetryConfig:
    """Configuration for retry behavior."""

    def __init__(self,
                 max_retries: int = 3,
                 base_delay: float = 1.0,
                 exponential_base: float = 2.0,
                 sleep: Sleep = asyncio.sleep):
        if max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        self.max_retries = max_retries
        self.base_delay = base_delay
        self.exponential_base = exponential_base
        self.sleep = sleep

    @property
    def max_attempts(self) -> int:
        """Total attempts allowed, counting the first one."""
        return self.max_retries + 1

    def should_retry(self, attempt: int) -> bool:
        """Whether a retryable failure on 0-based ``attempt`` may be retried."""
        return attempt < self.max_retries

    def delays(self) -> Iterator[float]:
        """Every delay the policy can schedule, in order."""
        for retry in range(1, self.max_retries + 1):
            yield calculate_delay(retry, self)


def calculate_delay(retry: int, config: RetryConfig) -> float:
    """Delay before the ``retry``-th retry (1-based)."""
    return config.base_delay * (config.exponential_base ** retry)
