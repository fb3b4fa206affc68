"""Retry configuration for samhook.

Immutable policies describing how many times to retry and how long to wait.
"""

import random
from dataclasses import dataclass
from typing import Optional

from samhook.config import Config

DEFAULT_JITTER_FACTOR = 0.1  # ±10% jitter


@dataclass(frozen=True)
class BackoffPolicy:
    """Exponential backoff with optional jitter.

    interval(n) = initial_interval * multiplier ** n, capped at max_interval.
    With jitter enabled the capped value is perturbed by up to ±jitter_factor.
    """

    initial_interval: float = 1.0  # seconds
    max_interval: float = 30.0  # seconds
    multiplier: float = 2.0
    jitter: bool = True
    jitter_factor: float = DEFAULT_JITTER_FACTOR

    def __post_init__(self):
        if self.initial_interval <= 0 or self.max_interval <= 0:
            raise ValueError("backoff intervals must be positive")
        if self.initial_interval > self.max_interval:
            raise ValueError("initial_interval must not exceed max_interval")
        if self.multiplier < 1.0:
            raise ValueError("multiplier must be >= 1.0")
        if not 0.0 <= self.jitter_factor < 1.0:
            raise ValueError("jitter_factor must be in [0, 1)")

    def next_interval(self, attempt: int, rng: Optional[random.Random] = None) -> float:
        """Compute the wait before the retry following ``attempt``.

        Args:
            attempt: Zero-based count of attempts already made
            rng: Optional Random instance for deterministic testing

        Returns:
            Delay in seconds, never negative
        """
        try:
            interval = self.initial_interval * (self.multiplier ** attempt)
        except OverflowError:
            interval = self.max_interval
        interval = min(interval, self.max_interval)

        if self.jitter and self.jitter_factor > 0:
            rng = rng or random
            interval += interval * rng.uniform(-self.jitter_factor, self.jitter_factor)

        return max(0.0, interval)


@dataclass(frozen=True)
class RetryPolicy:
    """Configuration for retry behavior.

    ``max_retries`` counts retries, so a send is attempted at most
    ``max_retries + 1`` times. When ``backoff`` is set it replaces the fixed
    ``interval`` for every wait.
    """

    max_retries: int = 3
    interval: float = 1.0  # seconds
    backoff: Optional[BackoffPolicy] = None

    def __post_init__(self):
        if self.max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        if self.interval < 0:
            raise ValueError("interval must be >= 0")

    def delay_for(self, attempt: int, rng: Optional[random.Random] = None) -> float:
        """Wait before the retry following ``attempt`` (zero-based)."""
        if self.backoff is not None:
            return self.backoff.next_interval(attempt, rng=rng)
        return self.interval

    @classmethod
    def from_env(cls) -> "RetryPolicy":
        """Default policy with the retry count taken from SAMHOOK_MAX_RETRIES."""
        return cls(max_retries=Config.max_retries(), interval=1.0, backoff=BackoffPolicy())


DEFAULT_RETRY_POLICY = RetryPolicy(max_retries=3, interval=1.0, backoff=BackoffPolicy())
