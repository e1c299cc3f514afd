"""
Delay policies applied between model fallback attempts.
"""

import random
from abc import ABC, abstractmethod
import logging

logger = logging.getLogger(__name__)


class DelayPolicy(ABC):
    """Decides how long to wait before trying the next model."""

    @abstractmethod
    def delay(self, attempt: int) -> float:
        """
        Seconds to wait after a failed attempt.

        Args:
            attempt: Zero-based number of the attempt that just failed
        """
        pass


class FixedDelay(DelayPolicy):
    """The same pause before every fallback."""

    def __init__(self, seconds: float = 2.0):
        if seconds < 0:
            raise ValueError("delay must be non-negative")
        self.seconds = seconds

    def delay(self, attempt: int) -> float:
        return self.seconds

    def __repr__(self) -> str:
        return f"FixedDelay({self.seconds})"


class ExponentialBackoff(DelayPolicy):
    """
    Exponential backoff with optional jitter, for gateways that stay
    rate limited across several models.
    """

    def __init__(
        self,
        base_delay: float = 1.0,
        max_delay: float = 60.0,
        exponential_base: float = 2.0,
        jitter: bool = True
    ):
        self.base_delay = base_delay
        self.max_delay = max_delay
        self.exponential_base = exponential_base
        self.jitter = jitter

    def delay(self, attempt: int) -> float:
        """Calculate delay with exponential backoff and optional jitter."""
        delay = min(
            self.base_delay * (self.exponential_base ** attempt),
            self.max_delay
        )

        if self.jitter:
            # ±25% of delay
            jitter_range = delay * 0.25
            delay += random.uniform(-jitter_range, jitter_range)

        return max(0, delay)

    def __repr__(self) -> str:
        return (
            f"ExponentialBackoff(base_delay={self.base_delay}, max_delay={self.max_delay}, "
            f"exponential_base={self.exponential_base}, jitter={self.jitter})"
        )
