"""
Retry Policy
============
Attempt count, delay and failure transform for the retry executor.
"""

import os
from dataclasses import dataclass
from typing import Callable, Optional

from tenacity import wait_exponential, wait_fixed
from tenacity.wait import wait_base

FailureTransform = Callable[[Exception], Exception]

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class RetryPolicy:
    """Configuration for a single executor call."""
    max_retries: int = 0                 # Attempts after the first one
    base_delay: float = 0.0              # Seconds to wait after a failed attempt
    use_exponential_backoff: bool = False
    failure_transform: Optional[FailureTransform] = None

    def __post_init__(self):
        if self.base_delay < 0:
            raise ValueError(f"base_delay must be >= 0, got {self.base_delay}")

    @property
    def max_attempts(self) -> int:
        """Total attempts, never fewer than one."""
        return max(self.max_retries, 0) + 1

    def delay_for(self, attempt: int) -> float:
        """Seconds to wait after failed attempt number ``attempt`` (1-based)."""
        if self.use_exponential_backoff:
            return self.base_delay * (2 ** (attempt - 1))
        return self.base_delay

    def wait_strategy(self) -> wait_base:
        """The same delays as a tenacity wait strategy."""
        if self.use_exponential_backoff:
            return wait_exponential(multiplier=self.base_delay, exp_base=2)
        return wait_fixed(self.base_delay)

    @classmethod
    def from_env(cls, prefix: str = "CATCHY_") -> "RetryPolicy":
        """
        Build a policy from environment variables.

        Reads ``{prefix}MAX_RETRIES``, ``{prefix}BASE_DELAY`` and
        ``{prefix}EXPONENTIAL_BACKOFF``. Unset variables keep the defaults.

        Raises:
            ValueError: If a variable is set to something unparsable
        """
        max_retries = os.getenv(f"{prefix}MAX_RETRIES")
        base_delay = os.getenv(f"{prefix}BASE_DELAY")
        backoff = os.getenv(f"{prefix}EXPONENTIAL_BACKOFF")

        return cls(
            max_retries=int(max_retries) if max_retries else 0,
            base_delay=float(base_delay) if base_delay else 0.0,
            use_exponential_backoff=(
                backoff.strip().lower() in _TRUTHY if backoff else False
            ),
        )
