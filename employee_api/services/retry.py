"""
RetryPolicy - Decides whether a failed upstream call is attempted again.

Only transient failures (connection errors, timeouts, transient I/O) are
retried. Application-level errors, decode errors and circuit rejections
propagate on the first attempt.
"""

import random
from dataclasses import dataclass, field
from datetime import timedelta

from employee_api.services.errors import TransientNetworkError


@dataclass(frozen=True)
class RetryPolicy:
    """Fixed-delay retry policy with optional jitter."""

    max_attempts: int = 3  # 1 initial attempt + 2 retries
    delay: timedelta = field(default=timedelta(milliseconds=200))
    jitter: timedelta = field(default=timedelta(0))

    @classmethod
    def none(cls) -> "RetryPolicy":
        """Policy that never retries."""
        return cls(max_attempts=1, delay=timedelta(0))

    def should_retry(self, error: BaseException, attempt_number: int) -> bool:
        """
        Check whether another attempt should follow a failure.

        Args:
            error: Exception raised by the attempt
            attempt_number: 1-based number of the attempt that failed

        Returns:
            True if the error is transient and attempts remain
        """
        if attempt_number >= self.max_attempts:
            return False
        return isinstance(error, TransientNetworkError)

    def delay_before(self, attempt_number: int) -> float:
        """Seconds to wait before the given 1-based attempt."""
        if attempt_number <= 1:
            return 0.0
        seconds = self.delay.total_seconds()
        jitter = self.jitter.total_seconds()
        if jitter > 0:
            seconds += random.uniform(0, jitter)
        return seconds
