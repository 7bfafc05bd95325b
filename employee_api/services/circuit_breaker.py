"""
CircuitBreaker - Stops calling a failing upstream for a cool-down period.

States:
- CLOSED: Normal operation, calls pass through and are recorded in a sliding window
- OPEN: Upstream is failing, calls are rejected immediately
- HALF_OPEN: A single trial call is allowed to test recovery

Transitions:
- CLOSED → OPEN: Window holds at least minimum_calls results and failure rate >= threshold
- OPEN → HALF_OPEN: After open_timeout expires
- HALF_OPEN → CLOSED: Trial call succeeded (window is cleared)
- HALF_OPEN → OPEN: Trial call failed (cool-down restarts)
"""

import threading
import time
from collections import deque
from dataclasses import dataclass
from datetime import timedelta
from enum import Enum
from typing import Any, Callable

from loguru import logger


class CircuitState(str, Enum):
    """Circuit breaker states."""

    CLOSED = "CLOSED"  # Normal operation
    OPEN = "OPEN"  # Blocking calls
    HALF_OPEN = "HALF_OPEN"  # Probing recovery


@dataclass
class CircuitBreakerConfig:
    """Configuration for circuit breaker."""

    sliding_window_size: int = 10  # Results kept in the window
    minimum_calls: int = 10  # Results needed before the rate is evaluated
    failure_rate_threshold: float = 50.0  # Percent
    open_timeout: timedelta = timedelta(seconds=60)  # Time before half-open
    half_open_max_calls: int = 1  # Trial calls allowed in half-open state


class CircuitBreaker:
    """
    Sliding-window circuit breaker for a single upstream.

    Usage:
        cb = CircuitBreaker("employee_api")

        if not cb.permit():
            raise CircuitOpenError(...)

        try:
            result = await make_request()
            cb.record_success()
            return result
        except Exception:
            cb.record_failure()
            raise

    All state is guarded by one lock, so a breaker can be shared by
    concurrent callers.
    """

    def __init__(
        self,
        service_id: str,
        config: CircuitBreakerConfig | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.service_id = service_id
        self.config = config or CircuitBreakerConfig()
        self._clock = clock

        self._state = CircuitState.CLOSED
        self._window: deque[bool] = deque(maxlen=self.config.sliding_window_size)
        self._opened_at: float | None = None
        self._half_open_calls = 0
        self._lock = threading.Lock()

    @property
    def state(self) -> CircuitState:
        """Get current state, checking for automatic transitions."""
        with self._lock:
            return self._current_state()

    @property
    def failure_rate(self) -> float:
        """Failure rate of the current window, in percent."""
        with self._lock:
            return self._failure_rate()

    def permit(self) -> bool:
        """Check if a call is allowed."""
        with self._lock:
            current_state = self._current_state()

            if current_state == CircuitState.CLOSED:
                return True

            if current_state == CircuitState.HALF_OPEN:
                if self._half_open_calls < self.config.half_open_max_calls:
                    self._half_open_calls += 1
                    return True
                return False

            return False

    def record_success(self) -> None:
        """Record a successful call."""
        with self._lock:
            current_state = self._current_state()
            if current_state == CircuitState.HALF_OPEN:
                self._close()
            elif current_state == CircuitState.CLOSED:
                self._record(True)

    def record_failure(self) -> None:
        """Record a failed call."""
        with self._lock:
            current_state = self._current_state()
            if current_state == CircuitState.HALF_OPEN:
                # Any failure in half-open reopens the circuit
                self._open()
            elif current_state == CircuitState.CLOSED:
                self._record(False)

    def release(self) -> None:
        """Return a half-open trial slot whose call ended without an outcome."""
        with self._lock:
            if self._state == CircuitState.HALF_OPEN and self._half_open_calls > 0:
                self._half_open_calls -= 1

    def reset(self) -> None:
        """Manually reset the circuit breaker."""
        with self._lock:
            self._close()
        logger.info(f"Circuit breaker '{self.service_id}' manually reset")

    def get_time_until_reset(self) -> float | None:
        """Get seconds until circuit transitions to half-open."""
        with self._lock:
            return self._time_until_reset()

    def get_status(self) -> dict[str, Any]:
        """Get current status as dictionary."""
        with self._lock:
            state = self._current_state()
            return {
                "service_id": self.service_id,
                "state": state.value,
                "buffered_calls": len(self._window),
                "failed_calls": self._window.count(False),
                "failure_rate": self._failure_rate(),
                "time_until_reset": self._time_until_reset(),
            }

    # Lock must be held by the caller of the helpers below

    def _current_state(self) -> CircuitState:
        if self._state == CircuitState.OPEN and self._opened_at is not None:
            elapsed = self._clock() - self._opened_at
            if elapsed >= self.config.open_timeout.total_seconds():
                self._state = CircuitState.HALF_OPEN
                self._half_open_calls = 0
                logger.info(
                    f"Circuit breaker '{self.service_id}' transitioned to HALF_OPEN"
                )
        return self._state

    def _record(self, success: bool) -> None:
        self._window.append(success)
        if (
            len(self._window) >= self.config.minimum_calls
            and self._failure_rate() >= self.config.failure_rate_threshold
        ):
            self._open()

    def _failure_rate(self) -> float:
        if not self._window:
            return 0.0
        return self._window.count(False) * 100.0 / len(self._window)

    def _time_until_reset(self) -> float | None:
        if self._state != CircuitState.OPEN or self._opened_at is None:
            return None
        remaining = (
            self._opened_at + self.config.open_timeout.total_seconds() - self._clock()
        )
        return max(0.0, remaining)

    def _open(self) -> None:
        previous = self._state
        self._state = CircuitState.OPEN
        self._opened_at = self._clock()
        self._half_open_calls = 0
        if previous == CircuitState.HALF_OPEN:
            logger.warning(
                f"Circuit breaker '{self.service_id}' re-OPENED after failed trial call"
            )
        else:
            logger.warning(
                f"Circuit breaker '{self.service_id}' OPENED, failure rate "
                f"{self._failure_rate():.1f}% over {len(self._window)} calls"
            )

    def _close(self) -> None:
        recovered = self._state != CircuitState.CLOSED
        self._state = CircuitState.CLOSED
        self._window.clear()
        self._opened_at = None
        self._half_open_calls = 0
        if recovered:
            logger.info(f"Circuit breaker '{self.service_id}' CLOSED (recovered)")
