"""
Latency and outcome measurement for upstream operations.

Every operation is timed exactly once and labelled with its name and a
success/failure status, including when the operation raises.
"""

import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator

from prometheus_client import CollectorRegistry, Histogram, generate_latest

LATENCY_METRIC = "employee_api_latency_seconds"

STATUS_SUCCESS = "success"
STATUS_FAILURE = "failure"


@dataclass
class OperationTimer:
    """Outcome holder for a single timed operation."""

    operation: str
    status: str = STATUS_SUCCESS

    def mark_failure(self) -> None:
        """Label the operation as failed even though it returned normally."""
        self.status = STATUS_FAILURE


class OperationMetrics:
    """
    Prometheus latency histogram keyed by operation and status.

    Each instance owns its registry so several clients can coexist
    in one process.

    Usage:
        metrics = OperationMetrics()

        with metrics.time("getById") as timer:
            result = await fetch()
            if result is None:
                timer.mark_failure()
    """

    def __init__(self, registry: CollectorRegistry | None = None):
        self.registry = registry or CollectorRegistry()
        self._latency = Histogram(
            LATENCY_METRIC,
            "Latency of calls to the upstream employee API",
            ["operation", "status"],
            registry=self.registry,
        )

    @contextmanager
    def time(self, operation: str) -> Iterator[OperationTimer]:
        timer = OperationTimer(operation=operation)
        started = time.perf_counter()
        try:
            yield timer
        except BaseException:
            timer.mark_failure()
            raise
        finally:
            self._latency.labels(operation=operation, status=timer.status).observe(
                time.perf_counter() - started
            )

    def observations(self, operation: str, status: str) -> int:
        """Number of recorded measurements for an operation/status pair."""
        value = self.registry.get_sample_value(
            f"{LATENCY_METRIC}_count",
            {"operation": operation, "status": status},
        )
        return int(value or 0)

    def render(self) -> bytes:
        """Render the registry in Prometheus text format."""
        return generate_latest(self.registry)
