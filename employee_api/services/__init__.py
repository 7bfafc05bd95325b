"""
Upstream call layer - resilience patterns for the employee API.

Provides:
- HttpTransport: Raw HTTP calls with error translation
- CircuitBreaker: Sliding-window failure isolation
- RetryPolicy: Bounded retries for transient failures
- OperationMetrics: Latency measurement per operation and outcome
- ResilientEmployeeClient: Client combining all patterns
"""

from employee_api.services.errors import (
    ServiceError,
    TransientNetworkError,
    RequestTimeoutError,
    UpstreamApplicationError,
    UpstreamDecodeError,
    EmptyResponseError,
    CircuitOpenError,
)
from employee_api.services.circuit_breaker import (
    CircuitBreaker,
    CircuitBreakerConfig,
    CircuitState,
)
from employee_api.services.retry import RetryPolicy
from employee_api.services.metrics import OperationMetrics
from employee_api.services.transport import HttpTransport
from employee_api.services.client import (
    ResilientEmployeeClient,
    create_employee_client,
)

__all__ = [
    # Errors
    "ServiceError",
    "TransientNetworkError",
    "RequestTimeoutError",
    "UpstreamApplicationError",
    "UpstreamDecodeError",
    "EmptyResponseError",
    "CircuitOpenError",
    # Circuit Breaker
    "CircuitBreaker",
    "CircuitBreakerConfig",
    "CircuitState",
    # Retry
    "RetryPolicy",
    # Metrics
    "OperationMetrics",
    # Client
    "HttpTransport",
    "ResilientEmployeeClient",
    "create_employee_client",
]
