"""
Upstream call layer exceptions.
"""

from typing import Any


class ServiceError(Exception):
    """Base exception for upstream call errors."""

    def __init__(self, message: str, service_id: str | None = None):
        self.service_id = service_id
        super().__init__(message)


class TransientNetworkError(ServiceError):
    """Connection failure or transient I/O error. Safe to retry."""

    pass


class RequestTimeoutError(TransientNetworkError):
    """Request timed out."""

    def __init__(self, service_id: str, timeout: float):
        self.timeout = timeout
        super().__init__(
            f"Request to service '{service_id}' timed out after {timeout}s",
            service_id=service_id,
        )


class UpstreamApplicationError(ServiceError):
    """Upstream answered with a non-2xx status. Never retried."""

    def __init__(self, service_id: str, status_code: int, body: Any = None):
        self.status_code = status_code
        self.body = body
        super().__init__(
            f"Service '{service_id}' returned HTTP {status_code}: {str(body)[:200]}",
            service_id=service_id,
        )

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404

    @property
    def is_rejection(self) -> bool:
        """4xx other than request-timeout and rate-limit statuses."""
        return 400 <= self.status_code < 500 and self.status_code not in (408, 429)


class UpstreamDecodeError(ServiceError):
    """Upstream payload could not be decoded."""

    pass


class EmptyResponseError(ServiceError):
    """Upstream returned no body or an envelope without data."""

    pass


class CircuitOpenError(ServiceError):
    """Circuit breaker is open, request blocked."""

    def __init__(self, service_id: str, reset_after_seconds: float):
        self.reset_after_seconds = reset_after_seconds
        super().__init__(
            f"Circuit breaker open for service '{service_id}', "
            f"retry after {reset_after_seconds:.1f}s",
            service_id=service_id,
        )
