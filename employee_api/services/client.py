"""
ResilientEmployeeClient - Upstream employee API client with resilience patterns.

Combines:
- HttpTransport for the raw HTTP call
- RetryPolicy for transient failures (list, get-by-id and create only)
- CircuitBreaker for failure isolation
- A per-attempt timeout
- Per-operation fallbacks and latency measurement

Read operations never raise: failures collapse to an empty list, None or
False. Create raises a ServiceError subclass so callers know nothing was
created.
"""

import asyncio
from typing import TYPE_CHECKING, Any, Awaitable, Callable, TypeVar
from urllib.parse import quote

from loguru import logger
from pydantic import ValidationError

from employee_api.employees.models import ApiResponse, CreateEmployeeRequest, Employee
from employee_api.services.circuit_breaker import CircuitBreaker
from employee_api.services.errors import (
    CircuitOpenError,
    EmptyResponseError,
    RequestTimeoutError,
    ServiceError,
    UpstreamApplicationError,
    UpstreamDecodeError,
)
from employee_api.services.metrics import OperationMetrics
from employee_api.services.retry import RetryPolicy
from employee_api.services.transport import HttpTransport

if TYPE_CHECKING:
    from employee_api.settings import Settings

T = TypeVar("T")

OP_LIST = "getAllEmployees"
OP_GET = "getById"
OP_CREATE = "createEmployee"
OP_DELETE = "deleteByName"


class ResilientEmployeeClient:
    """
    Client for the upstream employee API.

    Usage:
        client = ResilientEmployeeClient(HttpTransport(base_url))

        employees = await client.list_all()       # [] on failure
        employee = await client.get_by_id("id-1") # None on failure
        created = await client.create(request)    # raises ServiceError
        deleted = await client.delete_by_name("Bill Bob")  # False on failure
    """

    def __init__(
        self,
        transport: HttpTransport,
        breaker: CircuitBreaker | None = None,
        retry_policy: RetryPolicy | None = None,
        metrics: OperationMetrics | None = None,
        timeout: float = 5.0,
    ):
        self._transport = transport
        self.service_id = transport.service_id
        self.breaker = breaker or CircuitBreaker(self.service_id)
        self.retry_policy = retry_policy or RetryPolicy()
        self.metrics = metrics or OperationMetrics()
        self._timeout = timeout

    # Public operations

    async def list_all(self) -> list[Employee]:
        """Fetch all employees, or an empty list if anything goes wrong."""
        with self.metrics.time(OP_LIST) as timer:
            try:
                employees = await self._call(self.retry_policy, self._fetch_all)
            except CircuitOpenError:
                logger.warning(
                    "Circuit breaker open for employee API - returning fallback empty list"
                )
                timer.mark_failure()
                return []
            except Exception as e:
                logger.error(f"Failed to fetch employees: {e!r}")
                timer.mark_failure()
                return []

            logger.info(f"Fetched {len(employees)} employees")
            return employees

    async def get_by_id(self, employee_id: str) -> Employee | None:
        """Fetch one employee, or None if it does not exist or anything goes wrong."""
        with self.metrics.time(OP_GET) as timer:
            try:
                employee = await self._call(
                    self.retry_policy, lambda: self._fetch_one(employee_id)
                )
            except Exception as e:
                logger.warning(f"Failed to fetch employee id={employee_id}: {e!r}")
                timer.mark_failure()
                return None

            logger.info(
                f"Fetched employee id={employee_id} found={employee is not None}"
            )
            return employee

    async def create(self, request: CreateEmployeeRequest) -> Employee:
        """
        Create an employee upstream.

        Raises:
            CircuitOpenError: If the circuit breaker is open
            RequestTimeoutError: If every attempt timed out
            UpstreamApplicationError: If the upstream answered with an error status
            EmptyResponseError: If the upstream returned no employee
            ServiceError: For other upstream failures
        """
        with self.metrics.time(OP_CREATE):
            try:
                envelope = await self._call(
                    self.retry_policy, lambda: self._post_employee(request)
                )
            except ServiceError as e:
                logger.error(f"Create employee failed name={request.name}: {e}")
                raise

            if envelope is None:
                msg = "Employee API returned empty response for create"
                logger.error(msg)
                raise EmptyResponseError(msg, service_id=self.service_id)

            if envelope.data is None:
                msg = "Employee API returned no employee object in response.data"
                logger.error(f"{msg} - full response: {envelope}")
                raise EmptyResponseError(msg, service_id=self.service_id)

            logger.debug(f"Raw create response: {envelope}")
            return envelope.data

    async def delete_by_name(self, name: str) -> bool:
        """
        Delete an employee by name.

        Returns True only when the upstream confirms the deletion. Writes
        are never retried.
        """
        with self.metrics.time(OP_DELETE) as timer:
            try:
                deleted = await self._call(
                    RetryPolicy.none(), lambda: self._delete_employee(name)
                )
            except Exception as e:
                logger.warning(f"Delete name={name} failed: {e!r}")
                timer.mark_failure()
                return False

            logger.info(f"Delete name={name} result={deleted}")
            return deleted

    # Single-attempt upstream calls

    async def _fetch_all(self) -> list[Employee]:
        payload = await self._transport.request("GET")
        envelope = self._decode(ApiResponse[list[Employee]], payload)
        return list(envelope.data or [])

    async def _fetch_one(self, employee_id: str) -> Employee | None:
        try:
            payload = await self._transport.request("GET", self._path(employee_id))
        except UpstreamApplicationError as e:
            if e.is_not_found:
                return None
            raise
        return self._decode(ApiResponse[Employee], payload).data

    async def _post_employee(
        self, request: CreateEmployeeRequest
    ) -> ApiResponse[Employee] | None:
        payload = await self._transport.request(
            "POST", json_data=request.to_upstream()
        )
        if payload is None:
            return None
        return self._decode(ApiResponse[Employee], payload)

    async def _delete_employee(self, name: str) -> bool:
        try:
            payload = await self._transport.request(
                "DELETE", self._path(name), json_data={"name": name}
            )
        except UpstreamApplicationError as e:
            if e.is_not_found:
                logger.info(f"Delete name={name} -> 404 (treat as not deleted)")
                return False
            raise
        if payload is None:
            return False
        return self._decode(ApiResponse[bool], payload).data is True

    # Resilience pipeline

    async def _call(
        self,
        policy: RetryPolicy,
        attempt: Callable[[], Awaitable[T]],
    ) -> T:
        """Run attempts until one succeeds or the policy gives up."""
        attempt_number = 0
        while True:
            attempt_number += 1
            delay = policy.delay_before(attempt_number)
            if delay > 0:
                await asyncio.sleep(delay)

            try:
                return await self._guarded(attempt)
            except ServiceError as e:
                if not policy.should_retry(e, attempt_number):
                    raise
                logger.warning(
                    f"Attempt {attempt_number}/{policy.max_attempts} to "
                    f"'{self.service_id}' failed, retrying: {e}"
                )

    async def _guarded(self, attempt: Callable[[], Awaitable[T]]) -> T:
        """One attempt behind the circuit breaker and the timeout."""
        if not self.breaker.permit():
            raise CircuitOpenError(
                self.service_id, self.breaker.get_time_until_reset() or 0
            )

        try:
            result = await asyncio.wait_for(attempt(), timeout=self._timeout)
        except asyncio.TimeoutError as e:
            self.breaker.record_failure()
            raise RequestTimeoutError(self.service_id, self._timeout) from e
        except asyncio.CancelledError:
            # Cancelled by the caller; the upstream produced no outcome
            self.breaker.release()
            raise
        except Exception:
            self.breaker.record_failure()
            raise

        self.breaker.record_success()
        return result

    def _decode(self, envelope_type: type[ApiResponse[Any]], payload: Any) -> Any:
        try:
            return envelope_type.model_validate(payload)
        except ValidationError as e:
            raise UpstreamDecodeError(
                f"Unexpected response from '{self.service_id}': {e}",
                service_id=self.service_id,
            ) from e

    @staticmethod
    def _path(segment: str) -> str:
        return f"/{quote(segment, safe='')}"

    # Lifecycle and status

    def get_health_status(self) -> dict[str, Any]:
        """Get health status of the upstream dependency."""
        return {"circuit_breaker": self.breaker.get_status()}

    def reset_circuit(self) -> None:
        """Reset the circuit breaker for the upstream."""
        self.breaker.reset()

    async def close(self) -> None:
        """Close the underlying transport."""
        await self._transport.close()
        logger.debug("ResilientEmployeeClient closed")

    async def __aenter__(self) -> "ResilientEmployeeClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()


def create_employee_client(settings: "Settings") -> ResilientEmployeeClient:
    """Build a client from application settings."""
    transport = HttpTransport(
        base_url=settings.employee_api_base_url,
        read_timeout=settings.employee_api_read_timeout,
        connect_timeout=settings.employee_api_connect_timeout,
    )
    breaker = CircuitBreaker(
        transport.service_id,
        settings.circuit_breaker_config(),
    )
    return ResilientEmployeeClient(
        transport,
        breaker=breaker,
        retry_policy=settings.retry_policy(),
        timeout=settings.employee_api_timeout,
    )
