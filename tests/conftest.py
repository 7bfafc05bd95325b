"""Shared fixtures for employee API tests."""

from datetime import timedelta
from typing import Any, Callable

import httpx
import pytest

from employee_api.services.circuit_breaker import CircuitBreaker
from employee_api.services.client import ResilientEmployeeClient
from employee_api.services.retry import RetryPolicy
from employee_api.services.transport import HttpTransport

BASE_URL = "http://upstream.test/api/v1/employee"


def employee_payload(
    employee_id: str,
    name: str | None = None,
    salary: int | None = None,
    age: int | None = 30,
    title: str | None = "Engineer",
) -> dict[str, Any]:
    return {
        "id": employee_id,
        "employee_name": name,
        "employee_salary": salary,
        "employee_age": age,
        "employee_title": title,
        "employee_email": f"{employee_id}@company.com",
    }


class FakeClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def make_client() -> Callable[..., ResilientEmployeeClient]:
    """Factory for clients whose upstream is an httpx.MockTransport handler."""

    def _make(
        handler: Callable[[httpx.Request], Any],
        breaker: CircuitBreaker | None = None,
        retry_policy: RetryPolicy | None = None,
        timeout: float = 5.0,
    ) -> ResilientEmployeeClient:
        http_client = httpx.AsyncClient(
            transport=httpx.MockTransport(handler), base_url=BASE_URL
        )
        transport = HttpTransport(BASE_URL, client=http_client)
        return ResilientEmployeeClient(
            transport,
            breaker=breaker,
            retry_policy=retry_policy or RetryPolicy(delay=timedelta(0)),
            timeout=timeout,
        )

    return _make


class Upstream:
    """Scripted upstream: each call pops the next behavior."""

    def __init__(self, *behaviors):
        self.behaviors = list(behaviors)
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        behavior = self.behaviors.pop(0) if len(self.behaviors) > 1 else self.behaviors[0]
        if behavior == "timeout":
            raise httpx.ReadTimeout("timed out", request=request)
        if behavior == "connect":
            raise httpx.ConnectError("connection refused", request=request)
        if isinstance(behavior, int):
            return httpx.Response(behavior, json={"status": "error", "error": "boom"})
        if isinstance(behavior, httpx.Response):
            return behavior
        return httpx.Response(200, json=behavior)
