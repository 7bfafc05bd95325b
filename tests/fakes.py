"""Hand-rolled fake of the resilient client for service and API tests."""

from typing import Any

from employee_api.employees.models import CreateEmployeeRequest, Employee
from employee_api.services.errors import ServiceError
from employee_api.services.metrics import OperationMetrics


class FakeEmployeeClient:
    def __init__(
        self,
        employees: list[Employee] | None = None,
        by_id: dict[str, Employee] | None = None,
        delete_result: bool = True,
        create_result: Employee | ServiceError | None = None,
    ):
        self.employees = employees or []
        self.by_id = by_id or {}
        self.delete_result = delete_result
        self.create_result = create_result
        self.metrics = OperationMetrics()
        self.calls: list[tuple[str, Any]] = []
        self.closed = False

    async def list_all(self) -> list[Employee]:
        self.calls.append(("list_all", None))
        return list(self.employees)

    async def get_by_id(self, employee_id: str) -> Employee | None:
        self.calls.append(("get_by_id", employee_id))
        return self.by_id.get(employee_id)

    async def create(self, request: CreateEmployeeRequest) -> Employee:
        self.calls.append(("create", request))
        if isinstance(self.create_result, ServiceError):
            raise self.create_result
        return self.create_result

    async def delete_by_name(self, name: str) -> bool:
        self.calls.append(("delete_by_name", name))
        return self.delete_result

    def get_health_status(self) -> dict[str, Any]:
        return {"circuit_breaker": {"state": "CLOSED"}}

    def reset_circuit(self) -> None:
        self.calls.append(("reset_circuit", None))

    async def close(self) -> None:
        self.closed = True

    async def __aenter__(self) -> "FakeEmployeeClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
