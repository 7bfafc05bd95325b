"""
EmployeeService - Employee operations on top of the resilient client.

Read operations never raise and degrade to empty results when the
upstream is unavailable. Writes raise typed errors for the HTTP layer.
"""

from loguru import logger

from employee_api.employees import aggregation
from employee_api.employees.models import CreateEmployeeRequest, Employee
from employee_api.exceptions import (
    ConflictError,
    NotFoundError,
    UpstreamRejectedError,
    UpstreamUnavailableError,
)
from employee_api.services.client import ResilientEmployeeClient
from employee_api.services.errors import ServiceError, UpstreamApplicationError


class EmployeeService:
    """Employee use cases backed by the upstream employee API."""

    def __init__(self, client: ResilientEmployeeClient):
        self.client = client

    async def get_all_employees(self) -> list[Employee]:
        logger.info("Service: get_all_employees()")
        return await self.client.list_all()

    async def search_by_name(self, fragment: str | None) -> list[Employee]:
        logger.info(f"Service: search employees by name contains='{fragment}'")
        matches = aggregation.search_by_name(await self.client.list_all(), fragment)
        logger.debug(f"Search fragment='{fragment}' -> {len(matches)} matches")
        return matches

    async def get_by_id(self, employee_id: str) -> Employee | None:
        logger.info(f"Service: get_by_id id={employee_id}")
        return await self.client.get_by_id(employee_id)

    async def get_highest_salary(self) -> int:
        logger.info("Service: get_highest_salary()")
        highest = aggregation.max_salary(await self.client.list_all())
        logger.debug(f"Highest salary computed={highest}")
        return highest

    async def get_top_ten_names(self) -> list[str | None]:
        logger.info("Service: get_top_ten_names()")
        names = aggregation.top_n_by_salary(await self.client.list_all())
        logger.debug(
            f"Top10 names computed size={len(names)} top={names[0] if names else '(none)'}"
        )
        return names

    async def create(self, request: CreateEmployeeRequest) -> Employee:
        """
        Create an employee.

        Raises:
            UpstreamRejectedError: If the upstream refused the request with a 4xx status
            UpstreamUnavailableError: If the upstream did not create the employee
        """
        logger.info(f"Service: create name={request.name}")
        try:
            return await self.client.create(request)
        except UpstreamApplicationError as e:
            if e.is_rejection:
                raise UpstreamRejectedError(
                    e.status_code, f"Employee API rejected create: {e}"
                ) from e
            raise UpstreamUnavailableError(f"Failed to create employee: {e}") from e
        except ServiceError as e:
            raise UpstreamUnavailableError(f"Failed to create employee: {e}") from e

    async def delete_by_id(self, employee_id: str) -> str:
        """
        Delete an employee by id.

        The upstream only deletes by name, so the id is first resolved to a
        name and that name is deleted. The two steps are not atomic.

        Returns:
            Name of the deleted employee

        Raises:
            NotFoundError: If no named employee exists for the id
            ConflictError: If the upstream did not delete the employee
        """
        logger.info(f"Service: delete_by_id id={employee_id}")
        employee = await self.client.get_by_id(employee_id)
        if employee is None or employee.name is None:
            logger.warning(f"Delete aborted: id={employee_id} not found")
            raise NotFoundError(employee_id)

        if not await self.client.delete_by_name(employee.name):
            logger.warning(f"Delete failed: id={employee_id} name={employee.name}")
            raise ConflictError(employee.name)

        logger.info(f"Deleted id={employee_id} name={employee.name}")
        return employee.name
