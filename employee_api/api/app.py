"""FastAPI server exposing employee operations."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger
from prometheus_client import CONTENT_TYPE_LATEST
from starlette.exceptions import HTTPException as StarletteHTTPException

from employee_api.employees.models import CreateEmployeeRequest, Employee
from employee_api.employees.service import EmployeeService
from employee_api.exceptions import NotFoundError, ValidationFailedError
from employee_api.services.client import create_employee_client
from employee_api.settings import Settings, global_settings

API_PREFIX = "/api/v1/employee"


class EmployeeServer:
    """HTTP server for employee operations."""

    def __init__(self, service: EmployeeService):
        self.service = service
        self.app = FastAPI(title="Employee API", lifespan=self._lifespan)

        # Register routes; fixed paths before /{employee_id}
        self.app.get(API_PREFIX, response_model=list[Employee])(self.get_all_employees)
        self.app.get(
            f"{API_PREFIX}/search/{{search_string}}", response_model=list[Employee]
        )(self.search_employees)
        self.app.get(f"{API_PREFIX}/highestSalary")(self.get_highest_salary)
        self.app.get(f"{API_PREFIX}/topTenHighestEarningEmployeeNames")(
            self.get_top_ten_names
        )
        self.app.get(f"{API_PREFIX}/{{employee_id}}", response_model=Employee)(
            self.get_employee_by_id
        )
        self.app.post(API_PREFIX, response_model=Employee)(self.create_employee)
        self.app.delete(f"{API_PREFIX}/{{employee_id}}")(self.delete_employee_by_id)
        self.app.get("/health")(self.health_check)
        self.app.post("/health/circuit/reset")(self.reset_circuit)
        self.app.get("/metrics")(self.metrics)

        # Register error handlers
        self.app.exception_handler(StarletteHTTPException)(self.handle_http_error)
        self.app.exception_handler(RequestValidationError)(self.handle_validation_error)
        self.app.exception_handler(Exception)(self.handle_uncaught)

    @asynccontextmanager
    async def _lifespan(self, app: FastAPI):
        async with self.service.client:
            yield

    async def get_all_employees(self):
        logger.info(f"Controller: GET {API_PREFIX}")
        return await self.service.get_all_employees()

    async def search_employees(self, search_string: str):
        logger.info(f"Controller: GET {API_PREFIX}/search/{search_string}")
        return await self.service.search_by_name(search_string)

    async def get_employee_by_id(self, employee_id: str):
        logger.info(f"Controller: GET {API_PREFIX}/{employee_id}")
        employee = await self.service.get_by_id(employee_id)
        if employee is None:
            raise NotFoundError(employee_id)
        return employee

    async def get_highest_salary(self) -> int:
        logger.info(f"Controller: GET {API_PREFIX}/highestSalary")
        return await self.service.get_highest_salary()

    async def get_top_ten_names(self) -> list[str | None]:
        logger.info(f"Controller: GET {API_PREFIX}/topTenHighestEarningEmployeeNames")
        return await self.service.get_top_ten_names()

    async def create_employee(self, employee_input: CreateEmployeeRequest):
        logger.info(f"Controller: POST {API_PREFIX} name={employee_input.name}")
        return await self.service.create(employee_input)

    async def delete_employee_by_id(self, employee_id: str) -> str:
        logger.info(f"Controller: DELETE {API_PREFIX}/{employee_id}")
        return await self.service.delete_by_id(employee_id)

    async def health_check(self):
        """Health check endpoint."""
        return {
            "status": "ok",
            "service": "employee-api",
            **self.service.client.get_health_status(),
        }

    async def reset_circuit(self):
        """Manually close the upstream circuit breaker."""
        logger.warning("Controller: POST /health/circuit/reset")
        self.service.client.reset_circuit()
        return self.service.client.get_health_status()

    async def metrics(self) -> Response:
        """Prometheus scrape endpoint."""
        return Response(
            content=self.service.client.metrics.render(),
            media_type=CONTENT_TYPE_LATEST,
        )

    async def handle_http_error(
        self, request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        content = exc.detail if isinstance(exc.detail, dict) else {"error": exc.detail}
        return JSONResponse(status_code=exc.status_code, content=content)

    async def handle_validation_error(
        self, request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        error = ValidationFailedError.from_errors(exc.errors())
        logger.warning(
            f"400: validation failed {len(error.details)} error(s): {error.details}"
        )
        return JSONResponse(status_code=error.status_code, content=error.detail)

    async def handle_uncaught(self, request: Request, exc: Exception) -> JSONResponse:
        logger.exception(f"500: Uncaught exception: {exc!r}")
        return JSONResponse(status_code=500, content={"error": "Internal server error"})


def create_app(
    service: EmployeeService | None = None,
    settings: Settings | None = None,
) -> FastAPI:
    """Create FastAPI app for the employee API.

    Args:
        service: EmployeeService to serve; built from settings when omitted
        settings: Application settings, defaults to the global settings

    Returns:
        FastAPI app
    """
    if service is None:
        client = create_employee_client(settings or global_settings)
        service = EmployeeService(client)
    server = EmployeeServer(service)
    return server.app
