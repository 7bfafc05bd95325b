"""
Employee data models using Pydantic.
"""

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

MIN_AGE = 16
MAX_AGE = 75
MIN_SALARY = 1

T = TypeVar("T")


class Employee(BaseModel):
    """
    Employee record as returned by the upstream API.

    Only the identifier is guaranteed; every other field may be absent.
    Wire names use the upstream's ``employee_`` prefix.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    name: str | None = Field(default=None, alias="employee_name")
    salary: int | None = Field(default=None, alias="employee_salary")
    age: int | None = Field(default=None, alias="employee_age")
    title: str | None = Field(default=None, alias="employee_title")
    email: str | None = Field(default=None, alias="employee_email")


class CreateEmployeeRequest(BaseModel):
    """Payload required to create an employee."""

    name: str
    salary: int = Field(ge=MIN_SALARY)
    age: int = Field(ge=MIN_AGE, le=MAX_AGE)
    title: str

    @field_validator("name", "title")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value

    def to_upstream(self) -> dict[str, Any]:
        return self.model_dump()


class ApiResponse(BaseModel, Generic[T]):
    """
    Upstream response envelope.

    Example:
        {"data": {"id": "8c0b...", "employee_name": "Fred Hamill"}, "status": "200 OK"}
    """

    data: T | None = None
    status: str | None = None
    error: str | None = None
