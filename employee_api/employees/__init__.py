"""
Employee models and aggregations.
"""

from employee_api.employees.models import (
    ApiResponse,
    CreateEmployeeRequest,
    Employee,
)
from employee_api.employees.aggregation import (
    max_salary,
    search_by_name,
    top_n_by_salary,
)

__all__ = [
    # Models
    "ApiResponse",
    "CreateEmployeeRequest",
    "Employee",
    # Aggregations
    "max_salary",
    "search_by_name",
    "top_n_by_salary",
]
