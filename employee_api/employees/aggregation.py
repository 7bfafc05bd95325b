"""
Aggregations over a materialized employee collection.

All functions are pure: they never call the upstream and never mutate
their input.
"""

from typing import Sequence

from employee_api.employees.models import Employee

DEFAULT_TOP_N = 10


def search_by_name(employees: Sequence[Employee], fragment: str | None) -> list[Employee]:
    """
    Case-insensitive substring match on employee names.

    Employees without a name never match. An empty fragment matches every
    named employee. Input order is preserved.
    """
    needle = (fragment or "").casefold()
    return [e for e in employees if e.name is not None and needle in e.name.casefold()]


def max_salary(employees: Sequence[Employee]) -> int:
    """Highest known salary, or 0 when no salary is known."""
    return max((e.salary for e in employees if e.salary is not None), default=0)


def top_n_by_salary(
    employees: Sequence[Employee], n: int = DEFAULT_TOP_N
) -> list[str | None]:
    """
    Names of the n best-paid employees, highest salary first.

    Employees without a salary sort last. Ties keep their input order.
    Absent names are returned as None.
    """
    if n <= 0:
        return []
    # sorted() is stable, so equal keys keep input order
    ranked = sorted(
        employees,
        key=lambda e: (e.salary is None, -(e.salary or 0)),
    )
    return [e.name for e in ranked[:n]]
