"""
HTTP surface for employee operations.
"""

from employee_api.api.app import EmployeeServer, create_app

__all__ = ["EmployeeServer", "create_app"]
