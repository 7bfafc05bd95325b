"""
Custom exceptions raised to the HTTP boundary
"""

from typing import Any

from fastapi import HTTPException, status


class ValidationFailedError(HTTPException):
    """Request body failed validation"""

    def __init__(self, details: list[dict[str, Any]] | None = None):
        self.details = details or []
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"error": "Validation failed", "details": self.details},
        )

    @classmethod
    def from_errors(cls, errors: list[dict[str, Any]]) -> "ValidationFailedError":
        """Build from pydantic/FastAPI error dicts."""
        details = []
        for err in errors:
            loc = [str(part) for part in err.get("loc", ()) if part != "body"]
            details.append({"field": ".".join(loc), "message": err.get("msg", "")})
        return cls(details)


class NotFoundError(HTTPException):
    """No employee exists for the identifier"""

    def __init__(self, employee_id: str):
        self.employee_id = employee_id
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Employee not found for id={employee_id}",
        )


class ConflictError(HTTPException):
    """Employee was found but the upstream refused to delete it"""

    def __init__(self, name: str):
        self.name = name
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Failed to delete employee name={name}",
        )


class UpstreamUnavailableError(HTTPException):
    """Upstream employee API could not complete a write"""

    def __init__(self, detail: str = "Employee API unavailable"):
        super().__init__(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=detail)


class UpstreamRejectedError(HTTPException):
    """Upstream employee API refused a write it considered invalid"""

    def __init__(
        self, upstream_status: int, detail: str = "Employee API rejected the request"
    ):
        self.upstream_status = upstream_status
        super().__init__(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=detail
        )
