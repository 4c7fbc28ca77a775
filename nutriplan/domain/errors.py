"""Error types raised by the planner.

Every error carries a human-readable ``message`` (shown to the dietitian as
an alert), a ``status_code`` used by the JSON surface and optional
``details``.
"""
from typing import Any, Dict, Optional


class PlannerError(Exception):
    """Base class for all planner errors."""

    def __init__(self, message: str, status_code: int = 500,
                 details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(PlannerError):
    """Input rejected locally, before any remote call."""

    def __init__(self, message: str, field: Optional[str] = None):
        details = {"field": field} if field else {}
        super().__init__(message, status_code=400, details=details)


class DuplicateNameError(ValidationError):
    """A plan with the same name (case-insensitive) already exists for the client."""

    def __init__(self, plan_name: str, client_id: str):
        super().__init__(
            f"A plan named '{plan_name}' already exists for this client",
            field="planName",
        )
        self.details["client_id"] = client_id


class NotFoundError(PlannerError):
    """A plan, client or date assignment is not present in local state."""

    def __init__(self, resource: str, identifier: Any):
        message = f"{resource} with id '{identifier}' not found"
        super().__init__(message, status_code=404, details={"resource": resource, "id": identifier})


class RemoteError(PlannerError):
    """The meal-plan API failed: transport error, non-2xx or ``success: false``."""

    def __init__(self, operation: str, message: str, http_status: Optional[int] = None):
        details: Dict[str, Any] = {"operation": operation}
        if http_status is not None:
            details["http_status"] = http_status
        super().__init__(f"{operation} failed: {message}", status_code=502, details=details)
        self.operation = operation
        self.http_status = http_status


class BusyError(PlannerError):
    """Another mutation is still waiting for the API to answer."""

    def __init__(self, operation: str):
        super().__init__(
            f"Cannot {operation} while another request is in progress",
            status_code=409,
            details={"operation": operation},
        )
