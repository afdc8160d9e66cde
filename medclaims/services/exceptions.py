"""
Service-layer exceptions.

Each exception carries the HTTP status the API layer answers with; the
services themselves stay independent of FastAPI.
"""


class WorkflowError(Exception):
    """Base exception for business-rule violations."""

    status_code: int = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ResourceNotFoundError(WorkflowError):
    """Resource is absent or not visible to the caller."""

    status_code = 404


class ForbiddenActionError(WorkflowError):
    """Caller is authenticated but has the wrong role or is not the owning party."""

    status_code = 403


class InvalidTransitionError(WorkflowError):
    """Requested status change is not defined from the current status."""

    status_code = 400


class InvalidStateError(WorkflowError):
    """A precondition on the current state of a related record failed."""

    status_code = 400


class InvalidInputError(WorkflowError):
    """Request data failed a business validation (amounts, files, enum values)."""

    status_code = 400


class DuplicateResourceError(WorkflowError):
    """A unique resource already exists."""

    status_code = 409
