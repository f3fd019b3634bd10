"""Error handling utilities."""

from typing import Any, Optional


class TaskManagerError(Exception):
    """Base exception for the task manager backend."""
    status_code = 500
    error = "Internal server error"

    def __init__(
        self,
        message: str = "",
        details: Optional[list[dict[str, Any]]] = None,
        error: Optional[str] = None
    ):
        super().__init__(message)
        if error:
            self.error = error
        self.message = message or self.error
        self.details = details

    def to_response(self) -> dict[str, Any]:
        """Render the error as a failed result (kind + message)."""
        body: dict[str, Any] = {"error": self.error, "message": self.message}
        if self.details:
            body["details"] = self.details
        return body


class InvalidSortField(TaskManagerError):
    """Sort field is not on the allow-list."""
    status_code = 400
    error = "Invalid sort field"


class InvalidPagination(TaskManagerError):
    """Page or limit is out of range."""
    status_code = 400
    error = "Invalid pagination"


class RequestValidationError(TaskManagerError):
    """Request payload or query failed validation."""
    status_code = 400
    error = "Validation failed"


class AuthenticationError(TaskManagerError):
    """Missing, invalid or expired credentials."""
    status_code = 401
    error = "Authentication failed"


class AuthorizationError(TaskManagerError):
    """Authenticated user does not own the resource."""
    status_code = 403
    error = "Access denied"


class TaskNotFoundError(TaskManagerError):
    """Task does not exist."""
    status_code = 404
    error = "Task not found"


class UserNotFoundError(TaskManagerError):
    """User does not exist."""
    status_code = 404
    error = "User not found"


class DuplicateUserError(TaskManagerError):
    """Username or email already registered."""
    status_code = 409
    error = "User already exists"


class SupabaseError(TaskManagerError):
    """Supabase operation error."""
    error = "Storage error"
