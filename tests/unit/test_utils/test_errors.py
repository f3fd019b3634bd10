"""Tests for error types and their failed-result rendering."""

import pytest

from src.utils.errors import (
    AuthenticationError,
    AuthorizationError,
    DuplicateUserError,
    InvalidPagination,
    InvalidSortField,
    RequestValidationError,
    SupabaseError,
    TaskManagerError,
    TaskNotFoundError,
    UserNotFoundError,
)


@pytest.mark.unit
@pytest.mark.parametrize("error_cls,status_code", [
    (InvalidSortField, 400),
    (InvalidPagination, 400),
    (RequestValidationError, 400),
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (TaskNotFoundError, 404),
    (UserNotFoundError, 404),
    (DuplicateUserError, 409),
    (SupabaseError, 500),
    (TaskManagerError, 500),
])
def test_status_codes(error_cls, status_code):
    error = error_cls("boom")
    assert error.status_code == status_code
    assert isinstance(error, TaskManagerError)


@pytest.mark.unit
def test_to_response():
    error = RequestValidationError("Please check your input data", details=[{"field": "title"}])
    assert error.to_response() == {
        "error": "Validation failed",
        "message": "Please check your input data",
        "details": [{"field": "title"}],
    }


@pytest.mark.unit
def test_error_kind_override_is_per_instance():
    expired = AuthenticationError("expired", error="Token expired")
    assert expired.to_response()["error"] == "Token expired"
    assert AuthenticationError("other").error == "Authentication failed"


@pytest.mark.unit
def test_message_defaults_to_error_kind():
    assert TaskNotFoundError().to_response() == {"error": "Task not found", "message": "Task not found"}
