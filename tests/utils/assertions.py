"""Custom assertion helpers."""

from typing import Any, Dict

TASK_RESPONSE_FIELDS = {
    "id", "title", "description", "status", "priority", "is_urgent", "due_date",
    "completion_percentage", "priority_score", "user_id", "created_at", "updated_at",
}


def assert_valid_task(task: Dict[str, Any]) -> None:
    """Assert that a task response dict is well-formed."""
    assert set(task) == TASK_RESPONSE_FIELDS
    assert isinstance(task["id"], str) and task["id"]
    assert task["status"] in ("TODO", "IN_PROGRESS", "COMPLETED", "CANCELLED")
    assert task["priority"] in ("LOW", "MEDIUM", "HIGH", "URGENT")
    assert 0 <= task["priority_score"] <= 100
    assert task["completion_percentage"] in (0, 50, 100)


def assert_valid_user(user: Dict[str, Any]) -> None:
    """Assert that a user response dict never leaks the password hash."""
    assert "password" not in user
    assert {"id", "username", "email"} <= set(user)


def assert_failed(response: Any, status: int, error: str) -> None:
    """Assert a failed result with the given status code and error kind."""
    assert response.status == status, response.body
    assert response.body["error"] == error
    assert response.body["message"]
