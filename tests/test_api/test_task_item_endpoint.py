"""Tests for the single task endpoint."""

import pytest

from api.tasks.item import handler
from tests.utils.assertions import assert_failed, assert_valid_task
from tests.utils.factories import create_task_row
from tests.utils.helpers import bearer, call_handler

pytestmark = [pytest.mark.unit, pytest.mark.usefixtures("patch_repositories")]


@pytest.fixture
def my_task(fake_supabase, stored_user):
    row = create_task_row(stored_user.id, title="Mine", priority="HIGH", priority_score=40)
    fake_supabase.tables.setdefault("tasks", []).append(row)
    return row


@pytest.fixture
def their_task(fake_supabase, other_user):
    row = create_task_row(other_user.id, title="Theirs")
    fake_supabase.tables.setdefault("tasks", []).append(row)
    return row


def path(task_id: str) -> str:
    return f"/api/tasks/item?id={task_id}"


class TestGetTask:

    def test_get_own_task(self, auth_token, my_task):
        response = call_handler(handler, "GET", path(my_task["id"]), headers=bearer(auth_token))

        assert response.status == 200
        assert_valid_task(response.body["data"])
        assert response.body["data"]["id"] == my_task["id"]

    def test_other_users_task_is_forbidden(self, auth_token, their_task):
        response = call_handler(handler, "GET", path(their_task["id"]), headers=bearer(auth_token))
        assert_failed(response, 403, "Access denied")

    def test_missing_task(self, auth_token):
        response = call_handler(handler, "GET", path("01HZZZZZZZZZZZZZZZZZZZZZZZ"), headers=bearer(auth_token))
        assert_failed(response, 404, "Task not found")

    @pytest.mark.parametrize("task_id", ["", "abc%3Bdrop", "a.b", "abc%0A", "abc%0D%0A"])
    def test_malformed_id(self, auth_token, task_id):
        response = call_handler(handler, "GET", path(task_id), headers=bearer(auth_token))
        assert_failed(response, 400, "Validation failed")

    def test_requires_auth(self, my_task):
        response = call_handler(handler, "GET", path(my_task["id"]))
        assert_failed(response, 401, "Access token required")


class TestUpdateTask:

    def test_status_change_recomputes_completion(self, auth_token, my_task, fake_supabase):
        response = call_handler(
            handler, "PUT", path(my_task["id"]),
            body={"status": "IN_PROGRESS"},
            headers=bearer(auth_token),
        )

        assert response.status == 200
        assert response.body["message"] == "Task updated successfully"
        data = response.body["data"]
        assert data["status"] == "IN_PROGRESS"
        assert data["completion_percentage"] == 50
        assert data["title"] == "Mine"
        assert fake_supabase.tables["tasks"][0]["completion_percentage"] == 50

    def test_urgency_change_recomputes_score(self, auth_token, my_task):
        response = call_handler(
            handler, "PUT", path(my_task["id"]),
            body={"is_urgent": True},
            headers=bearer(auth_token),
        )
        assert response.body["data"]["priority_score"] == 60

    def test_invalid_update(self, auth_token, my_task):
        response = call_handler(
            handler, "PUT", path(my_task["id"]),
            body={"priority": "SOMEDAY"},
            headers=bearer(auth_token),
        )
        assert_failed(response, 400, "Validation failed")

    def test_cannot_update_other_users_task(self, auth_token, their_task, fake_supabase):
        response = call_handler(
            handler, "PUT", path(their_task["id"]),
            body={"title": "Hijacked"},
            headers=bearer(auth_token),
        )

        assert_failed(response, 403, "Access denied")
        assert fake_supabase.tables["tasks"][0]["title"] == "Theirs"


class TestDeleteTask:

    def test_delete(self, auth_token, my_task, fake_supabase):
        response = call_handler(handler, "DELETE", path(my_task["id"]), headers=bearer(auth_token))

        assert response.status == 200
        assert response.body == {"success": True, "message": "Task deleted successfully"}
        assert fake_supabase.tables["tasks"] == []

    def test_delete_twice(self, auth_token, my_task):
        call_handler(handler, "DELETE", path(my_task["id"]), headers=bearer(auth_token))
        response = call_handler(handler, "DELETE", path(my_task["id"]), headers=bearer(auth_token))
        assert_failed(response, 404, "Task not found")

    def test_cannot_delete_other_users_task(self, auth_token, their_task, fake_supabase):
        response = call_handler(handler, "DELETE", path(their_task["id"]), headers=bearer(auth_token))

        assert_failed(response, 403, "Access denied")
        assert len(fake_supabase.tables["tasks"]) == 1
