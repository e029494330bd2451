"""
Task Route Tests
"""

import pytest
from unittest.mock import AsyncMock, patch

from app.services.task_service import TaskService
from app.services.user_service import UserService
from shared.schemas import TaskSchema, TaskStatus, ProfileSchema


@pytest.fixture
def task(sample_task_row):
    return TaskSchema.model_validate(sample_task_row)


@pytest.fixture
def listed(task):
    with patch.object(TaskService, "list_tasks", new=AsyncMock(return_value=[task])) as list_tasks:
        yield list_tasks


def post(client, path, data, token):
    return client.post(path, data={**data, "csrfToken": token}, follow_redirects=False)


class TestTaskList:
    def test_requires_login(self, client):
        response = client.get("/secure/tasks", follow_redirects=False)
        assert response.headers["location"] == "/auth/login"

    def test_lists_tasks_with_forms(self, auth_client, listed, test_user):
        response = auth_client.get("/secure/tasks")

        assert response.status_code == 200
        assert "Write report" in response.text
        assert 'action="/secure/tasks/task-1/delete"' in response.text
        listed.assert_awaited_once_with(test_user)

    def test_delete_failure_notice(self, auth_client, listed):
        response = auth_client.get("/secure/tasks?error=delete_failed")
        assert "could not be deleted" in response.text


class TestCreateTask:
    def test_success(self, auth_client, csrf_token, task, test_user):
        with patch.object(TaskService, "create_task", new=AsyncMock(return_value=task)) as create:
            response = post(auth_client, "/secure/tasks", {
                "title": "Write report",
                "priority": "high",
                "due_date": ""
            }, csrf_token)

        assert response.status_code == 303
        assert response.headers["location"] == "/secure/tasks"
        user, data = create.await_args.args
        assert user == test_user
        assert data.title == "Write report"
        assert data.due_date is None

    def test_validation_error_keeps_input(self, auth_client, csrf_token, listed):
        with patch.object(TaskService, "create_task", new=AsyncMock()) as create:
            response = post(auth_client, "/secure/tasks", {
                "title": "",
                "description": "keep me"
            }, csrf_token)

        assert response.status_code == 400
        assert "Title is required" in response.text
        assert "keep me" in response.text
        create.assert_not_awaited()

    def test_backend_failure(self, auth_client, csrf_token, listed):
        with patch.object(TaskService, "create_task", new=AsyncMock(return_value=None)):
            response = post(auth_client, "/secure/tasks", {"title": "Plan"}, csrf_token)

        assert response.status_code == 502
        assert "Failed to create task" in response.text

    def test_requires_csrf(self, auth_client, csrf_token):
        with patch.object(TaskService, "create_task", new=AsyncMock()) as create:
            response = auth_client.post("/secure/tasks", data={"title": "Plan"}, follow_redirects=False)

        assert response.headers["location"] == "/auth/error"
        create.assert_not_awaited()


class TestEditTask:
    def test_edit_page(self, auth_client, task):
        with patch.object(TaskService, "get_task", new=AsyncMock(return_value=task)):
            response = auth_client.get("/secure/tasks/task-1")

        assert response.status_code == 200
        assert 'value="Write report"' in response.text

    def test_unknown_task(self, auth_client):
        with patch.object(TaskService, "get_task", new=AsyncMock(return_value=None)):
            response = auth_client.get("/secure/tasks/missing")

        assert response.status_code == 404
        assert "Task not found" in response.text

    def test_status_change_from_list(self, auth_client, csrf_token, task):
        updated = task.model_copy(update={"status": TaskStatus.COMPLETED})
        with patch.object(TaskService, "update_task", new=AsyncMock(return_value=updated)) as update:
            response = post(auth_client, "/secure/tasks/task-1", {"status": "completed"}, csrf_token)

        assert response.headers["location"] == "/secure/tasks"
        _, task_id, data = update.await_args.args
        assert task_id == "task-1"
        assert data.to_record() == {"status": "completed"}

    def test_invalid_update_rerenders_form(self, auth_client, csrf_token, task):
        with patch.object(TaskService, "update_task", new=AsyncMock()) as update, \
                patch.object(TaskService, "get_task", new=AsyncMock(return_value=task)):
            response = post(auth_client, "/secure/tasks/task-1", {"priority": "urgent"}, csrf_token)

        assert response.status_code == 400
        update.assert_not_awaited()

    def test_update_failure(self, auth_client, csrf_token, task):
        with patch.object(TaskService, "update_task", new=AsyncMock(return_value=None)), \
                patch.object(TaskService, "get_task", new=AsyncMock(return_value=task)):
            response = post(auth_client, "/secure/tasks/task-1", {"title": "New"}, csrf_token)

        assert response.status_code == 502
        assert "Failed to update task" in response.text

    def test_update_of_missing_task(self, auth_client, csrf_token):
        with patch.object(TaskService, "update_task", new=AsyncMock(return_value=None)), \
                patch.object(TaskService, "get_task", new=AsyncMock(return_value=None)):
            response = post(auth_client, "/secure/tasks/missing", {"title": "New"}, csrf_token)

        assert response.status_code == 404


class TestDeleteTask:
    def test_success(self, auth_client, csrf_token, test_user):
        with patch.object(TaskService, "delete_task", new=AsyncMock(return_value=True)) as delete:
            response = post(auth_client, "/secure/tasks/task-1/delete", {}, csrf_token)

        assert response.headers["location"] == "/secure/tasks"
        delete.assert_awaited_once_with(test_user, "task-1")

    def test_failure(self, auth_client, csrf_token):
        with patch.object(TaskService, "delete_task", new=AsyncMock(return_value=False)):
            response = post(auth_client, "/secure/tasks/task-1/delete", {}, csrf_token)

        assert response.headers["location"] == "/secure/tasks?error=delete_failed"

    def test_requires_csrf(self, auth_client, csrf_token):
        with patch.object(TaskService, "delete_task", new=AsyncMock()) as delete:
            response = auth_client.post("/secure/tasks/task-1/delete", follow_redirects=False)

        assert response.headers["location"] == "/auth/error"
        delete.assert_not_awaited()


class TestDashboard:
    def test_counts_and_greeting(self, auth_client, task):
        done = task.model_copy(update={"id": "task-2", "status": TaskStatus.COMPLETED})
        profile = ProfileSchema(id="user-123", first_name="Jane", last_name="Doe")
        with patch.object(TaskService, "list_tasks", new=AsyncMock(return_value=[task, done])), \
                patch.object(UserService, "get_profile", new=AsyncMock(return_value=profile)):
            response = auth_client.get("/secure/dashboard")

        assert response.status_code == 200
        assert "Welcome, Jane" in response.text
        assert "<strong>2</strong> total" in response.text
        assert "<strong>1</strong> completed" in response.text
