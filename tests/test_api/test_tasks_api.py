"""
Tests for Tasks API endpoints
"""
import pytest
from fastapi.testclient import TestClient

from lifesync.api.deps import get_task_backend
from lifesync.application.backends import LocalTaskBackend


class TestTasksApi:
    def test_requires_user(self, client):
        response = client.get("/api/v1/tasks")
        assert response.status_code == 401

    def test_create_list_toggle(self, client, auth_headers):
        response = client.post(
            "/api/v1/tasks",
            json={"title": "Blumen gießen", "repeat": True, "due_date": "2026-03-10"},
            headers=auth_headers,
        )
        assert response.status_code == 201
        task = response.json()
        assert task["priority"] == "medium"
        assert task["completed"] is False

        response = client.post(f"/api/v1/tasks/{task['id']}/toggle", headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["completed"] is True

        tasks = client.get("/api/v1/tasks", headers=auth_headers).json()
        assert len(tasks) == 2
        assert tasks[1]["due_date"] == "2026-03-11"

    def test_invalid_priority(self, client, auth_headers):
        response = client.post("/api/v1/tasks", json={"title": "x", "priority": "critical"}, headers=auth_headers)
        assert response.status_code == 422

    def test_unknown_task(self, client, auth_headers):
        assert client.get("/api/v1/tasks/missing", headers=auth_headers).status_code == 404
        assert client.post("/api/v1/tasks/missing/toggle", headers=auth_headers).status_code == 404

    def test_update_and_delete(self, client, auth_headers):
        task = client.post("/api/v1/tasks", json={"title": "Einkaufen"}, headers=auth_headers).json()

        response = client.patch(f"/api/v1/tasks/{task['id']}", json={"title": "Wocheneinkauf"}, headers=auth_headers)
        assert response.json()["title"] == "Wocheneinkauf"

        assert client.delete(f"/api/v1/tasks/{task['id']}", headers=auth_headers).status_code == 204
        assert client.get(f"/api/v1/tasks/{task['id']}", headers=auth_headers).status_code == 404


class TestLocalBackendApi:
    @pytest.fixture
    def client(self, app, local_store):
        app.dependency_overrides[get_task_backend] = lambda: LocalTaskBackend(local_store)
        return TestClient(app)

    def test_tasks_served_from_session_store(self, client, local_store):
        response = client.post("/api/v1/tasks", json={"title": "Einkaufen", "priority": "high"})
        assert response.status_code == 201
        assert local_store.tasks[0].title == "Einkaufen"
        assert [t["title"] for t in client.get("/api/v1/tasks").json()] == ["Einkaufen"]
