"""
HTTP tests for /tasks: ownership, assignee rights and scoping.
"""

import pytest

from taskmanager.auth.capabilities import ROLE_CAPABILITIES
from taskmanager.core.models import Role

from helpers import API, create_task


# =============================================================================
# Create
# =============================================================================


class TestCreateTask:
    def test_create_defaults(self, client, ann):
        response = client.post(f"{API}/tasks", json={"title": "T"}, headers=ann.headers)
        
        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        task = body["task"]
        assert task["title"] == "T"
        assert task["createdBy"] == ann.id
        assert task["status"] == "pending"
        assert task["priority"] == "medium"
        assert task["assignee"] is None
        assert task["createdAt"]

    def test_created_by_cannot_be_supplied(self, client, ann, bob):
        task = create_task(client, ann, title="T", createdBy=bob.id)
        assert task["createdBy"] == ann.id

    def test_all_fields(self, client, ann, bob):
        task = create_task(
            client,
            ann,
            title="Ship it",
            description="Release 1.0",
            status="in-progress",
            priority="high",
            dueDate="2030-01-31T12:00:00Z",
            assignee=bob.id,
        )
        assert task["description"] == "Release 1.0"
        assert task["status"] == "in-progress"
        assert task["priority"] == "high"
        assert task["dueDate"].startswith("2030-01-31T12:00:00")
        assert task["assignee"] == bob.id

    @pytest.mark.parametrize("payload", [{}, {"title": ""}, {"title": "   "}, {"title": None}])
    def test_title_required(self, client, ann, payload):
        response = client.post(f"{API}/tasks", json=payload, headers=ann.headers)
        
        assert response.status_code == 400
        assert response.json() == {"success": False, "message": "title: Title is required"}

    def test_unknown_status_rejected(self, client, ann):
        response = client.post(f"{API}/tasks", json={"title": "T", "status": "done"}, headers=ann.headers)
        assert response.status_code == 400

    def test_requires_auth(self, client):
        response = client.post(f"{API}/tasks", json={"title": "T"})
        assert response.status_code == 401

    def test_requires_create_capability(self, client, ann, monkeypatch):
        monkeypatch.setitem(ROLE_CAPABILITIES, Role.USER, frozenset())
        
        response = client.post(f"{API}/tasks", json={"title": "T"}, headers=ann.headers)
        
        assert response.status_code == 403
        assert response.json()["message"] == "Forbidden: insufficient permissions"
        assert client.get(f"{API}/tasks", headers=ann.headers).json()["count"] == 0


# =============================================================================
# List
# =============================================================================


class TestListTasks:
    def test_user_sees_only_own_tasks(self, client, ann, bob):
        create_task(client, ann, title="Ann's")
        create_task(client, bob, title="Bob's, assigned to Ann", assignee=ann.id)
        
        body = client.get(f"{API}/tasks", headers=ann.headers).json()
        assert body["count"] == 1
        assert [t["title"] for t in body["tasks"]] == ["Ann's"]

    def test_admin_sees_all(self, client, admin, ann, bob):
        create_task(client, ann, title="A")
        create_task(client, bob, title="B")
        
        body = client.get(f"{API}/tasks", headers=admin.headers).json()
        assert body["count"] == 2

    def test_filters(self, client, ann, bob):
        create_task(client, ann, title="Write Report", status="completed", priority="high")
        create_task(client, ann, title="Read report", priority="high")
        create_task(client, ann, title="Lunch", status="completed")
        create_task(client, bob, title="Bob report", status="completed", priority="high")
        
        def titles(**params):
            body = client.get(f"{API}/tasks", params=params, headers=ann.headers).json()
            return sorted(t["title"] for t in body["tasks"])
        
        assert titles(status="completed") == ["Lunch", "Write Report"]
        assert titles(priority="high") == ["Read report", "Write Report"]
        assert titles(search="REPORT") == ["Read report", "Write Report"]
        assert titles(status="completed", priority="high", search="report") == ["Write Report"]
        assert titles(search="nothing") == []

    @pytest.mark.parametrize("params", [
        {},
        {"status": "completed"},
        {"priority": "high"},
        {"search": "report"},
        {"status": "pending", "priority": "low", "search": "r"},
    ])
    def test_scope_holds_for_every_filter(self, client, ann, bob, params):
        create_task(client, bob, title="Bob report", status="completed", priority="high", assignee=ann.id)
        create_task(client, bob, title="Bob report 2", priority="low")
        create_task(client, ann, title="Ann report", priority="low")
        
        body = client.get(f"{API}/tasks", params=params, headers=ann.headers).json()
        assert all(t["createdBy"] == ann.id for t in body["tasks"])

    def test_invalid_filter_value(self, client, ann):
        response = client.get(f"{API}/tasks", params={"priority": "urgent"}, headers=ann.headers)
        assert response.status_code == 400


# =============================================================================
# Read
# =============================================================================


class TestGetTask:
    def test_creator_assignee_and_admin_can_read(self, client, admin, ann, bob):
        task = create_task(client, ann, assignee=bob.id)
        
        for account in (ann, bob, admin):
            response = client.get(f"{API}/tasks/{task['id']}", headers=account.headers)
            assert response.status_code == 200
            assert response.json()["task"]["id"] == task["id"]

    def test_stranger_forbidden(self, client, ann, carol):
        task = create_task(client, ann)
        
        response = client.get(f"{API}/tasks/{task['id']}", headers=carol.headers)
        assert response.status_code == 403
        assert response.json()["success"] is False

    def test_not_found_before_forbidden(self, client, carol):
        response = client.get(f"{API}/tasks/task_missing", headers=carol.headers)
        
        assert response.status_code == 404
        assert response.json() == {"success": False, "message": "Task not found"}


# =============================================================================
# Update
# =============================================================================


class TestUpdateTask:
    def test_assignee_can_update_status(self, client, ann, bob):
        task = create_task(client, ann, title="T", description="d", assignee=bob.id)
        
        response = client.put(f"{API}/tasks/{task['id']}", json={"status": "completed"}, headers=bob.headers)
        
        assert response.status_code == 200
        updated = response.json()["task"]
        assert updated["status"] == "completed"
        assert {k: v for k, v in updated.items() if k != "status"} == {
            k: v for k, v in task.items() if k != "status"
        }

    @pytest.mark.parametrize("payload", [
        {"title": "x"},
        {"status": "completed", "title": "x"},
        {"status": "completed", "priority": "low"},
        {"assignee": None},
        {"status": "completed", "createdBy": "someone"},
        {},
    ])
    def test_assignee_cannot_touch_anything_else(self, client, ann, bob, payload):
        task = create_task(client, ann, assignee=bob.id)
        
        response = client.put(f"{API}/tasks/{task['id']}", json=payload, headers=bob.headers)
        
        assert response.status_code == 403
        assert response.json()["message"] == "Assignee can update only status"
        unchanged = client.get(f"{API}/tasks/{task['id']}", headers=ann.headers).json()["task"]
        assert unchanged == task

    def test_creator_partial_update(self, client, ann, bob):
        task = create_task(client, ann, title="T", description="keep me", priority="high")
        
        response = client.put(
            f"{API}/tasks/{task['id']}",
            json={"title": "T2", "assignee": bob.id},
            headers=ann.headers,
        )
        updated = response.json()["task"]
        
        assert response.status_code == 200
        assert updated["title"] == "T2"
        assert updated["assignee"] == bob.id
        assert updated["description"] == "keep me"
        assert updated["priority"] == "high"

    def test_explicit_null_clears_optional_field(self, client, ann):
        task = create_task(client, ann, description="gone soon")
        
        response = client.put(f"{API}/tasks/{task['id']}", json={"description": None}, headers=ann.headers)
        assert response.json()["task"]["description"] is None

    def test_created_by_is_immutable(self, client, ann, bob):
        task = create_task(client, ann)
        
        response = client.put(
            f"{API}/tasks/{task['id']}",
            json={"createdBy": bob.id, "title": "Still Ann's"},
            headers=ann.headers,
        )
        assert response.status_code == 200
        assert response.json()["task"]["createdBy"] == ann.id

    def test_admin_can_update_any_task(self, client, admin, ann):
        task = create_task(client, ann)
        
        response = client.put(f"{API}/tasks/{task['id']}", json={"priority": "low"}, headers=admin.headers)
        assert response.status_code == 200
        assert response.json()["task"]["priority"] == "low"

    def test_stranger_forbidden(self, client, ann, carol):
        task = create_task(client, ann)
        response = client.put(f"{API}/tasks/{task['id']}", json={"status": "completed"}, headers=carol.headers)
        assert response.status_code == 403

    @pytest.mark.parametrize("payload", [{"title": ""}, {"title": None}, {"status": None}, {"status": "done"}])
    def test_invalid_values(self, client, ann, payload):
        task = create_task(client, ann)
        response = client.put(f"{API}/tasks/{task['id']}", json=payload, headers=ann.headers)
        assert response.status_code == 400

    def test_not_found(self, client, carol):
        response = client.put(f"{API}/tasks/task_missing", json={"status": "completed"}, headers=carol.headers)
        assert response.status_code == 404


# =============================================================================
# Delete
# =============================================================================


class TestDeleteTask:
    def test_creator_can_delete(self, client, ann):
        task = create_task(client, ann)
        
        response = client.delete(f"{API}/tasks/{task['id']}", headers=ann.headers)
        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Task deleted successfully"}
        assert client.get(f"{API}/tasks/{task['id']}", headers=ann.headers).status_code == 404

    def test_admin_can_delete_any(self, client, admin, ann):
        task = create_task(client, ann)
        assert client.delete(f"{API}/tasks/{task['id']}", headers=admin.headers).status_code == 200

    @pytest.mark.parametrize("who", ["bob", "carol"])
    def test_assignee_and_stranger_cannot_delete(self, client, ann, bob, carol, who):
        account = {"bob": bob, "carol": carol}[who]
        task = create_task(client, ann, assignee=bob.id)
        
        response = client.delete(f"{API}/tasks/{task['id']}", headers=account.headers)
        
        assert response.status_code == 403
        assert client.get(f"{API}/tasks/{task['id']}", headers=ann.headers).json()["task"] == task

    def test_not_found(self, client, ann):
        assert client.delete(f"{API}/tasks/task_missing", headers=ann.headers).status_code == 404


# =============================================================================
# Stats
# =============================================================================


class TestStats:
    def test_user_stats_are_scoped(self, client, ann, bob):
        create_task(client, ann, status="completed", priority="high")
        create_task(client, ann, status="in-progress", priority="low")
        create_task(client, ann)
        create_task(client, bob, status="completed")
        
        stats = client.get(f"{API}/tasks/stats", headers=ann.headers).json()["stats"]
        assert stats == {
            "total": 3,
            "completed": 1,
            "pending": 1,
            "inProgress": 1,
            "byPriority": {"low": 1, "medium": 1, "high": 1},
        }

    def test_admin_stats_cover_everything(self, client, admin, ann, bob):
        create_task(client, ann, status="completed")
        create_task(client, bob)
        
        stats = client.get(f"{API}/tasks/stats", headers=admin.headers).json()["stats"]
        assert stats["total"] == 2
        assert stats["completed"] == 1
        assert stats["pending"] == 1

    def test_stats_route_is_not_a_task_id(self, client, ann):
        response = client.get(f"{API}/tasks/stats", headers=ann.headers)
        assert response.status_code == 200
        assert response.json()["success"] is True
