"""
Task API tests.

Covers CRUD, the completedAt lifecycle, list ordering and filters,
the kanbanTasks buckets, universityId validation and the stats summary.
"""

from datetime import timedelta

from gradtrack.models.base import utcnow
from gradtrack.services import task_service


def _create(client, headers, **body):
    body.setdefault("title", "Write SOP")
    res = client.post("/api/v1/tasks", json=body, headers=headers)
    assert res.status_code == 201, res.get_json()
    return res.get_json()["task"]


class TestCreateTask:
    def test_defaults(self, client, auth_headers):
        task = _create(client, auth_headers)
        assert task["status"] == "PENDING"
        assert task["priority"] == "MEDIUM"
        assert task["completedAt"] is None
        assert task["universityId"] is None
        assert task["university"] is None

    def test_with_university(self, client, auth_headers, university):
        task = _create(client, auth_headers, universityId=university["id"], priority="high",
                       dueDate="2026-11-01")
        assert task["priority"] == "HIGH"
        assert task["dueDate"] == "2026-11-01T00:00:00"
        assert task["university"] == {"id": university["id"], "name": "MIT", "category": "TARGET"}

    def test_created_completed_gets_timestamp(self, client, auth_headers):
        task = _create(client, auth_headers, status="COMPLETED")
        assert task["completedAt"] == task["createdAt"]

    def test_unknown_university(self, client, auth_headers):
        res = client.post("/api/v1/tasks", json={"title": "x", "universityId": 999}, headers=auth_headers)
        assert res.status_code == 400
        data = res.get_json()
        assert data["code"] == "ERR_INVALID_REFERENCE"
        assert data["error"] == "Invalid university"

    def test_validation(self, client, auth_headers):
        res = client.post("/api/v1/tasks", json={
            "title": "", "status": "DONE", "priority": "CRITICAL", "description": "d" * 1001,
        }, headers=auth_headers)
        assert res.status_code == 400
        fields = {d["field"] for d in res.get_json()["details"]}
        assert fields == {"title", "status", "priority", "description"}


class TestCompletionLifecycle:
    def test_enter_and_leave_completed(self, client, auth_headers):
        task = _create(client, auth_headers)
        tid = task["id"]

        done = client.put(f"/api/v1/tasks/{tid}", json={"status": "COMPLETED"}, headers=auth_headers)
        stamped = done.get_json()["task"]["completedAt"]
        assert stamped is not None

        again = client.put(f"/api/v1/tasks/{tid}", json={"status": "COMPLETED", "title": "Renamed"},
                           headers=auth_headers).get_json()["task"]
        assert again["completedAt"] == stamped
        assert again["title"] == "Renamed"

        reopened = client.put(f"/api/v1/tasks/{tid}", json={"status": "IN_PROGRESS"},
                              headers=auth_headers).get_json()["task"]
        assert reopened["completedAt"] is None

    def test_apply_completion_unit(self):
        from gradtrack.models.task import Task

        now = utcnow()
        task = Task(title="t", status="PENDING")
        task_service.apply_completion(task, "COMPLETED", now=now)
        assert task.completed_at == now
        later = now + timedelta(hours=1)
        task_service.apply_completion(task, "COMPLETED", now=later)
        assert task.completed_at == now
        task_service.apply_completion(task, "CANCELLED", now=later)
        assert task.completed_at is None
        assert task.status == "CANCELLED"

    def test_update_other_fields_keeps_stamp(self, client, auth_headers):
        task = _create(client, auth_headers, status="COMPLETED")
        res = client.put(f"/api/v1/tasks/{task['id']}", json={"priority": "LOW"}, headers=auth_headers)
        assert res.get_json()["task"]["completedAt"] == task["completedAt"]


class TestListTasks:
    def test_ordering(self, client, auth_headers):
        _create(client, auth_headers, title="low", priority="LOW")
        _create(client, auth_headers, title="high-nodue", priority="HIGH")
        _create(client, auth_headers, title="high-late", priority="HIGH", dueDate="2026-12-20")
        _create(client, auth_headers, title="high-soon", priority="HIGH", dueDate="2026-12-01")
        _create(client, auth_headers, title="urgent", priority="URGENT")

        titles = [t["title"] for t in client.get("/api/v1/tasks", headers=auth_headers).get_json()["tasks"]]
        assert titles == ["urgent", "high-soon", "high-late", "high-nodue", "low"]

    def test_filters(self, client, auth_headers, university):
        _create(client, auth_headers, title="a", status="IN_PROGRESS", universityId=university["id"])
        _create(client, auth_headers, title="b", priority="URGENT")
        _create(client, auth_headers, title="c", status="IN_PROGRESS")

        def titles(qs):
            res = client.get(f"/api/v1/tasks?{qs}", headers=auth_headers)
            return sorted(t["title"] for t in res.get_json()["tasks"])

        assert titles("status=in_progress") == ["a", "c"]
        assert titles("priority=URGENT") == ["b"]
        assert titles(f"universityId={university['id']}") == ["a"]

    def test_kanban_buckets(self, client, auth_headers):
        _create(client, auth_headers, title="p")
        _create(client, auth_headers, title="d", status="COMPLETED")
        data = client.get("/api/v1/tasks", headers=auth_headers).get_json()
        kanban = data["kanbanTasks"]
        assert set(kanban) == {"pending", "in_progress", "completed"}
        assert [t["title"] for t in kanban["pending"]] == ["p"]
        assert kanban["in_progress"] == []
        assert [t["title"] for t in kanban["completed"]] == ["d"]

    def test_cancelled_bucket_only_when_present(self, client, auth_headers):
        _create(client, auth_headers, title="x", status="CANCELLED")
        kanban = client.get("/api/v1/tasks", headers=auth_headers).get_json()["kanbanTasks"]
        assert [t["title"] for t in kanban["cancelled"]] == ["x"]

    def test_bucket_by_status_unit(self):
        grouped = task_service.bucket_by_status([
            {"status": "PENDING", "id": 1}, {"status": "PENDING", "id": 2},
        ])
        assert [t["id"] for t in grouped["pending"]] == [1, 2]
        assert grouped["in_progress"] == grouped["completed"] == []
        assert "cancelled" not in grouped


class TestUpdateDelete:
    def test_update_rejects_foreign_university(self, client, auth_headers, other_headers):
        theirs = client.post("/api/v1/universities", json={"name": "Theirs", "category": "REACH"},
                             headers=other_headers).get_json()["university"]
        task = _create(client, auth_headers)
        res = client.put(f"/api/v1/tasks/{task['id']}", json={"universityId": theirs["id"]},
                         headers=auth_headers)
        assert res.status_code == 400
        assert res.get_json()["code"] == "ERR_INVALID_REFERENCE"

    def test_clear_university(self, client, auth_headers, university):
        task = _create(client, auth_headers, universityId=university["id"])
        res = client.put(f"/api/v1/tasks/{task['id']}", json={"universityId": None}, headers=auth_headers)
        assert res.get_json()["task"]["universityId"] is None

    def test_delete(self, client, auth_headers):
        task = _create(client, auth_headers)
        res = client.delete(f"/api/v1/tasks/{task['id']}", headers=auth_headers)
        assert res.status_code == 200
        assert res.get_json() == {"message": "Task deleted successfully"}
        assert client.get(f"/api/v1/tasks/{task['id']}", headers=auth_headers).status_code == 404


class TestTaskStats:
    def test_summary(self, client, auth_headers):
        now = utcnow()
        _create(client, auth_headers, title="late", dueDate=(now - timedelta(days=2)).isoformat())
        _create(client, auth_headers, title="soon", priority="HIGH",
                dueDate=(now + timedelta(days=3)).isoformat())
        _create(client, auth_headers, title="far", dueDate=(now + timedelta(days=20)).isoformat())
        _create(client, auth_headers, title="done-late", status="COMPLETED",
                dueDate=(now - timedelta(days=5)).isoformat())

        res = client.get("/api/v1/tasks/stats/summary", headers=auth_headers)
        assert res.status_code == 200
        data = res.get_json()
        assert data["statusSummary"] == {"pending": 3, "completed": 1}
        assert data["prioritySummary"] == {"high": 1, "medium": 3}
        assert data["overdueTasks"] == 1
        assert data["upcomingTasks"] == 1
