"""
Dashboard API tests: headline stats, activity feed and upcoming deadlines.
"""

from gradtrack.models import db
from gradtrack.models.university import University
from gradtrack.services import dashboard_service


class TestDashboardStats:
    def test_empty_user(self, client, auth_headers):
        res = client.get("/api/v1/dashboard/stats", headers=auth_headers)
        assert res.status_code == 200
        assert res.get_json() == {
            "universities": {"total": 0, "byStatus": {}, "byCategory": {}},
            "deadlines": {"upcoming": 0, "thisWeek": 0, "thisMonth": 0},
            "tasks": {"total": 0, "pending": 0, "overdue": 0, "highPriority": 0},
            "documents": {"total": 0, "byType": {}},
        }

    def test_counts(self, client, auth_headers, days_from_now):
        h = auth_headers
        client.post("/api/v1/universities", json={"name": "A", "category": "REACH", "status": "APPLIED"}, headers=h)
        client.post("/api/v1/universities", json={"name": "B", "category": "REACH"}, headers=h)
        client.post("/api/v1/universities", json={"name": "C", "category": "SAFETY", "status": "ADMITTED"}, headers=h)

        client.post("/api/v1/deadlines", json={"title": "w", "type": "LOR", "date": days_from_now(3)}, headers=h)
        client.post("/api/v1/deadlines", json={"title": "m", "type": "LOR", "date": days_from_now(20)}, headers=h)
        client.post("/api/v1/deadlines", json={"title": "far", "type": "LOR", "date": days_from_now(40)}, headers=h)
        client.post("/api/v1/deadlines", json={"title": "old", "type": "LOR", "date": days_from_now(-1)}, headers=h)
        client.post("/api/v1/deadlines", json={
            "title": "done", "type": "LOR", "date": days_from_now(2), "completed": True,
        }, headers=h)

        client.post("/api/v1/tasks", json={"title": "p", "priority": "URGENT"}, headers=h)
        client.post("/api/v1/tasks", json={"title": "i", "status": "IN_PROGRESS", "dueDate": days_from_now(-1)},
                    headers=h)
        client.post("/api/v1/tasks", json={"title": "c", "status": "COMPLETED", "priority": "HIGH",
                                           "dueDate": days_from_now(-3)}, headers=h)
        client.post("/api/v1/tasks", json={"title": "x", "status": "CANCELLED"}, headers=h)

        client.post("/api/v1/documents", json={"name": "SOP", "type": "SOP"}, headers=h)
        client.post("/api/v1/documents", json={"name": "CV", "type": "CV"}, headers=h)

        stats = client.get("/api/v1/dashboard/stats", headers=h).get_json()
        assert stats["universities"] == {
            "total": 3,
            "byStatus": {"applied": 1, "researching": 1, "admitted": 1},
            "byCategory": {"reach": 2, "safety": 1},
        }
        assert stats["deadlines"] == {"upcoming": 2, "thisWeek": 1, "thisMonth": 2}
        assert stats["tasks"] == {"total": 4, "pending": 2, "overdue": 1, "highPriority": 1}
        assert stats["documents"] == {"total": 2, "byType": {"sop": 1, "cv": 1}}


class TestRecentActivity:
    def test_feed_shapes(self, client, auth_headers, university, days_from_now):
        h = auth_headers
        client.post("/api/v1/documents", json={"name": "SOP", "type": "SOP", "version": "v2"}, headers=h)
        client.post("/api/v1/tasks", json={"title": "Essay", "universityId": university["id"]}, headers=h)
        client.post("/api/v1/deadlines", json={
            "title": "Apply", "type": "APPLICATION", "date": days_from_now(9),
            "universityId": university["id"],
        }, headers=h)

        data = client.get("/api/v1/dashboard/activity", headers=h).get_json()
        assert data["totalCount"] == 4
        by_type = {a["type"]: a for a in data["activities"]}
        assert set(by_type) == {"university", "document", "task", "deadline"}

        assert by_type["university"]["id"] == f"uni-{university['id']}"
        assert by_type["university"]["action"] == "created"
        assert by_type["university"]["title"] == "Added MIT"
        assert by_type["university"]["description"] == "TARGET school"
        assert by_type["document"]["title"] == "Uploaded SOP"
        assert by_type["document"]["description"] == "SOP v2"
        assert by_type["task"]["description"] == "Related to MIT"
        assert by_type["deadline"]["description"] == "MIT - APPLICATION"
        assert by_type["deadline"]["data"]["title"] == "Apply"

        stamps = [a["timestamp"] for a in data["activities"]]
        assert stamps == sorted(stamps, reverse=True)

    def test_actions_follow_updates(self, client, auth_headers, days_from_now):
        h = auth_headers
        task = client.post("/api/v1/tasks", json={"title": "Essay"}, headers=h).get_json()["task"]
        client.put(f"/api/v1/tasks/{task['id']}", json={"status": "COMPLETED"}, headers=h)
        uni = client.post("/api/v1/universities", json={"name": "ETH", "category": "REACH"},
                          headers=h).get_json()["university"]
        client.put(f"/api/v1/universities/{uni['id']}", json={"notes": "visited"}, headers=h)
        d = client.post("/api/v1/deadlines", json={"title": "GRE", "type": "OTHER", "date": days_from_now(1)},
                        headers=h).get_json()["deadline"]
        client.put(f"/api/v1/deadlines/{d['id']}", json={"title": "GRE exam"}, headers=h)

        acts = {a["type"]: a for a in client.get("/api/v1/dashboard/activity", headers=h).get_json()["activities"]}
        assert acts["task"]["action"] == "completed"
        assert acts["task"]["title"] == "Completed Essay"
        assert acts["task"]["description"] == "General task"
        assert acts["university"]["action"] == "updated"
        assert acts["university"]["title"] == "Updated ETH"
        assert acts["deadline"]["action"] == "updated"
        assert acts["deadline"]["description"] == "OTHER"

    def test_limit_and_per_type_cap(self, client, auth_headers):
        for i in range(7):
            client.post("/api/v1/tasks", json={"title": f"t{i}"}, headers=auth_headers)
        data = client.get("/api/v1/dashboard/activity?limit=3", headers=auth_headers).get_json()
        assert len(data["activities"]) == 3
        assert data["totalCount"] == dashboard_service.ACTIVITY_PER_TYPE

    def test_bad_limit_falls_back(self, user):
        uid = user["user"]["id"]
        for i in range(12):
            db.session.add(University(user_id=uid, name=f"U{i}", category="TARGET"))
        db.session.commit()
        result = dashboard_service.get_recent_activity(uid, limit=0)
        assert len(result["activities"]) == 5


class TestUpcomingDeadlines:
    def test_window_order_and_limit(self, client, auth_headers, days_from_now):
        for day in (25, 3, 40, -1, 10, 1, 5, 7):
            client.post("/api/v1/deadlines", json={
                "title": f"d{day}", "type": "OTHER", "date": days_from_now(day, hours=1),
            }, headers=auth_headers)
        client.post("/api/v1/deadlines", json={
            "title": "done", "type": "OTHER", "date": days_from_now(2), "completed": True,
        }, headers=auth_headers)

        items = client.get("/api/v1/dashboard/upcoming-deadlines", headers=auth_headers) \
            .get_json()["upcomingDeadlines"]
        assert [d["title"] for d in items] == ["d1", "d3", "d5", "d7", "d10"]
        assert [d["daysUntil"] for d in items] == [2, 4, 6, 8, 11]
