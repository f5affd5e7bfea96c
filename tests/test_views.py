"""
Server-rendered fragment tests (/views/*).
"""


def _html(res):
    assert res.status_code == 200, res.data
    assert res.content_type.startswith("text/html")
    return res.get_data(as_text=True)


class TestDashboardView:
    def test_empty(self, client, auth_headers):
        html = _html(client.get("/views/dashboard", headers=auth_headers))
        assert "No upcoming deadlines" in html
        assert "No recent activity" in html

    def test_with_data(self, client, auth_headers, university, days_from_now):
        client.post("/api/v1/deadlines", json={
            "title": "Submit application", "type": "APPLICATION", "date": days_from_now(2),
            "universityId": university["id"],
        }, headers=auth_headers)
        html = _html(client.get("/views/dashboard", headers=auth_headers))
        assert "Submit application" in html
        assert "Added MIT" in html

    def test_compact_limit(self, client, auth_headers):
        for i in range(4):
            client.post("/api/v1/documents", json={"name": f"Doc{i}", "type": "OTHER"}, headers=auth_headers)
        html = _html(client.get("/views/dashboard?limit=2", headers=auth_headers))
        assert html.count('class="activity ') == 2


class TestKanbanView:
    def test_columns_and_filters(self, client, auth_headers):
        client.post("/api/v1/tasks", json={"title": "Essay draft", "priority": "HIGH"}, headers=auth_headers)
        client.post("/api/v1/tasks", json={"title": "GRE booking", "status": "IN_PROGRESS"}, headers=auth_headers)

        html = _html(client.get("/views/kanban", headers=auth_headers))
        for title in ("To Do", "In Progress", "Done", "Essay draft", "GRE booking"):
            assert title in html

        html = _html(client.get("/views/kanban?search=essay&sort=title-asc", headers=auth_headers))
        assert "Essay draft" in html
        assert "GRE booking" not in html
        assert "No tasks" in html

    def test_invalid_sort(self, client, auth_headers):
        res = client.get("/views/kanban?sort=size-asc", headers=auth_headers)
        assert res.status_code == 400
        assert res.get_json()["details"][0]["field"] == "sort"


class TestDeadlinesAndUniversitiesViews:
    def test_deadline_groups(self, client, auth_headers, days_from_now):
        client.post("/api/v1/deadlines", json={
            "title": "Past due", "type": "OTHER", "date": days_from_now(-1),
        }, headers=auth_headers)
        html = _html(client.get("/views/deadlines", headers=auth_headers))
        assert "Overdue" in html
        assert "Past due" in html
        assert "General" in html

    def test_university_cards(self, client, auth_headers, university):
        client.put(f"/api/v1/universities/{university['id']}", json={"notes": "Great robotics lab"},
                   headers=auth_headers)
        html = _html(client.get("/views/universities", headers=auth_headers))
        assert "MIT" in html
        assert "www.mit.edu" in html
        assert "Great robotics lab" in html

        compact = _html(client.get("/views/universities?compact=true", headers=auth_headers))
        assert "Great robotics lab" not in compact

    def test_no_universities(self, client, auth_headers):
        html = _html(client.get("/views/universities", headers=auth_headers))
        assert "No universities added yet" in html
