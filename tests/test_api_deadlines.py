"""
Deadline API + categorisation tests.

Categorisation is exercised directly with a pinned ``now`` so bucket
boundaries can be checked exactly.
"""

from datetime import datetime, timedelta

import pytest

from gradtrack.services.deadline_service import (
    CATEGORY_KEYS,
    categorize_deadline,
    categorize_deadlines,
)


NOW = datetime(2026, 3, 1, 12, 0, 0)


def _create(client, headers, **body):
    body.setdefault("title", "Application due")
    body.setdefault("type", "APPLICATION")
    res = client.post("/api/v1/deadlines", json=body, headers=headers)
    assert res.status_code == 201, res.get_json()
    return res.get_json()["deadline"]


# ═══════════════════════════════════════════════════════════════
# Categorisation
# ═══════════════════════════════════════════════════════════════

class TestCategorize:
    @pytest.mark.parametrize("offset,expected", [
        (timedelta(seconds=-1), "overdue"),
        (timedelta(0), "thisWeek"),
        (timedelta(days=7), "thisWeek"),
        (timedelta(days=7, seconds=1), "thisMonth"),
        (timedelta(days=30), "thisMonth"),
        (timedelta(days=30, seconds=1), "upcoming"),
    ])
    def test_boundaries(self, offset, expected):
        item = {"date": (NOW + offset).isoformat(), "completed": False}
        assert categorize_deadline(item, NOW) == expected

    def test_completed_wins_over_date(self):
        item = {"date": (NOW - timedelta(days=3)).isoformat(), "completed": True}
        assert categorize_deadline(item, NOW) == "completed"

    def test_partition_keeps_order_and_is_exhaustive(self):
        items = [
            {"id": 1, "date": "2026-02-01T00:00:00", "completed": False},
            {"id": 2, "date": "2026-03-03T00:00:00", "completed": False},
            {"id": 3, "date": "2026-06-01T00:00:00", "completed": False},
            {"id": 4, "date": "2026-03-02T00:00:00", "completed": False},
            {"id": 5, "date": "2026-03-20T00:00:00", "completed": True},
            {"id": 6, "date": "2026-03-20T00:00:00", "completed": False},
        ]
        buckets = categorize_deadlines(items, NOW)
        assert tuple(buckets) == CATEGORY_KEYS
        assert [d["id"] for d in buckets["overdue"]] == [1]
        assert [d["id"] for d in buckets["thisWeek"]] == [2, 4]
        assert [d["id"] for d in buckets["thisMonth"]] == [6]
        assert [d["id"] for d in buckets["upcoming"]] == [3]
        assert [d["id"] for d in buckets["completed"]] == [5]
        assert sum(len(v) for v in buckets.values()) == len(items)

    def test_empty(self):
        assert categorize_deadlines([], NOW) == {key: [] for key in CATEGORY_KEYS}


# ═══════════════════════════════════════════════════════════════
# API
# ═══════════════════════════════════════════════════════════════

class TestDeadlineCrud:
    def test_create(self, client, auth_headers, university, days_from_now):
        d = _create(client, auth_headers, date=days_from_now(10), universityId=university["id"], type="lor")
        assert d["type"] == "LOR"
        assert d["completed"] is False
        assert d["university"]["name"] == "MIT"

    def test_date_required(self, client, auth_headers):
        res = client.post("/api/v1/deadlines", json={"title": "x", "type": "OTHER"}, headers=auth_headers)
        assert res.status_code == 400
        assert res.get_json()["details"] == [{"field": "date", "message": "date is required"}]

    def test_bad_type_and_date(self, client, auth_headers):
        res = client.post("/api/v1/deadlines", json={
            "title": "x", "type": "EXAM", "date": "31/12/2026",
        }, headers=auth_headers)
        fields = {d["field"] for d in res.get_json()["details"]}
        assert fields == {"type", "date"}

    def test_completed_must_be_boolean(self, client, auth_headers, days_from_now):
        res = client.post("/api/v1/deadlines", json={
            "title": "x", "type": "OTHER", "date": days_from_now(1), "completed": "yes",
        }, headers=auth_headers)
        assert res.status_code == 400

    def test_invalid_university(self, client, auth_headers, days_from_now):
        res = client.post("/api/v1/deadlines", json={
            "title": "x", "type": "OTHER", "date": days_from_now(1), "universityId": 12345,
        }, headers=auth_headers)
        assert res.status_code == 400
        assert res.get_json()["code"] == "ERR_INVALID_REFERENCE"

    def test_mark_completed(self, client, auth_headers, days_from_now):
        d = _create(client, auth_headers, date=days_from_now(3))
        res = client.put(f"/api/v1/deadlines/{d['id']}", json={"completed": True}, headers=auth_headers)
        assert res.status_code == 200
        assert res.get_json()["deadline"]["completed"] is True

    def test_delete(self, client, auth_headers, days_from_now):
        d = _create(client, auth_headers, date=days_from_now(3))
        assert client.delete(f"/api/v1/deadlines/{d['id']}", headers=auth_headers).status_code == 200
        assert client.get(f"/api/v1/deadlines/{d['id']}", headers=auth_headers).status_code == 404


class TestDeadlineList:
    def test_sorted_and_categorized(self, client, auth_headers, days_from_now):
        _create(client, auth_headers, title="far", date=days_from_now(60))
        _create(client, auth_headers, title="late", date=days_from_now(-2))
        _create(client, auth_headers, title="week", date=days_from_now(2))
        _create(client, auth_headers, title="month", date=days_from_now(15))
        _create(client, auth_headers, title="done", date=days_from_now(1), completed=True)

        data = client.get("/api/v1/deadlines", headers=auth_headers).get_json()
        assert [d["title"] for d in data["deadlines"]] == ["late", "done", "week", "month", "far"]
        cats = data["categorizedDeadlines"]
        assert {k: [d["title"] for d in v] for k, v in cats.items()} == {
            "overdue": ["late"],
            "thisWeek": ["week"],
            "thisMonth": ["month"],
            "upcoming": ["far"],
            "completed": ["done"],
        }

    def test_filters(self, client, auth_headers, university, days_from_now):
        _create(client, auth_headers, title="a", type="LOR", date=days_from_now(5),
                universityId=university["id"])
        _create(client, auth_headers, title="b", date=days_from_now(45))
        _create(client, auth_headers, title="c", date=days_from_now(-1))
        _create(client, auth_headers, title="d", date=days_from_now(4), completed=True)

        def titles(qs):
            res = client.get(f"/api/v1/deadlines?{qs}", headers=auth_headers)
            return sorted(d["title"] for d in res.get_json()["deadlines"])

        assert titles("type=lor") == ["a"]
        assert titles("completed=true") == ["d"]
        assert titles("completed=false") == ["a", "b", "c"]
        assert titles(f"universityId={university['id']}") == ["a"]
        assert titles("upcoming=true") == ["a"]


class TestDeadlineStats:
    def test_summary(self, client, auth_headers, days_from_now):
        _create(client, auth_headers, date=days_from_now(-3))
        _create(client, auth_headers, type="LOR", date=days_from_now(3))
        _create(client, auth_headers, type="LOR", date=days_from_now(20))
        _create(client, auth_headers, date=days_from_now(2), completed=True)

        data = client.get("/api/v1/deadlines/stats/summary", headers=auth_headers).get_json()
        assert data["overdueCount"] == 1
        assert data["thisWeekCount"] == 1
        # the 30-day count includes deadlines already counted for this week
        assert data["thisMonthCount"] == 2
        assert data["completedCount"] == 1
        assert data["typeSummary"] == {"application": 2, "lor": 2}

    def test_empty(self, client, auth_headers):
        data = client.get("/api/v1/deadlines/stats/summary", headers=auth_headers).get_json()
        assert data == {
            "overdueCount": 0, "thisWeekCount": 0, "thisMonthCount": 0,
            "completedCount": 0, "typeSummary": {},
        }


class TestConfiguredWindows:
    def test_windows_follow_config(self, app, client, auth_headers, monkeypatch, days_from_now):
        monkeypatch.setitem(app.config, "THIS_WEEK_WINDOW_DAYS", 3)
        monkeypatch.setitem(app.config, "UPCOMING_WINDOW_DAYS", 10)
        _create(client, auth_headers, title="five", date=days_from_now(5))
        _create(client, auth_headers, title="twenty", date=days_from_now(20))

        cats = client.get("/api/v1/deadlines", headers=auth_headers).get_json()["categorizedDeadlines"]
        assert [d["title"] for d in cats["thisWeek"]] == []
        assert [d["title"] for d in cats["thisMonth"]] == ["five"]
        assert [d["title"] for d in cats["upcoming"]] == ["twenty"]

        summary = client.get("/api/v1/deadlines/stats/summary", headers=auth_headers).get_json()
        assert (summary["thisWeekCount"], summary["thisMonthCount"]) == (0, 1)

        stats = client.get("/api/v1/dashboard/stats", headers=auth_headers).get_json()
        assert stats["deadlines"] == {"upcoming": 1, "thisWeek": 0, "thisMonth": 1}

        upcoming = client.get("/api/v1/deadlines?upcoming=true", headers=auth_headers).get_json()
        assert [d["title"] for d in upcoming["deadlines"]] == ["five"]
