"""Integration tests for API endpoints.

These tests verify API endpoints work correctly end-to-end.
"""

import pytest
from datetime import datetime, timedelta


def _create(test_client, **body):
    payload = {"text": "Test Task", **body}
    response = test_client.post("/api/tasks", json=payload)
    assert response.status_code == 201
    return response.json()["task"]


class TestHealth:
    def test_health(self, test_client):
        response = test_client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestTaskEndpoints:
    """Task CRUD endpoints."""

    def test_create_task(self, test_client):
        task = _create(
            test_client,
            description="Quarterly numbers",
            quadrant="urgent-important",
            complexity="high",
            deadline="2024-05-15",
            recurrence={"interval": 1, "unit": "week", "weekDays": [3, 1]},
        )

        assert task["text"] == "Test Task"
        assert task["quadrant"] == "urgent-important"
        assert task["complexity"] == "high"
        assert task["deadline"] == "2024-05-15"
        assert task["recurrence"] == {"interval": 1, "unit": "week", "weekDays": [1, 3]}
        assert task["completed"] is False

    def test_create_task_defaults(self, test_client):
        task = _create(test_client)
        assert task["quadrant"] == "not-urgent-not-important"
        assert task["complexity"] == "medium"
        assert task["recurrence"] is None

    def test_create_task_invalid_recurrence_is_dropped(self, test_client):
        task = _create(test_client, recurrence={"interval": 0, "unit": "day"})
        assert task["recurrence"] is None

    def test_create_task_legacy_recurrence(self, test_client):
        task = _create(test_client, recurrence="monthly")
        assert task["recurrence"] == "monthly"

    def test_create_task_empty_text(self, test_client):
        response = test_client.post("/api/tasks", json={"text": "   "})
        assert response.status_code == 400

    def test_create_task_invalid_quadrant(self, test_client):
        response = test_client.post("/api/tasks", json={"text": "x", "quadrant": "someday"})
        assert response.status_code == 422

    def test_get_task(self, test_client):
        created = _create(test_client)
        response = test_client.get(f"/api/tasks/{created['id']}")
        assert response.status_code == 200
        assert response.json()["task"]["id"] == created["id"]

    def test_get_missing_task(self, test_client):
        assert test_client.get("/api/tasks/nonexistent").status_code == 404

    def test_list_tasks_grouped(self, test_client):
        _create(test_client, text="Fire", quadrant="urgent-important")
        _create(test_client, text="Plan", quadrant="not-urgent-important")

        response = test_client.get("/api/tasks")
        assert response.status_code == 200
        data = response.json()
        assert data["count"] == 2
        assert set(data["quadrants"]) == {
            "urgent-important",
            "not-urgent-important",
            "urgent-not-important",
            "not-urgent-not-important",
        }
        assert [task["text"] for task in data["quadrants"]["urgent-important"]] == ["Fire"]
        assert data["non_empty_quadrants"] == ["urgent-important", "not-urgent-important"]

    def test_update_task(self, test_client):
        created = _create(test_client, recurrence="daily", complexity="low")

        response = test_client.put(
            f"/api/tasks/{created['id']}",
            json={"text": "Renamed", "quadrant": "urgent-not-important"},
        )

        assert response.status_code == 200
        task = response.json()["task"]
        assert task["text"] == "Renamed"
        assert task["quadrant"] == "urgent-not-important"
        # Fields not in the body are untouched
        assert task["recurrence"] == "daily"
        assert task["complexity"] == "low"

    def test_update_task_clears_recurrence(self, test_client):
        created = _create(test_client, recurrence="daily")
        response = test_client.put(f"/api/tasks/{created['id']}", json={"recurrence": None})
        assert response.json()["task"]["recurrence"] is None

    def test_update_task_empty_text(self, test_client):
        created = _create(test_client)
        response = test_client.put(f"/api/tasks/{created['id']}", json={"text": ""})
        assert response.status_code == 400

    def test_update_missing_task(self, test_client):
        assert test_client.put("/api/tasks/nonexistent", json={"text": "x"}).status_code == 404

    def test_delete_task(self, test_client):
        created = _create(test_client)
        assert test_client.delete(f"/api/tasks/{created['id']}").status_code == 204
        assert test_client.get(f"/api/tasks/{created['id']}").status_code == 404

    def test_delete_missing_task(self, test_client):
        assert test_client.delete("/api/tasks/nonexistent").status_code == 404


class TestToggleComplete:
    def test_complete_recurring_task(self, test_client):
        created = _create(
            test_client,
            deadline="2024-05-15",
            recurrence={"interval": 1, "unit": "week", "weekDays": [1, 3]},
        )

        response = test_client.post(f"/api/tasks/{created['id']}/toggle-complete")

        assert response.status_code == 200
        data = response.json()
        assert data["task"]["completed"] is True
        assert data["task"]["completed_at"] is not None
        assert data["next_task"]["deadline"] == "2024-05-20"
        assert data["next_task"]["completed"] is False
        assert data["next_task"]["recurrence"] == created["recurrence"]
        assert test_client.get("/api/tasks").json()["count"] == 2

    def test_complete_plain_task_then_reopen(self, test_client):
        created = _create(test_client)

        completed = test_client.post(f"/api/tasks/{created['id']}/toggle-complete").json()
        assert completed["task"]["completed"] is True
        assert completed["next_task"] is None

        reopened = test_client.post(f"/api/tasks/{created['id']}/toggle-complete").json()
        assert reopened["task"]["completed"] is False
        assert reopened["task"]["completed_at"] is None

    def test_toggle_reports_xp_gained(self, test_client):
        created = _create(test_client, complexity="high")

        completed = test_client.post(f"/api/tasks/{created['id']}/toggle-complete").json()
        assert completed["xp_gained"] == 20

        reopened = test_client.post(f"/api/tasks/{created['id']}/toggle-complete").json()
        assert reopened["xp_gained"] == 0

    def test_toggle_missing_task(self, test_client):
        assert test_client.post("/api/tasks/nonexistent/toggle-complete").status_code == 404


class TestRecurrenceEndpoints:
    def test_preview_custom_form(self, test_client):
        response = test_client.post(
            "/api/recurrence/preview",
            json={
                "form": {
                    "enabled": True,
                    "preset": "custom",
                    "interval": 1,
                    "unit": "month",
                    "month_day": 31,
                    "use_specific_month_day": True,
                },
                "deadline": "2024-01-31",
            },
        )

        assert response.status_code == 200
        data = response.json()
        assert data["recurrence"] == {"interval": 1, "unit": "month", "monthDay": 31}
        assert data["description"] == "31st of each month"
        assert data["next_deadline"] == "2024-02-29"

    def test_preview_disabled_form(self, test_client):
        response = test_client.post("/api/recurrence/preview", json={"form": {"enabled": False}})
        data = response.json()
        assert data["recurrence"] is None
        assert data["description"] == ""
        assert data["next_deadline"] is None

    def test_preview_invalid_interval(self, test_client):
        response = test_client.post(
            "/api/recurrence/preview",
            json={"form": {"enabled": True, "preset": "custom", "interval": 0}},
        )
        assert response.status_code == 422

    def test_validate(self, test_client):
        response = test_client.post(
            "/api/recurrence/validate",
            json={"recurrence": {"interval": 2.5, "unit": "week", "weekDays": [5, 1, 1]}},
        )

        data = response.json()
        assert data["recurrence"] == {"interval": 2, "unit": "week", "weekDays": [1, 5]}
        assert data["description"] == "Every 2 weeks on Mon, Fri"
        assert data["form"]["preset"] == "custom"
        assert data["form"]["week_days"] == [1, 5]

    def test_validate_huge_interval(self, test_client):
        huge = "1" + "0" * 400
        response = test_client.post(
            "/api/recurrence/validate",
            content='{"recurrence": {"interval": ' + huge + ', "unit": "day"}}',
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 200
        assert response.json()["recurrence"] == {"interval": 99, "unit": "day"}

    def test_create_task_huge_interval(self, test_client):
        huge = "9" * 401
        response = test_client.post(
            "/api/tasks",
            content='{"text": "x", "recurrence": {"interval": ' + huge + ', "unit": "week"}}',
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 201
        assert response.json()["task"]["recurrence"] == {"interval": 99, "unit": "week"}

    def test_validate_garbage(self, test_client):
        data = test_client.post("/api/recurrence/validate", json={"recurrence": "Weekly"}).json()
        assert data["recurrence"] is None
        assert data["form"]["enabled"] is False


class TestAiSanitizeEndpoints:
    def test_parse_task_from_fenced_text(self, test_client):
        response = test_client.post(
            "/api/ai/parse-task/sanitize",
            json={
                "input": "gym every weekday",
                "response": '```json\n{"title": "Gym", "quadrant": "not-urgent-important", '
                            '"recurrence": {"interval": 1, "unit": "week", "weekDays": [1,2,3,4,5]}}\n```',
            },
        )

        assert response.status_code == 200
        data = response.json()
        assert data["title"] == "Gym"
        assert data["quadrant"] == "not-urgent-important"
        assert data["complexity"] == "medium"
        assert data["recurrence"] == {"interval": 1, "unit": "week", "weekDays": [1, 2, 3, 4, 5]}

    def test_parse_task_unparseable(self, test_client):
        data = test_client.post(
            "/api/ai/parse-task/sanitize", json={"input": "call mom", "response": "sorry, I can't"}
        ).json()
        assert data["title"] == "call mom"
        assert data["quadrant"] == "not-urgent-not-important"
        assert data["recurrence"] is None

    def test_sort_tasks(self, test_client):
        data = test_client.post(
            "/api/ai/sort-tasks/sanitize",
            json={"response": [{"text": "Taxes", "quadrant": "urgent-important", "recurrence": "yearly"}, {"x": 1}]},
        ).json()
        assert data == [
            {"text": "Taxes", "quadrant": "urgent-important", "complexity": "medium", "recurrence": "yearly"}
        ]


class TestStatsAndNotifications:
    def test_yesterday_stats(self, test_client):
        created = _create(test_client, complexity="high")
        test_client.post(f"/api/tasks/{created['id']}/toggle-complete")

        # Completed today, so not counted for yesterday
        data = test_client.get("/api/stats/yesterday").json()
        assert data == {"yesterday_count": 0, "yesterday_xp": 0}

    def test_eligibility_flow(self, test_client):
        data = test_client.get("/api/notifications/eligibility").json()
        assert data["is_eligible"] is False

        test_client.post("/api/notifications/eligibility/session")
        data = test_client.post("/api/notifications/eligibility/session").json()
        assert data["sessions"] == 2
        assert data["is_eligible"] is True

    def test_eligibility_task_completed(self, test_client):
        data = test_client.post("/api/notifications/eligibility/task-completed").json()
        assert data["completed_count"] == 1
        assert data["is_eligible"] is True

    def test_unknown_eligibility_event(self, test_client):
        assert test_client.post("/api/notifications/eligibility/bogus").status_code == 404
