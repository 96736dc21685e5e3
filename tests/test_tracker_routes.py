"""Tests for /api/applications, /api/calendar and /api/students/dashboard."""

from datetime import date, datetime, timedelta, timezone

from app.services.prep_service import PrepScheduleService, get_prep_service
from app.main import app
from app.utils.json_columns import utc_now
from conftest import FakeAIClient, register
from test_prep_service import ai_schedule


def add_application(client, headers, company="Acme", position="SDE Intern"):
    response = client.post("/api/applications", headers=headers, json={
        "company_name": company, "position": position, "job_description": "Python, SQL"
    })
    assert response.status_code == 201, response.text
    return response.json()


class TestApplications:
    def test_created_in_wishlist_today(self, client):
        headers, _ = register(client, "tracker@example.com")
        app_json = add_application(client, headers)
        assert app_json["status"] == "wishlist"
        assert app_json["applied_date"] == date.today().isoformat()
        assert app_json["ai_prep_schedule"] is None

    def test_any_status_to_any_status(self, client):
        headers, _ = register(client, "mover@example.com")
        app_id = add_application(client, headers)["application_id"]
        for status in ["offered", "wishlist", "rejected", "interviewing", "applied"]:
            response = client.patch(f"/api/applications/{app_id}/status", headers=headers, json={"status": status})
            assert response.status_code == 200
            assert response.json()["status"] == status

    def test_unknown_status(self, client):
        headers, _ = register(client, "badstatus@example.com")
        app_id = add_application(client, headers)["application_id"]
        response = client.patch(f"/api/applications/{app_id}/status", headers=headers, json={"status": "ghosted"})
        assert response.status_code == 422

    def test_foreign_application_is_404(self, client):
        owner, _ = register(client, "a-owner@example.com")
        other, _ = register(client, "a-other@example.com")
        app_id = add_application(client, owner)["application_id"]
        response = client.patch(f"/api/applications/{app_id}/status", headers=other, json={"status": "applied"})
        assert response.status_code == 404
        assert client.delete(f"/api/applications/{app_id}", headers=other).status_code == 404

    def test_board_columns_in_order(self, client):
        headers, _ = register(client, "board@example.com")
        first = add_application(client, headers, "Acme")
        add_application(client, headers, "Globex")
        client.patch(f"/api/applications/{first['application_id']}/status", headers=headers, json={"status": "interviewing"})

        board = client.get("/api/applications/board", headers=headers).json()
        assert [c["status"] for c in board["columns"]] == ["wishlist", "applied", "interviewing", "offered", "rejected"]
        assert board["total"] == 2
        by_status = {c["status"]: [a["company_name"] for a in c["applications"]] for c in board["columns"]}
        assert by_status["wishlist"] == ["Globex"]
        assert by_status["interviewing"] == ["Acme"]

    def test_delete(self, client):
        headers, _ = register(client, "remove@example.com")
        app_id = add_application(client, headers)["application_id"]
        assert client.delete(f"/api/applications/{app_id}", headers=headers).status_code == 200
        assert client.get("/api/applications", headers=headers).json() == []


class TestPrep:
    def test_fallback_when_not_configured(self, client, ai_client):
        headers, _ = register(client, "prep@example.com")
        app_id = add_application(client, headers, "Acme")["application_id"]

        response = client.post(f"/api/applications/{app_id}/prep", headers=headers)
        assert response.status_code == 200
        data = response.json()
        assert data["source"] == "fallback"
        assert data["prep_schedule"]["schedule"][0]["title"] == "Company Research"
        assert ai_client.calls == []

        stored = client.get("/api/applications", headers=headers).json()[0]["ai_prep_schedule"]
        assert len(stored["schedule"]) == 7

    def test_ai_schedule_stored(self, client):
        fake = FakeAIClient(response=ai_schedule())
        app.dependency_overrides[get_prep_service] = lambda: PrepScheduleService(ai_client=fake, timeout_seconds=2)
        headers, _ = register(client, "ai@example.com")
        app_id = add_application(client, headers, "Globex", "Data Intern")["application_id"]

        data = client.post(f"/api/applications/{app_id}/prep", headers=headers).json()
        assert data["source"] == "ai"
        assert fake.calls == [("Python, SQL", "Data Intern", "Globex")]
        stored = client.get("/api/applications", headers=headers).json()[0]["ai_prep_schedule"]
        assert stored["keySkills"] == ["Python"]

    def test_unknown_application(self, client):
        headers, _ = register(client, "noprep@example.com")
        assert client.post("/api/applications/42/prep", headers=headers).status_code == 404


class TestCalendar:
    def test_month_window_and_type_filter(self, client):
        headers, _ = register(client, "cal@example.com")
        for title, event_type, start in [
            ("Hack Night", "hackathon", "2026-03-20T18:00:00"),
            ("DBMS Exam", "exam", "2026-03-05T09:00:00"),
            ("April task", "personal", "2026-04-01T00:00:00"),
        ]:
            response = client.post("/api/calendar/events", headers=headers, json={
                "title": title, "event_type": event_type, "start_date": start
            })
            assert response.status_code == 201, response.text

        march = client.get("/api/calendar/events?year=2026&month=3", headers=headers).json()
        assert [e["title"] for e in march] == ["DBMS Exam", "Hack Night"]

        exams = client.get("/api/calendar/events?year=2026&month=3&types=exam", headers=headers).json()
        assert [e["title"] for e in exams] == ["DBMS Exam"]

        april = client.get("/api/calendar/events?year=2026&month=4", headers=headers).json()
        assert [e["title"] for e in april] == ["April task"]

    def test_unknown_type_filter(self, client):
        headers, _ = register(client, "caltype@example.com")
        assert client.get("/api/calendar/events?types=party", headers=headers).status_code == 400

    def test_end_before_start(self, client):
        headers, _ = register(client, "calend@example.com")
        response = client.post("/api/calendar/events", headers=headers, json={
            "title": "Backwards", "start_date": "2026-03-20T18:00:00", "end_date": "2026-03-19T18:00:00"
        })
        assert response.status_code == 422

    def test_delete_and_event_types(self, client):
        headers, _ = register(client, "caldel@example.com")
        event = client.post("/api/calendar/events", headers=headers, json={
            "title": "Task", "start_date": "2026-03-20T18:00:00"
        }).json()
        assert event["event_type"] == "personal"
        assert client.delete(f"/api/calendar/events/{event['event_id']}", headers=headers).status_code == 200
        assert client.delete(f"/api/calendar/events/{event['event_id']}", headers=headers).status_code == 404

        types = client.get("/api/calendar/event-types").json()
        assert {"id": "exam", "label": "University Exam"} in types
        assert len(types) == 5

    def test_offset_start_is_filed_by_utc_month(self, client):
        headers, _ = register(client, "caltz@example.com")
        client.post("/api/calendar/events", headers=headers, json={
            "title": "Late call", "start_date": "2026-03-31T23:30:00-02:00"
        })
        march = client.get("/api/calendar/events?year=2026&month=3", headers=headers).json()
        april = client.get("/api/calendar/events?year=2026&month=4", headers=headers).json()
        assert march == []
        assert [e["title"] for e in april] == ["Late call"]


class TestDashboard:
    def test_counts(self, client):
        headers, _ = register(client, "dash@example.com", full_name="Dash Board")
        add_application(client, headers)
        soon = (utc_now() + timedelta(days=2)).replace(microsecond=0).isoformat()
        later = (utc_now() + timedelta(days=30)).replace(microsecond=0).isoformat()
        client.post("/api/calendar/events", headers=headers, json={"title": "Soon", "start_date": soon})
        client.post("/api/calendar/events", headers=headers, json={"title": "Later", "start_date": later})

        data = client.get("/api/students/dashboard", headers=headers).json()
        assert data["full_name"] == "Dash Board"
        assert data["tier"] == "Beginner"
        assert data["applications_by_status"] == {
            "wishlist": 1, "applied": 0, "interviewing": 0, "offered": 0, "rejected": 0
        }
        assert data["upcoming_events"] == 1
        assert data["projects"] == 0
        assert data["pending_bookings"] == 0

    def test_upcoming_window_compares_instants(self, client):
        headers, _ = register(client, "dashtz@example.com")
        ist = timezone(timedelta(hours=5, minutes=30))
        pst = timezone(timedelta(hours=-8))
        now = datetime.now(timezone.utc).replace(microsecond=0)
        # an hour ago, but its IST wall clock reads hours ahead of UTC
        past = (now - timedelta(hours=1)).astimezone(ist).isoformat()
        tomorrow = (now + timedelta(days=1)).astimezone(pst).isoformat()
        client.post("/api/calendar/events", headers=headers, json={"title": "Past", "start_date": past})
        client.post("/api/calendar/events", headers=headers, json={"title": "Tomorrow", "start_date": tomorrow})

        assert client.get("/api/students/dashboard", headers=headers).json()["upcoming_events"] == 1
