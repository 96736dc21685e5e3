"""Tests for the recruiter endpoints under /api/candidates."""

import pytest

from conftest import PNG_BYTES, create_course, register


@pytest.fixture
def recruiter(client):
    headers, _ = register(client, "hr@example.com", role="recruiter", full_name="Hiring Manager", company="Acme")
    return headers


@pytest.fixture
def students(client):
    """Three students: Asha (Python, 40), Ben (no courses, 25), Chen (Python+ML, 60)."""
    python = create_course("Python Fundamentals", 15, ["Python"])
    sql = create_course("SQL Basics", 25, ["SQL"])
    ml = create_course("ML Basics", 45, ["Machine Learning", "Python"])

    asha, asha_user = register(client, "asha@example.com", full_name="Asha Kumar", university="IIT Delhi")
    ben, ben_user = register(client, "ben@example.com", full_name="Ben Joseph", university="NIT Trichy")
    chen, chen_user = register(client, "chen@example.com", full_name="Chen Li", university="IIT Bombay")

    for course_id in (python, sql):
        client.post(f"/api/courses/{course_id}/complete", headers=asha)
    client.post("/api/projects", headers=ben, data={"title": "Portfolio", "project_type": "unpaid"})
    for course_id in (python, ml):
        client.post(f"/api/courses/{course_id}/complete", headers=chen)

    return {"asha": asha_user, "ben": ben_user, "chen": chen_user, "asha_headers": asha}


def names(response):
    return [c["full_name"] for c in response.json()["candidates"]]


class TestSearch:
    def test_ranked_by_credits(self, client, recruiter, students):
        response = client.get("/api/candidates", headers=recruiter)
        assert response.status_code == 200
        data = response.json()
        assert names(response) == ["Chen Li", "Asha Kumar", "Ben Joseph"]
        assert [c["total_credits"] for c in data["candidates"]] == [60, 40, 25]
        assert [c["tier"] for c in data["candidates"]] == ["Intermediate", "Beginner", "Beginner"]
        assert data["order"] == "desc"

    def test_ascending(self, client, recruiter, students):
        response = client.get("/api/candidates?order=asc", headers=recruiter)
        assert names(response) == ["Ben Joseph", "Asha Kumar", "Chen Li"]

    def test_skills_from_completed_courses(self, client, recruiter, students):
        data = client.get("/api/candidates", headers=recruiter).json()
        skills = {c["full_name"]: c["skills"] for c in data["candidates"]}
        assert skills["Asha Kumar"] == ["Python", "SQL"]
        assert skills["Chen Li"] == ["Python", "Machine Learning"]
        assert skills["Ben Joseph"] == []

    def test_text_query(self, client, recruiter, students):
        assert names(client.get("/api/candidates?q=iit", headers=recruiter)) == ["Chen Li", "Asha Kumar"]
        assert names(client.get("/api/candidates?q=machine", headers=recruiter)) == ["Chen Li"]

    def test_no_react_skill_is_empty(self, client, recruiter, students):
        response = client.get("/api/candidates?q=React", headers=recruiter)
        assert response.status_code == 200
        assert response.json()["candidates"] == []
        assert response.json()["total"] == 0

    def test_selected_skills(self, client, recruiter, students):
        response = client.get("/api/candidates?skills=SQL&skills=Machine Learning", headers=recruiter)
        assert names(response) == ["Chen Li", "Asha Kumar"]
        assert names(client.get("/api/candidates?skills=sql", headers=recruiter)) == []

    def test_recruiters_not_listed(self, client, recruiter, students):
        assert "Hiring Manager" not in names(client.get("/api/candidates", headers=recruiter))

    def test_students_forbidden(self, client, students):
        headers, _ = register(client, "peek@example.com")
        response = client.get("/api/candidates", headers=headers)
        assert response.status_code == 403
        assert response.json()["detail"] == "Recruiters only"


class TestProfile:
    def test_candidate_profile(self, client, recruiter, students):
        ben_id = students["ben"]["user_id"]
        response = client.get(f"/api/candidates/{ben_id}", headers=recruiter)
        assert response.status_code == 200
        data = response.json()
        assert data["candidate"]["total_credits"] == 25
        assert [p["title"] for p in data["projects"]] == ["Portfolio"]
        assert data["certificates"] == []
        assert data["completed_courses"] == 0

    def test_profile_includes_certificates(self, client, recruiter, students):
        client.post(
            "/api/certificates", headers=students["asha_headers"],
            data={"title": "SQL Cert", "issuer": "Oracle"},
            files={"file": ("sql.png", PNG_BYTES, "image/png")}
        )
        data = client.get(f"/api/candidates/{students['asha']['user_id']}", headers=recruiter).json()
        assert [c["title"] for c in data["certificates"]] == ["SQL Cert"]
        assert data["completed_courses"] == 2

    def test_unknown_candidate(self, client, recruiter, students):
        assert client.get("/api/candidates/999", headers=recruiter).status_code == 404


class TestOverview:
    def test_overview(self, client, recruiter, students):
        data = client.get("/api/candidates/overview", headers=recruiter).json()
        assert [t["label"] for t in data["tiers"]] == ["0-49", "50-99", "100-199", "200+"]
        assert {r["source"] for r in data["credit_rules"]} == {"course", "project"}
        assert data["tier_counts"] == {"Beginner": 2, "Intermediate": 1, "Advanced": 0, "Expert": 0}
        assert data["total_students"] == 3
