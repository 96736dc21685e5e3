"""Tests for /api/projects and /api/certificates."""

from conftest import PNG_BYTES, register

PROJECT_FORM = {
    "title": "Campus Marketplace",
    "project_type": "collaborative",
    "description": "Buy and sell textbooks",
    "contribution_summary": "Built the payments flow",
    "tech_stack": "React, FastAPI,, PostgreSQL ",
    "github_link": "https://github.com/team/marketplace",
}


class TestProjects:
    def test_create_with_images_awards_25(self, client, media_storage):
        headers, user = register(client, "builder@example.com")
        response = client.post(
            "/api/projects", headers=headers, data=PROJECT_FORM,
            files=[
                ("images", ("one.png", PNG_BYTES, "image/png")),
                ("images", ("two.jpg", PNG_BYTES, "image/jpeg")),
            ]
        )
        assert response.status_code == 201, response.text
        data = response.json()
        assert data["credits_awarded"] == 25
        assert data["total_credits"] == 25
        assert data["tier"] == "Beginner"

        project = data["project"]
        assert project["tech_stack"] == ["React", "FastAPI", "PostgreSQL"]
        assert project["credits_earned"] == 25
        assert len(project["images"]) == 2
        prefix = f"{user['user_id']}/{project['project_id']}/"
        assert all(k.startswith(prefix) for k in media_storage.objects)
        assert len(media_storage.objects) == 2

    def test_create_without_images(self, client):
        headers, _ = register(client, "noimg@example.com")
        response = client.post("/api/projects", headers=headers, data=PROJECT_FORM)
        assert response.status_code == 201
        assert response.json()["project"]["images"] == []

    def test_oversized_image_rejected_before_insert(self, client, media_storage):
        headers, _ = register(client, "huge@example.com")
        big = b"\x00" * (1024 * 1024 + 1)
        response = client.post(
            "/api/projects", headers=headers, data=PROJECT_FORM,
            files=[("images", ("big.png", big, "image/png"))]
        )
        assert response.status_code == 413
        assert client.get("/api/projects", headers=headers).json() == []
        assert media_storage.objects == {}

    def test_invalid_project_type(self, client):
        headers, _ = register(client, "type@example.com")
        response = client.post("/api/projects", headers=headers, data={**PROJECT_FORM, "project_type": "hobby"})
        assert response.status_code == 422

    def test_list_newest_first(self, client):
        headers, _ = register(client, "lister@example.com")
        client.post("/api/projects", headers=headers, data={**PROJECT_FORM, "title": "First"})
        client.post("/api/projects", headers=headers, data={**PROJECT_FORM, "title": "Second"})
        titles = [p["title"] for p in client.get("/api/projects", headers=headers).json()]
        assert titles == ["Second", "First"]

    def test_delete_keeps_credits(self, client, media_storage):
        headers, _ = register(client, "deleter@example.com")
        created = client.post(
            "/api/projects", headers=headers, data=PROJECT_FORM,
            files=[("images", ("one.png", PNG_BYTES, "image/png"))]
        ).json()
        project_id = created["project"]["project_id"]

        response = client.delete(f"/api/projects/{project_id}", headers=headers)
        assert response.status_code == 200
        assert media_storage.objects == {}
        assert client.get("/api/projects", headers=headers).json() == []
        assert client.get("/api/auth/me", headers=headers).json()["total_credits"] == 25

    def test_cannot_delete_foreign_project(self, client):
        owner_headers, _ = register(client, "owner@example.com")
        other_headers, _ = register(client, "other@example.com")
        project_id = client.post("/api/projects", headers=owner_headers, data=PROJECT_FORM).json()["project"]["project_id"]
        assert client.delete(f"/api/projects/{project_id}", headers=other_headers).status_code == 404


class TestCertificates:
    def test_upload_list_delete(self, client, media_storage):
        headers, user = register(client, "certs@example.com")
        response = client.post(
            "/api/certificates", headers=headers,
            data={"title": "AWS Cloud Practitioner", "issuer": "Amazon", "issue_date": "2026-05-01"},
            files={"file": ("aws.png", PNG_BYTES, "image/png")}
        )
        assert response.status_code == 201, response.text
        cert = response.json()
        assert cert["verified"] is False
        assert cert["issue_date"] == "2026-05-01"
        assert f"/api/media/{user['user_id']}/certificates/" in cert["image_url"]

        listed = client.get("/api/certificates", headers=headers).json()
        assert [c["certificate_id"] for c in listed] == [cert["certificate_id"]]

        assert client.delete(f"/api/certificates/{cert['certificate_id']}", headers=headers).status_code == 200
        assert media_storage.objects == {}
        assert client.delete(f"/api/certificates/{cert['certificate_id']}", headers=headers).status_code == 404

    def test_certificates_do_not_award_credits(self, client):
        headers, _ = register(client, "nocredit@example.com")
        client.post(
            "/api/certificates", headers=headers,
            data={"title": "Course", "issuer": "Someone"},
            files={"file": ("c.png", PNG_BYTES, "image/png")}
        )
        assert client.get("/api/auth/me", headers=headers).json()["total_credits"] == 0
