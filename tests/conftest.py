"""Shared test fixtures.

The relational store is a SQLite file in a temp directory; media storage
and the prep generator are swapped for in-memory fakes through FastAPI
dependency overrides. Environment must be set before anything under
app/ is imported, because settings are read at import time.
"""

import os
import tempfile

_TEST_DIR = tempfile.mkdtemp(prefix="bridgeup_tests_")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_TEST_DIR, 'bridgeup.db')}"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["AI_API_KEY"] = ""
os.environ["MAX_UPLOAD_MB"] = "1"
os.environ["PUBLIC_BASE_URL"] = "http://testserver"
os.environ["JWT_SECRET_KEY"] = "test-secret"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import text

from app.db.postgres import get_db_session, get_engine
from app.db.tables import metadata
from app.main import app
from app.services.prep_service import PrepScheduleService, get_prep_service
from app.services.storage_service import get_media_storage, public_url
from app.utils.json_columns import encode_json

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64
PASSWORD = "secret-pass-123"


class FakeMediaStorage:
    """Dict-backed stand-in for the GridFS media store."""

    def __init__(self):
        self.objects = {}

    def upload(self, key, content, content_type, owner_id):
        self.objects[key] = (content, content_type)
        return public_url(key)

    def download(self, key):
        return self.objects.get(key)

    def delete(self, key):
        return self.objects.pop(key, None) is not None


class FakeAIClient:
    """Returns a canned response, or raises it when it is an exception."""

    def __init__(self, response=None, configured=True):
        self.response = response
        self.configured = configured
        self.calls = []

    @property
    def is_configured(self):
        return self.configured

    def generate_prep_schedule(self, job_description, position, company):
        self.calls.append((job_description, position, company))
        if isinstance(self.response, Exception):
            raise self.response
        return self.response


@pytest.fixture(autouse=True)
def reset_database():
    """Fresh schema for every test."""
    engine = get_engine()
    metadata.drop_all(engine)
    metadata.create_all(engine)
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def media_storage():
    storage = FakeMediaStorage()
    app.dependency_overrides[get_media_storage] = lambda: storage
    return storage


@pytest.fixture
def ai_client():
    fake = FakeAIClient(configured=False)
    app.dependency_overrides[get_prep_service] = lambda: PrepScheduleService(ai_client=fake, timeout_seconds=1.0)
    return fake


@pytest.fixture
def client(media_storage, ai_client):
    return TestClient(app)


# ============================================================
# HELPERS
# ============================================================

def register(client, email, role="student", full_name="Test User", **extra):
    """Register an account and return (auth headers, user json)."""
    body = {"email": email, "password": PASSWORD, "full_name": full_name, "role": role, **extra}
    response = client.post("/api/auth/register", json=body)
    assert response.status_code == 201, response.text
    data = response.json()
    return {"Authorization": f"Bearer {data['access_token']}"}, data["user"]


def create_course(title="Python Fundamentals", credits=15, skill_tags=("Python",),
                  category="Programming", university_aligned=False):
    with get_db_session() as db:
        result = db.execute(
            text("""
                INSERT INTO courses (title, description, category, skill_tags, credits,
                                     duration_hours, university_aligned)
                VALUES (:title, 'desc', :category, :skill_tags, :credits, 5, :university_aligned)
                RETURNING course_id
            """),
            {
                "title": title, "category": category, "skill_tags": encode_json(list(skill_tags)),
                "credits": credits, "university_aligned": university_aligned
            }
        )
        return result.fetchone()[0]


def create_mentor(name="Ananya Rao", expertise=("Backend", "Python"), slots=None, company="Google"):
    slots = slots or {"monday": ["10:00", "14:00"], "thursday": ["16:00"]}
    with get_db_session() as db:
        result = db.execute(
            text("""
                INSERT INTO mentors (name, title, company, university, expertise, bio, available_slots)
                VALUES (:name, 'Engineer', :company, NULL, :expertise, 'bio', :slots)
                RETURNING mentor_id
            """),
            {"name": name, "company": company, "expertise": encode_json(list(expertise)), "slots": encode_json(slots)}
        )
        return result.fetchone()[0]
