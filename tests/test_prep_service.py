"""Tests for interview-prep schedule generation and fallback."""

import time

import pytest

from app.services.prep_service import (
    SOURCE_AI, SOURCE_FALLBACK, MalformedScheduleError, PrepScheduleService,
    build_fallback_schedule, validate_prep_schedule
)
from conftest import FakeAIClient


def ai_schedule(days=7):
    return {
        "prepSchedule": {
            "schedule": [
                {"day": i, "title": f"Day {i}", "focus": "focus", "tasks": ["t"],
                 "resources": ["r"], "timeEstimate": "1 hour"}
                for i in range(1, days + 1)
            ],
            "keySkills": ["Python"],
            "interviewTips": ["Breathe"]
        }
    }


class SlowAIClient(FakeAIClient):
    def generate_prep_schedule(self, job_description, position, company):
        time.sleep(0.5)
        return ai_schedule()


class TestFallbackSchedule:
    def test_seven_fixed_days(self):
        schedule = build_fallback_schedule("SDE Intern", "Acme")
        titles = [d["title"] for d in schedule["schedule"]]
        assert titles == [
            "Company Research", "Technical Fundamentals", "Deep Dive Technical",
            "Behavioral Preparation", "Mock Interviews", "Final Review", "Rest & Confidence"
        ]
        assert [d["day"] for d in schedule["schedule"]] == list(range(1, 8))
        assert len(schedule["keySkills"]) == 4
        assert len(schedule["interviewTips"]) == 5

    def test_company_named_in_research_day(self):
        schedule = build_fallback_schedule("SDE Intern", "Acme")
        assert "Acme" in schedule["schedule"][0]["focus"]


class TestValidatePrepSchedule:
    def test_accepts_wrapped_body(self):
        result = validate_prep_schedule(ai_schedule())
        assert len(result["schedule"]) == 7
        assert result["keySkills"] == ["Python"]

    def test_accepts_inner_object(self):
        result = validate_prep_schedule(ai_schedule()["prepSchedule"])
        assert result["schedule"][6]["day"] == 7

    def test_short_schedule_rejected(self):
        with pytest.raises(MalformedScheduleError):
            validate_prep_schedule(ai_schedule(days=5))

    def test_non_object_rejected(self):
        with pytest.raises(MalformedScheduleError):
            validate_prep_schedule(["not", "a", "dict"])


class TestPrepScheduleService:
    def test_uses_ai_output_when_valid(self):
        fake = FakeAIClient(response=ai_schedule())
        schedule, source = PrepScheduleService(ai_client=fake, timeout_seconds=2).generate("jd", "SDE", "Acme")
        assert source == SOURCE_AI
        assert schedule["schedule"][0]["title"] == "Day 1"
        assert fake.calls == [("jd", "SDE", "Acme")]

    def test_not_configured_uses_fallback_without_calling(self):
        fake = FakeAIClient(response=ai_schedule(), configured=False)
        schedule, source = PrepScheduleService(ai_client=fake).generate("jd", "SDE", "Acme")
        assert source == SOURCE_FALLBACK
        assert fake.calls == []
        assert schedule == build_fallback_schedule("SDE", "Acme")

    def test_error_uses_fallback(self):
        fake = FakeAIClient(response=RuntimeError("boom"))
        _, source = PrepScheduleService(ai_client=fake, timeout_seconds=2).generate("jd", "SDE", "Acme")
        assert source == SOURCE_FALLBACK

    def test_malformed_output_uses_fallback(self):
        fake = FakeAIClient(response={"prepSchedule": {"schedule": []}})
        _, source = PrepScheduleService(ai_client=fake, timeout_seconds=2).generate("jd", "SDE", "Acme")
        assert source == SOURCE_FALLBACK

    def test_timeout_uses_fallback(self):
        slow = SlowAIClient()
        started = time.monotonic()
        _, source = PrepScheduleService(ai_client=slow, timeout_seconds=0.05).generate("jd", "SDE", "Acme")
        assert source == SOURCE_FALLBACK
        assert time.monotonic() - started < 0.4
