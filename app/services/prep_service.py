"""
Interview Prep Service - 7-day preparation schedules for applications.

PURPOSE:
Given {jobDescription, position, company}, produce
    {"schedule": [7 days], "keySkills": [...], "interviewTips": [...]}

FLOW:
1. Race the AI generator against a single timeout (ai_timeout_seconds)
2. Validate the JSON it returns
3. On timeout, API error or malformed output, substitute the
   deterministic local fallback schedule
4. The caller stores whichever schedule was produced on the application
"""

from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeout
from typing import Tuple

import structlog

from app.core.config import get_settings
from app.services.ai_client import AIClient, get_ai_client

settings = get_settings()
logger = structlog.get_logger(__name__)

SOURCE_AI = "ai"
SOURCE_FALLBACK = "fallback"

PREP_DAYS = 7

# Generator calls run here so the request can stop waiting at the timeout
_executor = ThreadPoolExecutor(max_workers=4, thread_name_prefix="ai-prep")


class MalformedScheduleError(ValueError):
    """AI output did not have the expected prep schedule shape."""


# ============================================================
# FALLBACK SCHEDULE
# ============================================================

def build_fallback_schedule(position: str, company: str) -> dict:
    """Deterministic schedule used whenever the generator is unavailable."""
    return {
        "schedule": [
            {
                "day": 1, "title": "Company Research", "focus": f"Understanding {company}",
                "tasks": [
                    f"Research {company} history and mission",
                    "Study recent news and announcements",
                    "Review products/services and competitors"
                ],
                "resources": ["Company website", "LinkedIn", "Glassdoor"],
                "timeEstimate": "2 hours"
            },
            {
                "day": 2, "title": "Technical Fundamentals", "focus": "Core technical skills",
                "tasks": [
                    "Review data structures and algorithms",
                    "Practice coding problems on LeetCode",
                    "Study relevant technologies from job description"
                ],
                "resources": ["LeetCode", "HackerRank", "Documentation"],
                "timeEstimate": "3 hours"
            },
            {
                "day": 3, "title": "Deep Dive Technical", "focus": "Advanced problem solving",
                "tasks": [
                    "Solve medium/hard coding problems",
                    "Review past projects for discussion points",
                    "Prepare technical examples and explanations"
                ],
                "resources": ["GitHub portfolio", "Technical blogs", "System design resources"],
                "timeEstimate": "3 hours"
            },
            {
                "day": 4, "title": "Behavioral Preparation", "focus": "STAR method stories",
                "tasks": [
                    "Prepare 5 STAR method stories",
                    "Practice leadership and teamwork examples",
                    "Review conflict resolution scenarios"
                ],
                "resources": ["Interview guides", "STAR method templates"],
                "timeEstimate": "2 hours"
            },
            {
                "day": 5, "title": "Mock Interviews", "focus": "Practice sessions",
                "tasks": [
                    "Complete technical mock interview",
                    "Complete behavioral mock interview",
                    "Get feedback and iterate"
                ],
                "resources": ["Pramp", "Interviewing.io", "Peers"],
                "timeEstimate": "3 hours"
            },
            {
                "day": 6, "title": "Final Review", "focus": "Consolidation",
                "tasks": [
                    "Review weak areas identified in mocks",
                    "Prepare thoughtful questions for interviewer",
                    "Finalize logistics and test setup"
                ],
                "resources": ["Notes", "Calendar", "Interview checklist"],
                "timeEstimate": "2 hours"
            },
            {
                "day": 7, "title": "Rest & Confidence", "focus": "Mental preparation",
                "tasks": [
                    "Light review of key concepts only",
                    "Get good sleep (8+ hours)",
                    "Prepare outfit and test equipment"
                ],
                "resources": ["Meditation apps", "Light reading"],
                "timeEstimate": "1 hour"
            }
        ],
        "keySkills": ["Problem Solving", "Communication", "Technical Knowledge", "Collaboration"],
        "interviewTips": [
            "Be specific with examples - use the STAR method",
            "Ask clarifying questions before diving into solutions",
            "Show enthusiasm for the role and company",
            "Think out loud during technical problems",
            "Have 3-5 thoughtful questions prepared for the interviewer"
        ]
    }


# ============================================================
# JSON VALIDATION HELPERS
# ============================================================

def _string_list(value) -> list:
    if not isinstance(value, list):
        return []
    return [str(v).strip() for v in value if v]


def validate_prep_schedule(data: dict) -> dict:
    """
    Validate and sanitize the generator response.

    Accepts either the full body ({"prepSchedule": {...}}) or the inner
    schedule object.

    Raises:
        MalformedScheduleError if there is no usable 7-day schedule
    """
    if not isinstance(data, dict):
        raise MalformedScheduleError("response is not an object")

    prep = data.get("prepSchedule", data)
    if not isinstance(prep, dict):
        raise MalformedScheduleError("prepSchedule is not an object")

    days = prep.get("schedule")
    if not isinstance(days, list) or not days:
        raise MalformedScheduleError("schedule is missing")

    validated_days = []
    for index, day in enumerate(days[:PREP_DAYS], start=1):
        if not isinstance(day, dict):
            raise MalformedScheduleError(f"day {index} is not an object")
        title = str(day.get("title", "")).strip()
        if not title:
            raise MalformedScheduleError(f"day {index} has no title")
        validated_days.append({
            "day": index,
            "title": title,
            "focus": str(day.get("focus", "")).strip(),
            "tasks": _string_list(day.get("tasks")),
            "resources": _string_list(day.get("resources")),
            "timeEstimate": str(day.get("timeEstimate", "")).strip()
        })

    if len(validated_days) < PREP_DAYS:
        raise MalformedScheduleError(f"expected {PREP_DAYS} days, got {len(validated_days)}")

    return {
        "schedule": validated_days,
        "keySkills": _string_list(prep.get("keySkills")),
        "interviewTips": _string_list(prep.get("interviewTips"))
    }


# ============================================================
# PREP SCHEDULE SERVICE
# ============================================================

class PrepScheduleService:
    """
    Produces prep schedules, falling back locally when the generator is
    slow, failing or not configured.
    """

    def __init__(self, ai_client: AIClient = None, timeout_seconds: float = None):
        self.ai_client = ai_client or get_ai_client()
        self.timeout_seconds = timeout_seconds if timeout_seconds is not None else settings.ai_timeout_seconds

    def generate(self, job_description: str, position: str, company: str) -> Tuple[dict, str]:
        """
        Returns:
            (schedule, source) where source is "ai" or "fallback"
        """
        if not self.ai_client.is_configured:
            logger.info("prep_fallback_used", reason="not_configured", company=company)
            return build_fallback_schedule(position, company), SOURCE_FALLBACK

        future = _executor.submit(
            self.ai_client.generate_prep_schedule, job_description, position, company
        )
        try:
            raw = future.result(timeout=self.timeout_seconds)
            schedule = validate_prep_schedule(raw)
        except FutureTimeout:
            future.cancel()
            logger.warning("prep_fallback_used", reason="timeout", timeout=self.timeout_seconds)
            return build_fallback_schedule(position, company), SOURCE_FALLBACK
        except Exception as e:
            logger.warning("prep_fallback_used", reason="error", error=str(e))
            return build_fallback_schedule(position, company), SOURCE_FALLBACK

        logger.info("prep_schedule_generated", company=company, position=position)
        return schedule, SOURCE_AI


def get_prep_service() -> PrepScheduleService:
    """FastAPI dependency - prep schedule service instance."""
    return PrepScheduleService()
