"""
Interview-Prep AI Client

The generator endpoint is OpenAI-compatible (DeepSeek by default), so we
use the openai library.

COST OPTIMIZATION:
- Use deepseek-chat model (cheapest)
- Keep prompts short and structured
- Strict JSON output
- Result is stored on the application row, never regenerated implicitly
"""
import json

import structlog
from openai import OpenAI

from app.core.config import get_settings

settings = get_settings()
logger = structlog.get_logger(__name__)


PREP_SYSTEM_PROMPT = """You are an interview coach. Build a 7-day interview preparation plan.
Return ONLY valid JSON in this format:
{
  "prepSchedule": {
    "schedule": [
      {"day": 1, "title": "string", "focus": "string", "tasks": ["string"],
       "resources": ["string"], "timeEstimate": "string"}
    ],
    "keySkills": ["string"],
    "interviewTips": ["string"]
  }
}
The schedule must have exactly 7 days numbered 1 to 7.
Return ONLY the JSON, no explanation."""


class AIClient:
    """
    Wrapper for the text-generation API.
    """

    def __init__(self):
        self.client = OpenAI(
            api_key=settings.ai_api_key or "unset",
            base_url=settings.ai_base_url,
            timeout=settings.ai_timeout_seconds,
            max_retries=0
        )
        self.model = settings.ai_model

    @property
    def is_configured(self) -> bool:
        return bool(settings.ai_api_key)

    def _call_api(self, system_prompt: str, user_content: str, max_tokens: int = 1000) -> str:
        """
        Internal method to call the API.
        Returns raw text response.
        """
        response = self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_content}
            ],
            max_tokens=max_tokens,
            temperature=0.4
        )
        return response.choices[0].message.content

    def _extract_json(self, text: str) -> dict:
        """
        Extract JSON from API response.
        Handles cases where model wraps JSON in markdown code blocks.
        """
        text = text.strip()
        if text.startswith("```json"):
            text = text[7:]
        if text.startswith("```"):
            text = text[3:]
        if text.endswith("```"):
            text = text[:-3]

        return json.loads(text.strip())

    def generate_prep_schedule(self, job_description: str, position: str, company: str) -> dict:
        """
        Ask the model for a 7-day prep schedule.

        Returns the decoded response body, expected shape:
            {"prepSchedule": {"schedule": [...], "keySkills": [...], "interviewTips": [...]}}
        """
        payload = json.dumps({
            "jobDescription": job_description,
            "position": position,
            "company": company
        })
        response = self._call_api(PREP_SYSTEM_PROMPT, payload, max_tokens=2000)
        return self._extract_json(response)

    def test_connection(self) -> bool:
        """Test if the API is reachable"""
        try:
            response = self._call_api(
                "You are a test assistant.",
                "Reply with exactly: OK",
                max_tokens=10
            )
            return "OK" in response.upper()
        except Exception as e:
            logger.warning("ai_connection_failed", error=str(e))
            return False


# Singleton instance
_ai_client: AIClient = None


def get_ai_client() -> AIClient:
    """Get or create AI client (singleton pattern)"""
    global _ai_client
    if _ai_client is None:
        _ai_client = AIClient()
    return _ai_client
