"""
Helpers for list/mapping columns stored as JSON text.

The same encoding is used on PostgreSQL and SQLite so raw text() queries
return identical shapes on both.
"""

import json
from datetime import date, datetime, timezone
from typing import Any, Optional


def encode_json(value: Any) -> str:
    return json.dumps(value)


def decode_list(raw: Any) -> list:
    """Decode a JSON list column; tolerates NULL and already-decoded values."""
    if raw is None or raw == "":
        return []
    if isinstance(raw, list):
        return raw
    value = json.loads(raw)
    return value if isinstance(value, list) else []


def decode_dict(raw: Any) -> Optional[dict]:
    if raw is None or raw == "":
        return None
    if isinstance(raw, dict):
        return raw
    value = json.loads(raw)
    return value if isinstance(value, dict) else None


def utc_now() -> datetime:
    """Current time as naive UTC, the form every stored timestamp takes."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_db_timestamp(value: Optional[datetime]) -> Optional[str]:
    """
    Normalize a timestamp for binding: aware values become naive UTC,
    naive values are taken as UTC already, then ISO text. ISO text sorts
    correctly, which the calendar month and dashboard window queries rely on.
    """
    if value is None:
        return None
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value.isoformat()


def to_db_date(value: Optional[date]) -> Optional[str]:
    return value.isoformat() if value else None
