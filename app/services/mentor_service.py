"""
Mentor booking helpers.

A booking names a weekday + "HH:MM" slot from the mentor's
available_slots; the session is scheduled on the next occurrence of that
weekday strictly after today (booking on a Monday for "monday" means the
following Monday).
"""

from datetime import datetime, timedelta
from typing import Dict, List, Optional

WEEKDAYS = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]


def slot_is_available(available_slots: Dict[str, List[str]], day: str, time: str) -> bool:
    times = {k.lower(): v for k, v in (available_slots or {}).items()}.get(day.lower(), [])
    return time in times


def next_booking_date(day: str, time: str, now: Optional[datetime] = None) -> datetime:
    """
    Resolve a weekday slot to a concrete datetime.

    Raises:
        ValueError for an unknown weekday or malformed time
    """
    day = day.lower()
    if day not in WEEKDAYS:
        raise ValueError(f"Unknown weekday '{day}'")
    hours, minutes = (int(part) for part in time.split(":"))
    if not (0 <= hours < 24 and 0 <= minutes < 60):
        raise ValueError(f"Invalid time '{time}'")

    now = now or datetime.now()
    days_ahead = WEEKDAYS.index(day) - now.weekday()
    if days_ahead <= 0:
        days_ahead += 7

    target = now + timedelta(days=days_ahead)
    return target.replace(hour=hours, minute=minutes, second=0, microsecond=0)


def matches_mentor_search(mentor: dict, search: str) -> bool:
    """Case-insensitive match on name, expertise, company or university."""
    if not search:
        return True
    needle = search.lower()
    return (
        needle in (mentor.get("name") or "").lower()
        or any(needle in e.lower() for e in mentor.get("expertise") or [])
        or needle in (mentor.get("company") or "").lower()
        or needle in (mentor.get("university") or "").lower()
    )
