"""
Calendar Routes

GET /calendar/events - Events starting in a month (optional type filter)
POST /calendar/events - Add an event
DELETE /calendar/events/{event_id} - Delete an event
GET /calendar/event-types - Event types with display labels
"""

from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, HTTPException, Depends, Query
from sqlalchemy import text

from app.db.postgres import get_db_session, execute_raw_sql
from app.core.auth import get_current_student
from app.services.serializers import event_response
from app.utils.json_columns import to_db_timestamp, utc_now
from app.schemas.schemas import EventType, EventCreate, EventResponse, EventTypeInfo, MessageResponse

router = APIRouter(prefix="/calendar", tags=["Calendar"])

EVENT_TYPE_LABELS = {
    EventType.exam: "University Exam",
    EventType.hackathon: "Hackathon",
    EventType.deadline: "Course Deadline",
    EventType.personal: "Personal Task",
    EventType.mentor_meeting: "Mentor Meeting",
}

EVENT_COLUMNS = "event_id, title, description, event_type, start_date, end_date, created_at"


def month_bounds(year: int, month: int):
    """[first day of month, first day of next month)"""
    start = datetime(year, month, 1)
    end = datetime(year + 1, 1, 1) if month == 12 else datetime(year, month + 1, 1)
    return start, end


def parse_event_types(raw: Optional[str]) -> Optional[set]:
    """'exam,hackathon' -> {EventType.exam, EventType.hackathon}"""
    if not raw:
        return None
    selected = set()
    for part in raw.split(","):
        part = part.strip()
        if not part:
            continue
        try:
            selected.add(EventType(part))
        except ValueError:
            raise HTTPException(status_code=400, detail=f"Unknown event type '{part}'")
    return selected or None


@router.get("/events", response_model=List[EventResponse])
async def list_events(
    year: Optional[int] = Query(None, ge=1970, le=9999),
    month: Optional[int] = Query(None, ge=1, le=12),
    types: Optional[str] = Query(None, description="Comma-separated event types"),
    student: dict = Depends(get_current_student)
):
    """Events whose start falls in the given UTC month (default: current month), ordered by start."""
    today = utc_now()
    start, end = month_bounds(year or today.year, month or today.month)
    selected = parse_event_types(types)

    rows = execute_raw_sql(f"""
        SELECT {EVENT_COLUMNS} FROM calendar_events
        WHERE student_id = :sid AND start_date >= :start AND start_date < :end
        ORDER BY start_date, event_id
    """, {"sid": student["user_id"], "start": to_db_timestamp(start), "end": to_db_timestamp(end)})

    events = [event_response(r) for r in rows]
    if selected:
        events = [e for e in events if e.event_type in selected]
    return events


@router.post("/events", response_model=EventResponse, status_code=201)
async def create_event(data: EventCreate, student: dict = Depends(get_current_student)):
    """Add a calendar event."""
    with get_db_session() as db:
        result = db.execute(
            text(f"""
                INSERT INTO calendar_events (student_id, title, description, event_type, start_date, end_date)
                VALUES (:sid, :title, :description, :event_type, :start_date, :end_date)
                RETURNING {EVENT_COLUMNS}
            """),
            {
                "sid": student["user_id"],
                "title": data.title.strip(),
                "description": data.description,
                "event_type": data.event_type.value,
                "start_date": to_db_timestamp(data.start_date),
                "end_date": to_db_timestamp(data.end_date)
            }
        )
        row = dict(result.fetchone()._mapping)

    return event_response(row)


@router.delete("/events/{event_id}", response_model=MessageResponse)
async def delete_event(event_id: int, student: dict = Depends(get_current_student)):
    """Delete an event."""
    with get_db_session() as db:
        result = db.execute(
            text("DELETE FROM calendar_events WHERE event_id = :eid AND student_id = :sid RETURNING event_id"),
            {"eid": event_id, "sid": student["user_id"]}
        )
        deleted = result.fetchone()

    if not deleted:
        raise HTTPException(status_code=404, detail="Event not found")

    return MessageResponse(message="Event deleted")


@router.get("/event-types", response_model=List[EventTypeInfo])
async def list_event_types():
    """Event types with display labels."""
    return [EventTypeInfo(id=t, label=label) for t, label in EVENT_TYPE_LABELS.items()]
