"""
Mentor Connect Routes

GET /mentors - Mentor directory (search on name, expertise, company, university)
GET /mentors/bookings - Own bookings with mentor details, latest session first
POST /mentors/{mentor_id}/book - Book a weekly slot with a mentor
"""

from typing import List, Optional

import structlog
from fastapi import APIRouter, HTTPException, Depends, Query
from sqlalchemy import text

from app.db.postgres import get_db_session, execute_raw_sql
from app.core.auth import get_current_student
from app.services.mentor_service import matches_mentor_search, next_booking_date, slot_is_available
from app.services.serializers import mentor_response, booking_response
from app.utils.json_columns import decode_dict, decode_list, to_db_timestamp
from app.schemas.schemas import BookingStatus, BookingCreate, BookingResponse, MentorResponse

router = APIRouter(prefix="/mentors", tags=["Mentor Connect"])
logger = structlog.get_logger(__name__)

MENTOR_COLUMNS = "mentor_id, name, title, company, university, expertise, bio, avatar_url, available_slots"
BOOKING_COLUMNS = "booking_id, mentor_id, booking_date, agenda, status, meeting_link, created_at"


@router.get("", response_model=List[MentorResponse])
async def list_mentors(
    search: Optional[str] = Query(None, description="Name, expertise, company or university"),
    student: dict = Depends(get_current_student)
):
    """Mentor directory ordered by name."""
    rows = execute_raw_sql(f"SELECT {MENTOR_COLUMNS} FROM mentors ORDER BY name, mentor_id")
    mentors = [mentor_response(r) for r in rows]
    if search and search.strip():
        mentors = [m for m in mentors if matches_mentor_search(m.model_dump(), search.strip())]
    return mentors


@router.get("/bookings", response_model=List[BookingResponse])
async def list_bookings(student: dict = Depends(get_current_student)):
    """Own bookings with the mentor attached, latest session date first."""
    bookings = execute_raw_sql(f"""
        SELECT {BOOKING_COLUMNS} FROM mentor_bookings
        WHERE student_id = :id
        ORDER BY booking_date DESC, booking_id DESC
    """, {"id": student["user_id"]})

    mentors = {
        m["mentor_id"]: m
        for m in execute_raw_sql(f"SELECT {MENTOR_COLUMNS} FROM mentors")
    }
    return [booking_response(b, mentors.get(b["mentor_id"])) for b in bookings]


@router.post("/{mentor_id}/book", response_model=BookingResponse, status_code=201)
async def book_mentor(mentor_id: int, data: BookingCreate, student: dict = Depends(get_current_student)):
    """
    Book a session.

    The slot must be one of the mentor's available slots. The session is
    scheduled on the next occurrence of that weekday after today and
    starts as pending.
    """
    rows = execute_raw_sql(f"SELECT {MENTOR_COLUMNS} FROM mentors WHERE mentor_id = :id", {"id": mentor_id})
    if not rows:
        raise HTTPException(status_code=404, detail="Mentor not found")
    mentor = rows[0]

    if not slot_is_available(decode_dict(mentor["available_slots"]) or {}, data.day, data.time):
        raise HTTPException(status_code=400, detail="Selected time slot is not available for this mentor")

    try:
        booking_date = next_booking_date(data.day, data.time)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    with get_db_session() as db:
        result = db.execute(
            text(f"""
                INSERT INTO mentor_bookings (student_id, mentor_id, booking_date, agenda, status)
                VALUES (:sid, :mid, :booking_date, :agenda, :status)
                RETURNING {BOOKING_COLUMNS}
            """),
            {
                "sid": student["user_id"],
                "mid": mentor_id,
                "booking_date": to_db_timestamp(booking_date),
                "agenda": data.agenda,
                "status": BookingStatus.pending.value
            }
        )
        row = dict(result.fetchone()._mapping)

    logger.info(
        "mentor_booked",
        student_id=student["user_id"], mentor_id=mentor_id,
        expertise=decode_list(mentor["expertise"]), booking_date=booking_date.isoformat()
    )
    return booking_response(row, mentor)
