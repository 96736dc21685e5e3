"""
Student Routes

GET /students/dashboard - Overview counts for the student home screen
"""

from datetime import timedelta

from fastapi import APIRouter, Depends
from sqlalchemy import text

from app.db.postgres import get_db_session
from app.core.auth import get_current_student
from app.services.ranking_service import classify_credits
from app.utils.json_columns import to_db_timestamp, utc_now
from app.schemas.schemas import ApplicationStatus, BookingStatus, StudentDashboardResponse

router = APIRouter(prefix="/students", tags=["Students"])

# Window for "upcoming" calendar events
UPCOMING_DAYS = 7


@router.get("/dashboard", response_model=StudentDashboardResponse)
async def get_dashboard(student: dict = Depends(get_current_student)):
    """Counts across tracker, courses, gallery, vault, calendar and bookings."""
    sid = student["user_id"]
    now = utc_now()

    with get_db_session() as db:
        result = db.execute(
            text("SELECT status, COUNT(*) FROM applications WHERE student_id = :id GROUP BY status"),
            {"id": sid}
        )
        by_status = {s.value: 0 for s in ApplicationStatus}
        for status, count in result.fetchall():
            by_status[status] = count

        def count(sql: str, **params) -> int:
            return int(db.execute(text(sql), {"id": sid, **params}).scalar() or 0)

        completed = count("SELECT COUNT(*) FROM student_courses WHERE student_id = :id AND completed = TRUE")
        projects = count("SELECT COUNT(*) FROM projects WHERE student_id = :id")
        certificates = count("SELECT COUNT(*) FROM certificates WHERE student_id = :id")
        upcoming = count(
            """
            SELECT COUNT(*) FROM calendar_events
            WHERE student_id = :id AND start_date >= :start AND start_date < :end
            """,
            start=to_db_timestamp(now),
            end=to_db_timestamp(now + timedelta(days=UPCOMING_DAYS))
        )
        pending = count(
            "SELECT COUNT(*) FROM mentor_bookings WHERE student_id = :id AND status = :status",
            status=BookingStatus.pending.value
        )

    credits = int(student["total_credits"])
    return StudentDashboardResponse(
        full_name=student["full_name"],
        total_credits=credits,
        tier=classify_credits(credits),
        applications_by_status=by_status,
        completed_courses=completed,
        projects=projects,
        certificates=certificates,
        upcoming_events=upcoming,
        pending_bookings=pending
    )
