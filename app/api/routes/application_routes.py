"""
Internship Tracker Routes

GET /applications - Own applications, newest first
GET /applications/board - Applications grouped into kanban columns
POST /applications - Add an application (starts in wishlist)
PATCH /applications/{application_id}/status - Move between columns
DELETE /applications/{application_id} - Remove an application
POST /applications/{application_id}/prep - Generate a 7-day interview prep schedule
"""

from datetime import date
from typing import List

import structlog
from fastapi import APIRouter, HTTPException, Depends
from sqlalchemy import text

from app.db.postgres import get_db_session, execute_raw_sql
from app.core.auth import get_current_student
from app.services.prep_service import PrepScheduleService, get_prep_service
from app.services.serializers import application_response
from app.utils.json_columns import encode_json, to_db_date
from app.schemas.schemas import (
    ApplicationStatus, ApplicationCreate, ApplicationStatusUpdate, ApplicationResponse,
    BoardColumn, BoardResponse, PrepResponse, MessageResponse
)

router = APIRouter(prefix="/applications", tags=["Internship Tracker"])
logger = structlog.get_logger(__name__)

COLUMN_TITLES = {
    ApplicationStatus.wishlist: "Wishlist",
    ApplicationStatus.applied: "Applied",
    ApplicationStatus.interviewing: "Interviewing",
    ApplicationStatus.offered: "Offered",
    ApplicationStatus.rejected: "Rejected",
}

APPLICATION_COLUMNS = """
    application_id, company_name, position, job_description, status, notes,
    applied_date, deadline, ai_prep_schedule, created_at, updated_at
"""


def load_applications(student_id: int) -> List[ApplicationResponse]:
    rows = execute_raw_sql(f"""
        SELECT {APPLICATION_COLUMNS} FROM applications
        WHERE student_id = :id
        ORDER BY created_at DESC, application_id DESC
    """, {"id": student_id})
    return [application_response(r) for r in rows]


@router.get("", response_model=List[ApplicationResponse])
async def list_applications(student: dict = Depends(get_current_student)):
    """Get own applications."""
    return load_applications(student["user_id"])


@router.get("/board", response_model=BoardResponse)
async def get_board(student: dict = Depends(get_current_student)):
    """Applications grouped by status, columns in board order."""
    applications = load_applications(student["user_id"])
    columns = [
        BoardColumn(
            status=status,
            title=title,
            applications=[a for a in applications if a.status == status]
        )
        for status, title in COLUMN_TITLES.items()
    ]
    return BoardResponse(columns=columns, total=len(applications))


@router.post("", response_model=ApplicationResponse, status_code=201)
async def create_application(data: ApplicationCreate, student: dict = Depends(get_current_student)):
    """Add an application. It starts in the wishlist column, dated today."""
    with get_db_session() as db:
        result = db.execute(
            text(f"""
                INSERT INTO applications (student_id, company_name, position, job_description,
                                          status, notes, applied_date, deadline)
                VALUES (:sid, :company_name, :position, :job_description,
                        :status, :notes, :applied_date, :deadline)
                RETURNING {APPLICATION_COLUMNS}
            """),
            {
                "sid": student["user_id"],
                "company_name": data.company_name.strip(),
                "position": data.position.strip(),
                "job_description": data.job_description,
                "status": ApplicationStatus.wishlist.value,
                "notes": data.notes,
                "applied_date": to_db_date(date.today()),
                "deadline": to_db_date(data.deadline)
            }
        )
        row = dict(result.fetchone()._mapping)

    return application_response(row)


@router.patch("/{application_id}/status", response_model=ApplicationResponse)
async def update_status(
    application_id: int,
    data: ApplicationStatusUpdate,
    student: dict = Depends(get_current_student)
):
    """Move an application to any column."""
    with get_db_session() as db:
        result = db.execute(
            text(f"""
                UPDATE applications SET status = :status, updated_at = CURRENT_TIMESTAMP
                WHERE application_id = :aid AND student_id = :sid
                RETURNING {APPLICATION_COLUMNS}
            """),
            {"status": data.status.value, "aid": application_id, "sid": student["user_id"]}
        )
        row = result.fetchone()

    if not row:
        raise HTTPException(status_code=404, detail="Application not found")

    logger.info("application_status_changed", application_id=application_id, status=data.status.value)
    return application_response(dict(row._mapping))


@router.delete("/{application_id}", response_model=MessageResponse)
async def delete_application(application_id: int, student: dict = Depends(get_current_student)):
    """Remove an application."""
    with get_db_session() as db:
        result = db.execute(
            text("""
                DELETE FROM applications
                WHERE application_id = :aid AND student_id = :sid
                RETURNING application_id
            """),
            {"aid": application_id, "sid": student["user_id"]}
        )
        deleted = result.fetchone()

    if not deleted:
        raise HTTPException(status_code=404, detail="Application not found")

    return MessageResponse(message="Application deleted")


# Plain def: the generator call blocks for up to ai_timeout_seconds, so it
# runs in FastAPI's threadpool instead of on the event loop.
@router.post("/{application_id}/prep", response_model=PrepResponse)
def generate_prep(
    application_id: int,
    student: dict = Depends(get_current_student),
    prep_service: PrepScheduleService = Depends(get_prep_service)
):
    """
    Generate a 7-day interview preparation schedule.

    Uses the AI generator when available and the local fallback schedule
    otherwise. The schedule is saved on the application.
    """
    rows = execute_raw_sql(
        "SELECT company_name, position, job_description FROM applications "
        "WHERE application_id = :aid AND student_id = :sid",
        {"aid": application_id, "sid": student["user_id"]}
    )
    if not rows:
        raise HTTPException(status_code=404, detail="Application not found")

    app_row = rows[0]
    schedule, source = prep_service.generate(
        app_row["job_description"] or "", app_row["position"], app_row["company_name"]
    )

    with get_db_session() as db:
        db.execute(
            text("""
                UPDATE applications SET ai_prep_schedule = :schedule, updated_at = CURRENT_TIMESTAMP
                WHERE application_id = :aid
            """),
            {"schedule": encode_json(schedule), "aid": application_id}
        )

    return PrepResponse(application_id=application_id, source=source, prep_schedule=schedule)
