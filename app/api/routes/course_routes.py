"""
Skill Library Routes

GET /courses - Course catalog with own progress (search/category/university filters)
GET /courses/categories - Fixed category list
GET /courses/completed - Completed courses and aggregated skills
POST /courses/{course_id}/start - Start a course (idempotent)
POST /courses/{course_id}/complete - Complete a course and earn its credits
"""

from typing import List, Optional

import structlog
from fastapi import APIRouter, HTTPException, Depends, Query
from sqlalchemy import text

from app.db.postgres import get_db_session, execute_raw_sql
from app.core.auth import get_current_student
from app.services.credit_service import award_credits, get_total_credits
from app.services.ranking_service import aggregate_skills, classify_credits
from app.services.serializers import course_response
from app.utils.json_columns import decode_list
from app.schemas.schemas import (
    CreditSource, CourseResponse, CourseProgressResponse,
    CourseCompletionResponse, CompletedCoursesResponse
)

router = APIRouter(prefix="/courses", tags=["Skill Library"])
logger = structlog.get_logger(__name__)

COURSE_CATEGORIES = [
    "All", "Programming", "Frontend", "Backend", "AI/ML", "Cloud",
    "DevOps", "Design", "Soft Skills", "Computer Science"
]

# Progress recorded when a course is first opened
START_PROGRESS = 10

COURSE_COLUMNS = """
    c.course_id, c.title, c.description, c.category, c.skill_tags, c.credits,
    c.duration_hours, c.university_aligned, c.image_url
"""


def _matches_search(course: dict, search: str) -> bool:
    needle = search.lower()
    return needle in course["title"].lower() or any(
        needle in tag.lower() for tag in decode_list(course["skill_tags"])
    )


def _progress_by_course(student_id: int) -> dict:
    rows = execute_raw_sql(
        "SELECT course_id, progress, completed FROM student_courses WHERE student_id = :id",
        {"id": student_id}
    )
    return {r["course_id"]: r for r in rows}


@router.get("", response_model=List[CourseResponse])
async def list_courses(
    search: Optional[str] = Query(None, description="Title or skill tag"),
    category: Optional[str] = Query(None, description="Category, 'All' for no filter"),
    university_only: bool = Query(False, description="Only university-aligned courses"),
    student: dict = Depends(get_current_student)
):
    """Course catalog ordered by title, with the caller's progress merged in."""
    courses = execute_raw_sql(f"SELECT {COURSE_COLUMNS} FROM courses c ORDER BY c.title, c.course_id")

    if category and category != "All":
        courses = [c for c in courses if c["category"] == category]
    if university_only:
        courses = [c for c in courses if c["university_aligned"]]
    if search and search.strip():
        courses = [c for c in courses if _matches_search(c, search.strip())]

    progress = _progress_by_course(student["user_id"])
    return [course_response(c, progress.get(c["course_id"])) for c in courses]


@router.get("/categories", response_model=List[str])
async def list_categories():
    """Get the course category list."""
    return COURSE_CATEGORIES


@router.get("/completed", response_model=CompletedCoursesResponse)
async def completed_courses(student: dict = Depends(get_current_student)):
    """Completed courses (in completion order) and the skills they confer."""
    rows = execute_raw_sql(f"""
        SELECT {COURSE_COLUMNS}, sc.progress, sc.completed
        FROM student_courses sc
        JOIN courses c ON sc.course_id = c.course_id
        WHERE sc.student_id = :id AND sc.completed = TRUE
        ORDER BY sc.completed_at, sc.student_course_id
    """, {"id": student["user_id"]})

    skills = aggregate_skills(
        {"completed": bool(r["completed"]), "skill_tags": decode_list(r["skill_tags"])}
        for r in rows
    )
    return CompletedCoursesResponse(courses=[course_response(r, r) for r in rows], skills=skills)


def _require_course(db, course_id: int):
    result = db.execute(
        text("SELECT course_id, credits FROM courses WHERE course_id = :id"),
        {"id": course_id}
    )
    course = result.fetchone()
    if not course:
        raise HTTPException(status_code=404, detail="Course not found")
    return course


@router.post("/{course_id}/start", response_model=CourseProgressResponse)
async def start_course(course_id: int, student: dict = Depends(get_current_student)):
    """Start a course. Starting again leaves existing progress untouched."""
    with get_db_session() as db:
        _require_course(db, course_id)

        db.execute(
            text("""
                INSERT INTO student_courses (student_id, course_id, progress, completed)
                VALUES (:sid, :cid, :progress, FALSE)
                ON CONFLICT (student_id, course_id) DO NOTHING
            """),
            {"sid": student["user_id"], "cid": course_id, "progress": START_PROGRESS}
        )

        result = db.execute(
            text("SELECT progress, completed FROM student_courses WHERE student_id = :sid AND course_id = :cid"),
            {"sid": student["user_id"], "cid": course_id}
        )
        progress, completed = result.fetchone()

    return CourseProgressResponse(course_id=course_id, progress=progress, completed=bool(completed))


@router.post("/{course_id}/complete", response_model=CourseCompletionResponse)
async def complete_course(course_id: int, student: dict = Depends(get_current_student)):
    """
    Complete a course.

    Completion is one-way and credits are awarded once per course: the
    progress row, ledger insert and credit increment share one transaction.
    """
    with get_db_session() as db:
        course = _require_course(db, course_id)
        credits = int(course[1])

        db.execute(
            text("""
                INSERT INTO student_courses (student_id, course_id, progress, completed, completed_at)
                VALUES (:sid, :cid, 100, TRUE, CURRENT_TIMESTAMP)
                ON CONFLICT (student_id, course_id) DO UPDATE
                SET progress = 100,
                    completed = TRUE,
                    completed_at = COALESCE(student_courses.completed_at, CURRENT_TIMESTAMP)
            """),
            {"sid": student["user_id"], "cid": course_id}
        )

        awarded = award_credits(db, student["user_id"], CreditSource.course, course_id, credits)
        total = get_total_credits(db, student["user_id"])

    logger.info("course_completed", student_id=student["user_id"], course_id=course_id, total_credits=total)
    return CourseCompletionResponse(
        course_id=course_id,
        credits_awarded=credits if awarded else 0,
        total_credits=total,
        tier=classify_credits(total),
        already_completed=not awarded
    )
