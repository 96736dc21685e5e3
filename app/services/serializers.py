"""
Row serializers - turn raw SQL rows (dicts) into response schemas.

Rows come back slightly differently from PostgreSQL and SQLite (JSON text
columns, 0/1 booleans), so every conversion goes through here.
"""

from typing import Iterable, List, Mapping, Optional

from app.schemas.schemas import (
    UserResponse, CourseResponse, ProjectResponse, ProjectImageResponse,
    CertificateResponse, ApplicationResponse, EventResponse, MentorResponse,
    BookingResponse, CandidateResponse
)
from app.services.ranking_service import classify_credits
from app.utils.json_columns import decode_list, decode_dict


def user_response(row: Mapping) -> UserResponse:
    credits = int(row.get("total_credits") or 0)
    return UserResponse(
        user_id=row["user_id"], email=row.get("email"), phone=row.get("phone"),
        role=row["role"], full_name=row["full_name"], avatar_url=row.get("avatar_url"),
        university=row.get("university"), company=row.get("company"), bio=row.get("bio"),
        github_url=row.get("github_url"), linkedin_url=row.get("linkedin_url"),
        leetcode_url=row.get("leetcode_url"), gfg_url=row.get("gfg_url"),
        total_credits=credits, tier=classify_credits(credits), created_at=row["created_at"]
    )


def course_response(row: Mapping, progress: Optional[Mapping] = None) -> CourseResponse:
    return CourseResponse(
        course_id=row["course_id"], title=row["title"], description=row.get("description"),
        category=row["category"], skill_tags=decode_list(row.get("skill_tags")),
        credits=row["credits"], duration_hours=row.get("duration_hours") or 0,
        university_aligned=bool(row.get("university_aligned")), image_url=row.get("image_url"),
        progress=int(progress["progress"]) if progress else 0,
        completed=bool(progress["completed"]) if progress else False
    )


def project_response(row: Mapping, images: Iterable[Mapping] = ()) -> ProjectResponse:
    return ProjectResponse(
        project_id=row["project_id"], student_id=row["student_id"], title=row["title"],
        description=row.get("description"), contribution_summary=row.get("contribution_summary"),
        project_type=row["project_type"], tech_stack=decode_list(row.get("tech_stack")),
        github_link=row.get("github_link"), live_link=row.get("live_link"),
        credits_earned=row["credits_earned"],
        images=[
            ProjectImageResponse(image_id=i["image_id"], image_url=i["image_url"], caption=i.get("caption"))
            for i in images
        ],
        created_at=row["created_at"]
    )


def certificate_response(row: Mapping) -> CertificateResponse:
    return CertificateResponse(
        certificate_id=row["certificate_id"], title=row["title"], issuer=row["issuer"],
        issue_date=row.get("issue_date"), image_url=row["image_url"],
        verified=bool(row.get("verified")), created_at=row["created_at"]
    )


def application_response(row: Mapping) -> ApplicationResponse:
    return ApplicationResponse(
        application_id=row["application_id"], company_name=row["company_name"],
        position=row["position"], job_description=row.get("job_description"),
        status=row["status"], notes=row.get("notes"), applied_date=row.get("applied_date"),
        deadline=row.get("deadline"), ai_prep_schedule=decode_dict(row.get("ai_prep_schedule")),
        created_at=row["created_at"], updated_at=row["updated_at"]
    )


def event_response(row: Mapping) -> EventResponse:
    return EventResponse(
        event_id=row["event_id"], title=row["title"], description=row.get("description"),
        event_type=row["event_type"], start_date=row["start_date"], end_date=row.get("end_date"),
        created_at=row["created_at"]
    )


def mentor_response(row: Mapping) -> MentorResponse:
    return MentorResponse(
        mentor_id=row["mentor_id"], name=row["name"], title=row["title"],
        company=row.get("company"), university=row.get("university"),
        expertise=decode_list(row.get("expertise")), bio=row.get("bio"),
        avatar_url=row.get("avatar_url"),
        available_slots=decode_dict(row.get("available_slots")) or {}
    )


def booking_response(row: Mapping, mentor: Optional[Mapping] = None) -> BookingResponse:
    return BookingResponse(
        booking_id=row["booking_id"], mentor_id=row["mentor_id"], booking_date=row["booking_date"],
        agenda=row["agenda"], status=row["status"], meeting_link=row.get("meeting_link"),
        created_at=row["created_at"], mentor=mentor_response(mentor) if mentor else None
    )


def candidate_response(row: Mapping) -> CandidateResponse:
    credits = int(row.get("total_credits") or 0)
    return CandidateResponse(
        user_id=row["user_id"], full_name=row["full_name"], email=row.get("email"),
        university=row.get("university"), avatar_url=row.get("avatar_url"), bio=row.get("bio"),
        github_url=row.get("github_url"), linkedin_url=row.get("linkedin_url"),
        leetcode_url=row.get("leetcode_url"), gfg_url=row.get("gfg_url"),
        total_credits=credits, tier=classify_credits(credits), skills=row.get("skills") or []
    )


def candidate_responses(rows: Iterable[Mapping]) -> List[CandidateResponse]:
    return [candidate_response(r) for r in rows]
