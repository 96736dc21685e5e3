"""
Recruiter Routes

GET /candidates - Search and rank students by credits
GET /candidates/overview - Tier ranges, credit rules and tier distribution
GET /candidates/{candidate_id} - Full candidate profile
"""

from typing import List, Optional

from fastapi import APIRouter, HTTPException, Depends, Query

from app.db.postgres import execute_raw_sql
from app.core.auth import get_current_recruiter
from app.api.routes.project_routes import load_projects
from app.api.routes.certificate_routes import load_certificates
from app.services.candidate_service import search_candidates, load_candidate, tier_counts
from app.services.credit_service import PROJECT_CREDITS
from app.services.ranking_service import tier_ranges
from app.services.serializers import candidate_response, candidate_responses
from app.schemas.schemas import (
    CreditSource, SortOrder, CandidateListResponse, CandidateProfileResponse,
    CreditRule, TierRange, RecruiterOverviewResponse
)

router = APIRouter(prefix="/candidates", tags=["Recruiter"])

CREDIT_RULES = [
    CreditRule(source=CreditSource.course, description="Each completed course awards its listed credits"),
    CreditRule(source=CreditSource.project, description=f"Each proof-of-work project awards {PROJECT_CREDITS} credits"),
]


@router.get("", response_model=CandidateListResponse)
async def list_candidates(
    q: Optional[str] = Query(None, description="Matches name, university or skill"),
    skills: Optional[List[str]] = Query(None, description="Selected skills (any may match)"),
    order: SortOrder = Query(SortOrder.desc, description="Credit order"),
    recruiter: dict = Depends(get_current_recruiter)
):
    """
    Search students.

    Free text matches name, university or any skill (case-insensitive);
    at least one selected skill must be held exactly. Results are ranked by total
    credits, ties keep registration order.
    """
    candidates = search_candidates(
        query=q or "",
        selected_skills=skills or [],
        descending=order == SortOrder.desc
    )
    return CandidateListResponse(
        candidates=candidate_responses(candidates),
        total=len(candidates),
        order=order
    )


@router.get("/overview", response_model=RecruiterOverviewResponse)
async def get_overview(recruiter: dict = Depends(get_current_recruiter)):
    """How tiers and credits work, plus the current tier distribution."""
    counts = tier_counts()
    return RecruiterOverviewResponse(
        tiers=[TierRange(**t) for t in tier_ranges()],
        credit_rules=CREDIT_RULES,
        tier_counts=counts,
        total_students=sum(counts.values())
    )


@router.get("/{candidate_id}", response_model=CandidateProfileResponse)
async def get_candidate(candidate_id: int, recruiter: dict = Depends(get_current_recruiter)):
    """Candidate profile with projects, certificates and completed course count."""
    candidate = load_candidate(candidate_id)
    if not candidate:
        raise HTTPException(status_code=404, detail="Candidate not found")

    completed = execute_raw_sql(
        "SELECT COUNT(*) AS n FROM student_courses WHERE student_id = :id AND completed = TRUE",
        {"id": candidate_id}
    )[0]["n"]

    return CandidateProfileResponse(
        candidate=candidate_response(candidate),
        projects=load_projects(candidate_id),
        certificates=load_certificates(candidate_id),
        completed_courses=int(completed)
    )
