"""
Candidate Service - recruiter-facing search over student profiles.

HOW IT WORKS:
1. Load every active student (registration order is the base order)
2. Attach skills aggregated from their completed courses
3. Narrow with filter_candidates (free text + selected skills)
4. Order with sort_candidates (total credits, stable)
"""

from collections import defaultdict
from typing import Dict, List, Optional, Sequence

from app.db.postgres import execute_raw_sql
from app.schemas.schemas import CreditTier
from app.services.ranking_service import (
    aggregate_skills, classify_credits, filter_candidates, sort_candidates
)
from app.utils.json_columns import decode_list

CANDIDATE_COLUMNS = """
    u.user_id, u.full_name, u.email, u.university, u.avatar_url, u.bio,
    u.github_url, u.linkedin_url, u.leetcode_url, u.gfg_url, u.total_credits
"""


def _completed_course_records(student_id: Optional[int] = None) -> Dict[int, List[dict]]:
    """Completed course records grouped by student."""
    sql = """
        SELECT sc.student_id, sc.completed, c.skill_tags
        FROM student_courses sc
        JOIN courses c ON sc.course_id = c.course_id
        WHERE sc.completed = TRUE
    """
    params = {}
    if student_id is not None:
        sql += " AND sc.student_id = :sid"
        params["sid"] = student_id
    sql += " ORDER BY sc.completed_at, sc.student_course_id"

    grouped = defaultdict(list)
    for r in execute_raw_sql(sql, params):
        grouped[r["student_id"]].append({
            "completed": bool(r["completed"]),
            "skill_tags": decode_list(r["skill_tags"])
        })
    return grouped


def load_candidates() -> List[dict]:
    """All active students with their aggregated skills, in registration order."""
    students = execute_raw_sql(f"""
        SELECT {CANDIDATE_COLUMNS}
        FROM users u
        WHERE u.role = 'student' AND u.is_active = TRUE
        ORDER BY u.user_id
    """)
    records = _completed_course_records()
    for student in students:
        student["skills"] = aggregate_skills(records.get(student["user_id"], []))
    return students


def search_candidates(
    query: str = "",
    selected_skills: Sequence[str] = (),
    descending: bool = True
) -> List[dict]:
    """Filter then rank candidates by credits."""
    matches = filter_candidates(load_candidates(), query, selected_skills)
    return sort_candidates(matches, descending=descending)


def load_candidate(student_id: int) -> Optional[dict]:
    """A single student with aggregated skills, or None."""
    rows = execute_raw_sql(f"""
        SELECT {CANDIDATE_COLUMNS}
        FROM users u
        WHERE u.user_id = :id AND u.role = 'student' AND u.is_active = TRUE
    """, {"id": student_id})
    if not rows:
        return None
    candidate = rows[0]
    records = _completed_course_records(student_id)
    candidate["skills"] = aggregate_skills(records.get(student_id, []))
    return candidate


def tier_counts() -> Dict[str, int]:
    """Number of active students in each tier (every tier present)."""
    counts = {tier.value: 0 for tier in CreditTier}
    rows = execute_raw_sql("""
        SELECT total_credits FROM users
        WHERE role = 'student' AND is_active = TRUE
    """)
    for r in rows:
        counts[classify_credits(int(r["total_credits"] or 0)).value] += 1
    return counts
