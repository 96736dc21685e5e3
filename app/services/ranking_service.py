"""
Ranking Service - credit tiers and candidate matching.

PURPOSE:
The rules recruiters see on every screen (profile view, candidate search,
overview):
1. classify_credits  - credit total -> tier
2. filter_candidates - free-text + skill-set narrowing
3. sort_candidates   - order by total credits
4. aggregate_skills  - a student's skills from completed courses

All functions are pure and work on already-fetched rows (plain dicts),
so they never fail for domain reasons.
"""

from typing import Iterable, List, Mapping, Optional, Sequence

from app.schemas.schemas import CreditTier


# ============================================================
# CREDIT TIERS
# ============================================================

# (tier, inclusive lower bound), highest first
TIER_THRESHOLDS = [
    (CreditTier.expert, 200),
    (CreditTier.advanced, 100),
    (CreditTier.intermediate, 50),
    (CreditTier.beginner, 0),
]


def classify_credits(total: int) -> CreditTier:
    """
    Map a credit total to its tier.

    Lower bounds are inclusive: 50 is Intermediate, 100 Advanced,
    200 Expert. Anything below 50 (negative totals included) is Beginner.
    """
    for tier, lower_bound in TIER_THRESHOLDS:
        if total >= lower_bound:
            return tier
    return CreditTier.beginner


def tier_ranges() -> List[dict]:
    """Tier table shown on the recruiter overview, lowest tier first."""
    ranges = []
    upper: Optional[int] = None
    for tier, lower_bound in TIER_THRESHOLDS:
        label = f"{lower_bound}+" if upper is None else f"{lower_bound}-{upper}"
        ranges.append({
            "tier": tier,
            "min_credits": lower_bound,
            "max_credits": upper,
            "label": label
        })
        upper = lower_bound - 1
    return list(reversed(ranges))


# ============================================================
# SKILL AGGREGATION
# ============================================================

def aggregate_skills(course_records: Iterable[Mapping]) -> List[str]:
    """
    Union of skill_tags over a student's completed course records.

    Records carrying completed=False are skipped. Duplicates are removed;
    the first-seen order is kept so the result is stable for display.
    """
    seen = set()
    skills = []
    for record in course_records:
        if not record.get("completed", True):
            continue
        for tag in record.get("skill_tags") or []:
            if tag not in seen:
                seen.add(tag)
                skills.append(tag)
    return skills


# ============================================================
# CANDIDATE FILTER / SORT
# ============================================================

def _matches_query(candidate: Mapping, query: str) -> bool:
    if not query:
        return True
    needle = query.lower()
    if needle in (candidate.get("full_name") or "").lower():
        return True
    if needle in (candidate.get("university") or "").lower():
        return True
    return any(needle in skill.lower() for skill in candidate.get("skills") or [])


def _matches_skills(candidate: Mapping, selected_skills: Sequence[str]) -> bool:
    if not selected_skills:
        return True
    candidate_skills = set(candidate.get("skills") or [])
    return any(skill in candidate_skills for skill in selected_skills)


def filter_candidates(
    candidates: Iterable[Mapping],
    query: str = "",
    selected_skills: Sequence[str] = ()
) -> List[Mapping]:
    """
    Narrow a candidate list.

    A candidate is kept when the query is a case-insensitive substring of
    its name, university or any skill, AND it has at least one of the
    selected skills (an empty selection keeps everyone). Input order is
    preserved, so applying the same filter twice changes nothing.
    """
    return [
        c for c in candidates
        if _matches_query(c, query or "") and _matches_skills(c, selected_skills)
    ]


def sort_candidates(candidates: Iterable[Mapping], descending: bool = True) -> List[Mapping]:
    """
    Order candidates by total_credits.

    Stable in both directions: candidates with equal credits keep their
    prior list order.
    """
    key = (lambda c: -(c.get("total_credits") or 0)) if descending else (lambda c: c.get("total_credits") or 0)
    return sorted(candidates, key=key)
