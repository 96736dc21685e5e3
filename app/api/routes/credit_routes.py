"""
Credit Routes

GET /credits - Own credit ledger, ledger total vs stored total, tier
"""

from fastapi import APIRouter, Depends

from app.core.auth import get_current_student
from app.services.credit_service import fold_credits, list_credit_events
from app.services.ranking_service import classify_credits
from app.schemas.schemas import CreditEventResponse, CreditSummaryResponse

router = APIRouter(prefix="/credits", tags=["Credits"])


@router.get("", response_model=CreditSummaryResponse)
async def get_credits(student: dict = Depends(get_current_student)):
    """Credit events (oldest first) with both totals; they agree unless the store was edited by hand."""
    total_credits = int(student["total_credits"])
    events = list_credit_events(student["user_id"])
    return CreditSummaryResponse(
        total_credits=total_credits,
        ledger_total=fold_credits(events),
        tier=classify_credits(total_credits),
        events=[CreditEventResponse(**e) for e in events]
    )
