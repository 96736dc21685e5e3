"""
Credit Ledger Service

HOW IT WORKS:
Every credit-earning action appends one row to credit_events and bumps
users.total_credits with an atomic SQL increment, both inside the caller's
transaction:

    INSERT INTO credit_events ... ON CONFLICT DO NOTHING
    UPDATE users SET total_credits = total_credits + :delta

- The unique (student_id, source_type, source_id) key means a course or
  project is credited at most once, even if completion is retried or
  raced from two sessions.
- The increment happens in the database, so concurrent awards never lose
  an update the way a read-modify-write would.
- total_credits is a materialized fold over the ledger and never goes
  down. reconcile_total_credits() (scripts/reconcile_credits.py) raises a
  total that fell behind its events and leaves a higher one alone.
"""

from typing import Iterable, List, Mapping

import structlog
from sqlalchemy import text
from sqlalchemy.orm import Session

from app.db.postgres import get_db_session, execute_raw_sql
from app.schemas.schemas import CreditSource

logger = structlog.get_logger(__name__)

# Flat reward for each proof-of-work project
PROJECT_CREDITS = 25


def fold_credits(events: Iterable[Mapping]) -> int:
    """Total implied by a sequence of credit events."""
    return sum(int(e["credits"]) for e in events)


def award_credits(
    db: Session,
    student_id: int,
    source_type: CreditSource,
    source_id: int,
    credits: int
) -> bool:
    """
    Record a credit award inside an open session.

    Returns:
        True if credits were added, False if this source was already credited
    """
    result = db.execute(
        text("""
            INSERT INTO credit_events (student_id, source_type, source_id, credits)
            VALUES (:student_id, :source_type, :source_id, :credits)
            ON CONFLICT (student_id, source_type, source_id) DO NOTHING
        """),
        {
            "student_id": student_id,
            "source_type": source_type.value,
            "source_id": source_id,
            "credits": credits
        }
    )
    if result.rowcount == 0:
        logger.info(
            "credits_already_awarded",
            student_id=student_id, source_type=source_type.value, source_id=source_id
        )
        return False

    db.execute(
        text("""
            UPDATE users
            SET total_credits = total_credits + :delta, updated_at = CURRENT_TIMESTAMP
            WHERE user_id = :id
        """),
        {"delta": credits, "id": student_id}
    )
    logger.info(
        "credits_awarded",
        student_id=student_id, source_type=source_type.value,
        source_id=source_id, credits=credits
    )
    return True


def get_total_credits(db: Session, student_id: int) -> int:
    """Read the stored total inside an open session."""
    result = db.execute(
        text("SELECT total_credits FROM users WHERE user_id = :id"),
        {"id": student_id}
    )
    row = result.fetchone()
    return int(row[0]) if row else 0


def list_credit_events(student_id: int) -> List[dict]:
    """Ledger rows for a student, oldest first."""
    return execute_raw_sql("""
        SELECT event_id, source_type, source_id, credits, created_at
        FROM credit_events
        WHERE student_id = :id
        ORDER BY event_id
    """, {"id": student_id})


def reconcile_total_credits(student_id: int) -> int:
    """
    Bring users.total_credits up to the ledger total.

    Only raises the stored value; a total above the ledger (hand edits,
    credits from before the ledger existed) is kept.

    Returns:
        The stored total after reconciling
    """
    with get_db_session() as db:
        result = db.execute(
            text("SELECT COALESCE(SUM(credits), 0) FROM credit_events WHERE student_id = :id"),
            {"id": student_id}
        )
        ledger_total = int(result.fetchone()[0])
        db.execute(
            text("""
                UPDATE users SET total_credits = :total, updated_at = CURRENT_TIMESTAMP
                WHERE user_id = :id AND total_credits < :total
            """),
            {"total": ledger_total, "id": student_id}
        )
        total = get_total_credits(db, student_id)
    logger.info("credits_reconciled", student_id=student_id, ledger_total=ledger_total, total=total)
    return total
