#!/usr/bin/env python3
"""
Credit Reconcile Script

Compares every student's stored total_credits with the sum of their
credit_events and raises totals that fell behind. Totals are never lowered.

Usage: python scripts/reconcile_credits.py [student_id ...]
"""
import sys
sys.path.insert(0, '.')

from app.db.postgres import execute_raw_sql
from app.services.credit_service import reconcile_total_credits


def student_ids(argv):
    if argv:
        return [int(a) for a in argv]
    rows = execute_raw_sql("SELECT user_id FROM users WHERE role = 'student' ORDER BY user_id")
    return [r["user_id"] for r in rows]


def main(argv):
    print("=" * 50)
    print("BRIDGEUP - RECONCILE CREDITS")
    print("=" * 50)

    ids = student_ids(argv)
    for sid in ids:
        total = reconcile_total_credits(sid)
        print(f"    student {sid}: {total}")

    print(f"\n    ✅ Reconciled {len(ids)} student(s)")
    print("\n" + "=" * 50)


if __name__ == "__main__":
    main(sys.argv[1:])
