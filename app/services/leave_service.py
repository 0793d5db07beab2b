"""Approved leaves of a member."""

from datetime import date
from typing import List, Set

from sqlalchemy.orm import Session

from app.db.models import Leave
from app.services.standup_service import month_bounds


def get_approved_leaves(db: Session, member_id: int) -> List[Leave]:
    return (
        db.query(Leave)
        .filter(Leave.member_id == member_id, Leave.approved.is_(True))
        .order_by(Leave.date)
        .all()
    )


def leave_dates_in_month(leaves: List[Leave], year: int, month: int) -> Set[date]:
    """Dates of the given leaves that fall within the month."""
    start, end = month_bounds(year, month)
    return {leave.date for leave in leaves if start <= leave.date <= end}
